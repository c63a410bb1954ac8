"""Decorator helpers for flexinject.

These decorators provide cleaner syntax for registering factories and for
filling function arguments from a container.
"""

import functools
import inspect
from typing import Any, Callable, Dict, Optional, TypeVar, Union, overload

from flexinject.dependency_container import DependencyContainer
from flexinject.exceptions import RegistrationError
from flexinject.resolve_mode import ResolveMode

T = TypeVar("T", bound=type)
F = TypeVar("F", bound=Callable[..., Any])


@overload
def injectable(target: T) -> T: ...


@overload
def injectable(target: F) -> F: ...


@overload
def injectable(
    *,
    interface: Optional[Any] = ...,
    key: Optional[str] = ...,
    container: Optional[DependencyContainer] = ...,
) -> Callable[[Union[T, F]], Union[T, F]]: ...


def injectable(
    target: "T | F | None" = None,
    *,
    interface: Optional[Any] = None,
    key: Optional[str] = None,
    container: Optional[DependencyContainer] = None,
) -> Any:
    """Register a class or zero-argument factory function with a container.

    Can be used bare (``@injectable``) or with arguments
    (``@injectable(interface=Storage, key="primary")``).

    **On a class:** the class is the factory and is registered under itself
    unless ``interface`` or ``key`` is given.

    **On a function:** the function is the factory and is registered under
    its **return type annotation** unless ``interface`` or ``key`` is given.

    Args:
        target: The class or function (supplied automatically when used bare).
        interface: The type to register under.
        key: An explicit string key to register under; takes precedence
            over ``interface``.
        container: The container to register into. Defaults to
            ``DependencyContainer.shared()``.

    Returns:
        The class or function, unmodified (but now registered).

    Raises:
        RegistrationError: If used on a function without a return annotation
            and without ``interface`` or ``key``.

    Examples:
        >>> container = DependencyContainer()
        >>> @injectable(container=container)
        ... class Greeter:
        ...     def greet(self) -> str:
        ...         return "hello"
        >>> container.resolve(Greeter).greet()
        'hello'
    """
    def decorator(inner: Any) -> Any:
        registry = container if container is not None else DependencyContainer.shared()

        if key is not None:
            registry.register(key, inner)
            return inner
        if interface is not None:
            registry.register(interface, inner)
            return inner

        if inspect.isclass(inner):
            registry.register(inner, inner)
            return inner

        return_type = getattr(inner, "__annotations__", {}).get("return")
        if return_type is None:
            raise RegistrationError(
                f"@injectable on function '{inner.__name__}' requires a "
                f"return type annotation, an 'interface' or a 'key'"
            )
        registry.register(return_type, inner)
        return inner

    if target is not None:
        return decorator(target)
    return decorator


def inject(
    container: Optional[DependencyContainer] = None,
    mode: ResolveMode = ResolveMode.SHARED,
    **dependencies: Any,
) -> Callable[[F], F]:
    """Fill keyword arguments from a container at call time.

    Each keyword names a parameter of the wrapped function and maps it to the
    type or string key to resolve.  Arguments the caller supplies explicitly
    are left as-is; only the declared, missing ones are resolved.

    Args:
        container: The container to resolve from. Defaults to
            ``DependencyContainer.shared()`` at call time.
        mode: The ``ResolveMode`` used for every declared dependency.
        **dependencies: Parameter name to type or key.

    Raises:
        RegistrationError: If used bare (``@inject`` without parentheses),
            or if a declared name is not a keyword-passable parameter of
            the wrapped function.

    Examples:
        >>> container = DependencyContainer()
        >>> container.register("answer", lambda: 42)
        >>> @inject(container=container, n="answer")
        ... def show_number(n: int) -> str:
        ...     return str(n)
        >>> show_number()
        '42'
    """
    if container is not None and not isinstance(container, DependencyContainer):
        raise RegistrationError(
            f"@inject expects a DependencyContainer, got {type(container).__name__}; "
            f"use @inject(...) with parentheses"
        )

    def decorator(fn: F) -> F:
        sig = inspect.signature(fn)
        unknown = sorted(set(dependencies) - set(sig.parameters))
        if unknown:
            raise RegistrationError(
                f"@inject on '{fn.__name__}' declares unknown parameters: "
                f"{', '.join(unknown)}"
            )
        positional_only = sorted(
            name
            for name in dependencies
            if sig.parameters[name].kind is inspect.Parameter.POSITIONAL_ONLY
        )
        if positional_only:
            raise RegistrationError(
                f"@inject on '{fn.__name__}' cannot fill positional-only "
                f"parameters: {', '.join(positional_only)}"
            )

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            registry = container if container is not None else DependencyContainer.shared()
            bound = sig.bind_partial(*args, **kwargs)

            resolved: Dict[str, Any] = {}
            for name, target in dependencies.items():
                if name in bound.arguments:
                    continue
                resolved[name] = registry.resolve(target, mode)

            return fn(*args, **kwargs, **resolved)

        return wrapper  # type: ignore[return-value]

    return decorator
