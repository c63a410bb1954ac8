"""Main dependency registry for flexinject."""

import logging
import threading
import types
from typing import Any, Callable, Dict, List, Optional, Union, get_args, get_origin

from flexinject.exceptions import (
    DependencyNotRegisteredError,
    DependencyTypeMismatchError,
    RegistrationError,
)
from flexinject.resolve_mode import ResolveMode

logger = logging.getLogger(__name__)

Target = Union[type, str, Any]
Factory = Callable[[], Any]


def dependency_key(dependency_type: Any) -> str:
    """Return the registry key derived from a type.

    Classes map to their fully qualified name so that two classes with the
    same ``__name__`` in different modules never share a key.  Other typing
    constructs (``list[int]``, ``Optional[Foo]`` ...) map to their ``repr``.

    Distinct classes sharing a module and qualified name (a local class built
    by two calls of the same function, ``type("X", (), {})`` twice, a reloaded
    module) map to the same key.  Resolving such a key with the other class
    raises ``DependencyTypeMismatchError`` rather than returning a wrong value.

    Examples:
        >>> dependency_key(int)
        'builtins.int'
        >>> dependency_key(list[int])
        'list[int]'
    """
    if isinstance(dependency_type, type) and get_origin(dependency_type) is None:
        return f"{dependency_type.__module__}.{dependency_type.__qualname__}"
    return repr(dependency_type)


def _key_for(target: Target) -> str:
    if isinstance(target, str):
        return target
    if target is None:
        raise TypeError("A dependency target must be a type or a string key, got None")
    return dependency_key(target)


def _matches(value: Any, expected_type: Any) -> bool:
    """Check *value* against *expected_type* as far as the runtime allows.

    Generic aliases are checked against their origin, unions against each
    member.  Protocols that are not ``runtime_checkable`` and other typing
    constructs without a runtime class always match.
    """
    if expected_type is Any:
        return True
    origin = get_origin(expected_type)
    if origin is Union or origin is types.UnionType:
        return any(_matches(value, arg) for arg in get_args(expected_type))
    runtime_type = origin if origin is not None else expected_type
    if not isinstance(runtime_type, type):
        return True
    if getattr(runtime_type, "_is_protocol", False) and not getattr(
        runtime_type, "_is_runtime_protocol", False
    ):
        return True
    return isinstance(value, runtime_type)


class DependencyContainer:
    """A registry of dependency factories with shared-instance caching.

    Factories are registered under a type or a string key with ``register``
    and resolved with ``resolve``.  ``ResolveMode.NEW`` calls the factory on
    every resolution; ``ResolveMode.SHARED`` calls it once and caches the
    result until the key is removed.

    Type keys and string keys share one keyspace: registering under
    ``Database`` is the same as registering under ``"app.db.Database"`` when
    that is the class's fully qualified name.

    Re-registering a key does not drop an instance already cached for it
    under ``SHARED`` mode; call ``remove`` first to get a fresh one.

    All operations are guarded by a reentrant lock, so a container may be
    shared between threads and factories may resolve other dependencies from
    the same container.

    Examples:
        >>> container = DependencyContainer()
        >>> container.register("port", lambda: 8080)
        >>> container.resolve("port")
        8080
    """

    _shared: "Optional[DependencyContainer]" = None
    _shared_lock: threading.Lock = threading.Lock()

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._factories: Dict[str, Factory] = {}
        self._shared_instances: Dict[str, Any] = {}

    @classmethod
    def shared(cls) -> "DependencyContainer":
        """Return the process-wide default container, creating it on first use."""
        with cls._shared_lock:
            if cls._shared is None:
                cls._shared = cls()
            return cls._shared

    @classmethod
    def reset_shared(cls) -> None:
        """Discard the process-wide default container.

        Intended for use in tests to ensure a clean state between test cases.
        """
        with cls._shared_lock:
            previous, cls._shared = cls._shared, None
        if previous is not None:
            previous.remove_all()

    def register(self, target: Target, factory: Factory) -> None:
        """Register a factory under a type or a string key.

        A later registration for the same key replaces the factory.  An
        instance already cached for the key is kept.

        Args:
            target: The type whose derived key is used, or an explicit key.
            factory: A zero-argument callable producing the dependency.

        Raises:
            RegistrationError: If *factory* is not callable.

        Examples:
            >>> container = DependencyContainer()
            >>> container.register(list, list)
            >>> container.resolve(list, ResolveMode.NEW)
            []
        """
        if not callable(factory):
            raise RegistrationError(
                f"factory must be callable, got {type(factory).__name__}"
            )

        key = _key_for(target)
        with self._lock:
            if key in self._shared_instances:
                logger.debug(
                    "Re-registering %r keeps its cached shared instance", key
                )
            self._factories[key] = factory
        logger.debug("Registered factory for %r", key)

    def resolve(
        self,
        target: Target,
        mode: ResolveMode = ResolveMode.SHARED,
        expected_type: Any = None,
    ) -> Any:
        """Resolve a dependency from the container.

        Under ``SHARED`` a value is cached only after it passes the type check,
        so a mismatched first resolution runs the factory again next time.

        Args:
            target: The type or string key to resolve.
            mode: ``ResolveMode.SHARED`` (default) or ``ResolveMode.NEW``.
            expected_type: The type the value must be an instance of.
                Defaults to *target* when *target* is a type; a string key
                without *expected_type* returns the value unchecked.

        Returns:
            The resolved dependency instance.

        Raises:
            DependencyNotRegisteredError: If no factory is registered for
                the key.
            DependencyTypeMismatchError: If the value is not an instance of
                the expected type.

        Examples:
            >>> container = DependencyContainer()
            >>> container.register(dict, dict)
            >>> container.resolve(dict) is container.resolve(dict)
            True
            >>> container.resolve(dict, ResolveMode.NEW) is container.resolve(dict, ResolveMode.NEW)
            False
        """
        if not isinstance(mode, ResolveMode):
            raise TypeError(f"mode must be a ResolveMode, got {mode!r}")

        key = _key_for(target)
        if expected_type is None and not isinstance(target, str):
            expected_type = target

        with self._lock:
            if mode is ResolveMode.NEW:
                instance = self._create_instance(key)
                self._check_type(key, instance, expected_type)
                return instance

            if key in self._shared_instances:
                instance = self._shared_instances[key]
                self._check_type(key, instance, expected_type)
                return instance

            instance = self._create_instance(key)
            self._check_type(key, instance, expected_type)
            self._shared_instances[key] = instance
            logger.debug("Cached shared instance for %r", key)
            return instance

    def remove(self, target: Target) -> None:
        """Remove the factory and any shared instance for a type or key.

        Removing a key that was never registered is a no-op.
        """
        key = _key_for(target)
        with self._lock:
            self._factories.pop(key, None)
            self._shared_instances.pop(key, None)
        logger.debug("Removed %r", key)

    def remove_all(self) -> None:
        """Remove every factory and shared instance from the container."""
        with self._lock:
            self._factories.clear()
            self._shared_instances.clear()
        logger.debug("Removed all dependencies")

    def is_registered(self, target: Target) -> bool:
        """Return whether a factory is registered for a type or key."""
        key = _key_for(target)
        with self._lock:
            return key in self._factories

    def registered_keys(self) -> List[str]:
        """Return the keys that currently have a factory, sorted."""
        with self._lock:
            return sorted(self._factories)

    def __contains__(self, target: object) -> bool:
        return self.is_registered(target)

    def __len__(self) -> int:
        with self._lock:
            return len(self._factories)

    def _create_instance(self, key: str) -> Any:
        factory = self._factories.get(key)
        if factory is None:
            raise DependencyNotRegisteredError(key)
        return factory()

    @staticmethod
    def _check_type(key: str, instance: Any, expected_type: Any) -> None:
        if expected_type is None:
            return
        if not _matches(instance, expected_type):
            raise DependencyTypeMismatchError(key, expected_type, type(instance))
