"""Resolution wrappers that declare a dependency and expose it as ``value``.

``Inject`` resolves immediately, ``LazyInject`` on first read and
``WeakInject`` immediately but through a weak reference.
"""

import logging
import threading
import weakref
from typing import Any, Generic, Optional, TypeVar

from flexinject.dependency_container import DependencyContainer, _key_for
from flexinject.exceptions import NotWeakReferenceableError, RegistrationError
from flexinject.resolve_mode import ResolveMode

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Injection(Generic[T]):
    """Captured resolution parameters shared by every wrapper."""

    def __init__(
        self,
        dependency_type: Optional[Any] = None,
        *,
        container: Optional[DependencyContainer] = None,
        key: Optional[str] = None,
        mode: ResolveMode = ResolveMode.SHARED,
    ) -> None:
        if dependency_type is None and key is None:
            raise RegistrationError(
                f"{type(self).__name__} needs a dependency type or a key"
            )
        if not isinstance(mode, ResolveMode):
            raise TypeError(f"mode must be a ResolveMode, got {mode!r}")
        self._dependency_type = dependency_type
        self._container = container
        self._key = key
        self._mode = mode

    @property
    def key(self) -> str:
        """The registry key this wrapper resolves."""
        return self._key if self._key is not None else _key_for(self._dependency_type)

    @property
    def mode(self) -> ResolveMode:
        return self._mode

    def _resolve(self) -> T:
        container = self._container if self._container is not None else DependencyContainer.shared()
        if self._key is not None:
            return container.resolve(
                self._key, self._mode, expected_type=self._dependency_type
            )
        return container.resolve(self._dependency_type, self._mode)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r}, mode={self._mode.name})"


class Inject(_Injection[T]):
    """Resolve a dependency as soon as the wrapper is created.

    Args:
        dependency_type: The type to resolve, also used to check the value.
        container: The container to resolve from. Defaults to
            ``DependencyContainer.shared()``.
        key: An explicit key to resolve instead of the type's derived key.
        mode: ``ResolveMode.SHARED`` (default) or ``ResolveMode.NEW``.

    Raises:
        RegistrationError: If neither *dependency_type* nor *key* is given.
        ResolutionError: If the dependency cannot be resolved.

    Examples:
        >>> container = DependencyContainer()
        >>> container.register("greeting", lambda: "hello")
        >>> Inject(key="greeting", container=container).value
        'hello'
    """

    def __init__(
        self,
        dependency_type: Optional[Any] = None,
        *,
        container: Optional[DependencyContainer] = None,
        key: Optional[str] = None,
        mode: ResolveMode = ResolveMode.SHARED,
    ) -> None:
        super().__init__(dependency_type, container=container, key=key, mode=mode)
        self._value = self._resolve()

    @property
    def value(self) -> T:
        return self._value


class LazyInject(_Injection[T]):
    """Resolve a dependency the first time ``value`` is read.

    Creating the wrapper does not touch the container, so two objects may
    declare lazy dependencies on each other before either is registered.
    The resolved value is kept for the lifetime of the wrapper.  If the first
    read fails, nothing is kept and the next read tries again.
    Concurrent first reads resolve once; the other readers wait for it.

    Examples:
        >>> container = DependencyContainer()
        >>> lazy = LazyInject(key="late", container=container)
        >>> container.register("late", lambda: 42)
        >>> lazy.value
        42
    """

    _UNRESOLVED = object()

    def __init__(
        self,
        dependency_type: Optional[Any] = None,
        *,
        container: Optional[DependencyContainer] = None,
        key: Optional[str] = None,
        mode: ResolveMode = ResolveMode.SHARED,
    ) -> None:
        super().__init__(dependency_type, container=container, key=key, mode=mode)
        self._value: Any = self._UNRESOLVED
        self._lock = threading.RLock()

    @property
    def is_resolved(self) -> bool:
        return self._value is not self._UNRESOLVED

    @property
    def value(self) -> T:
        if self._value is self._UNRESOLVED:
            with self._lock:
                if self._value is self._UNRESOLVED:
                    self._value = self._resolve()
        return self._value


class WeakInject(_Injection[T]):
    """Resolve a dependency immediately and hold it through a weak reference.

    ``value`` returns the instance while something else keeps it alive and
    ``None`` afterwards.  With ``ResolveMode.SHARED`` the container's cache is
    that owner, so the value disappears once the key is removed from the
    container and no other reference remains.

    ``ResolveMode.NEW`` is accepted but rarely useful: nothing else owns the
    fresh instance, so it is usually gone before ``value`` is first read.

    Raises:
        NotWeakReferenceableError: If the resolved value does not support
            weak references (``int``, ``str``, ``tuple``, classes with
            ``__slots__`` lacking ``__weakref__`` ...).
    """

    def __init__(
        self,
        dependency_type: Optional[Any] = None,
        *,
        container: Optional[DependencyContainer] = None,
        key: Optional[str] = None,
        mode: ResolveMode = ResolveMode.SHARED,
    ) -> None:
        super().__init__(dependency_type, container=container, key=key, mode=mode)
        if mode is ResolveMode.NEW:
            logger.warning(
                "WeakInject for %r uses ResolveMode.NEW; the new instance has no "
                "other owner and may be collected immediately",
                self.key,
            )
        instance = self._resolve()
        try:
            self._ref: "weakref.ref[Any]" = weakref.ref(instance)
        except TypeError:
            raise NotWeakReferenceableError(self.key, type(instance)) from None

    @property
    def is_alive(self) -> bool:
        return self._ref() is not None

    @property
    def value(self) -> Optional[T]:
        return self._ref()
