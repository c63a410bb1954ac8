"""Custom exceptions for the flexinject registry."""

from typing import Any, Optional


class FlexInjectError(Exception):
    """Base class for every error raised by flexinject."""


class RegistrationError(FlexInjectError):
    """Raised when a registration or wrapper declaration is invalid.

    Examples:
        >>> raise RegistrationError("factory must be callable, got int")
        Traceback (most recent call last):
            ...
        flexinject.exceptions.RegistrationError: factory must be callable, got int
    """


class ResolutionError(FlexInjectError):
    """Raised when a dependency cannot be resolved.

    Args:
        message: Description of the resolution failure.
        key: The registry key that was being resolved.
    """

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


class DependencyNotRegisteredError(ResolutionError):
    """Raised when no factory is registered under the requested key.

    Examples:
        >>> raise DependencyNotRegisteredError("app.Database")
        Traceback (most recent call last):
            ...
        flexinject.exceptions.DependencyNotRegisteredError: No dependency registered for 'app.Database'
    """

    def __init__(self, key: str) -> None:
        super().__init__(f"No dependency registered for {key!r}", key=key)


class DependencyTypeMismatchError(ResolutionError):
    """Raised when the resolved value is not an instance of the requested type."""

    def __init__(self, key: str, expected_type: Any, actual_type: type) -> None:
        expected = getattr(expected_type, "__qualname__", repr(expected_type))
        super().__init__(
            f"Dependency registered for {key!r} is {actual_type.__qualname__}, "
            f"expected {expected}",
            key=key,
        )
        self.expected_type = expected_type
        self.actual_type = actual_type


class NotWeakReferenceableError(ResolutionError):
    """Raised when a weakly injected value does not support weak references."""

    def __init__(self, key: str, actual_type: type) -> None:
        super().__init__(
            f"Dependency registered for {key!r} is {actual_type.__qualname__}, "
            f"which cannot be weakly referenced",
            key=key,
        )
        self.actual_type = actual_type
