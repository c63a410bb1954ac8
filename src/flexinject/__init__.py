"""flexinject — A lightweight dependency registry for Python."""

from flexinject.decorators import inject, injectable
from flexinject.dependency_container import DependencyContainer, dependency_key
from flexinject.exceptions import (
    DependencyNotRegisteredError,
    DependencyTypeMismatchError,
    FlexInjectError,
    NotWeakReferenceableError,
    RegistrationError,
    ResolutionError,
)
from flexinject.injection import Inject, LazyInject, WeakInject
from flexinject.resolve_mode import ResolveMode

__all__ = [
    "DependencyContainer",
    "dependency_key",
    "ResolveMode",
    "Inject",
    "LazyInject",
    "WeakInject",
    "FlexInjectError",
    "RegistrationError",
    "ResolutionError",
    "DependencyNotRegisteredError",
    "DependencyTypeMismatchError",
    "NotWeakReferenceableError",
    "inject",
    "injectable",
]
