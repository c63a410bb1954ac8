"""Resolution policies for registered dependencies."""

from enum import Enum


class ResolveMode(Enum):
    """Defines how a dependency is resolved from the container.

    Attributes:
        NEW: A new instance is created by the factory on every resolution.
        SHARED: The first instance is cached and returned on every later
            resolution until the key is removed.

    Examples:
        >>> ResolveMode.NEW
        <ResolveMode.NEW: 'new'>
        >>> ResolveMode.SHARED
        <ResolveMode.SHARED: 'shared'>
    """

    NEW = "new"
    SHARED = "shared"
