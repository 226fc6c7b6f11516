"""Custom exceptions for the voxel simulation."""


class SandbaseError(Exception):
    """Base exception for simulation errors."""

    pass


class OutOfRangeError(SandbaseError, IndexError):
    """Raised when the grid store is accessed with an off-grid position."""

    pass


class ConfigNotFoundError(SandbaseError, FileNotFoundError):
    """Raised when a scene config file cannot be located."""

    pass
