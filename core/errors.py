"""
errors.py - Exception Types

Contains:
- RenameToolError: Base class
- ConfigError: Invalid mutation configuration (raised at edit time)
- InvalidPathError: Navigation target or path edit that cannot be used
- SnapshotError: Directory could not be enumerated
"""

from typing import Optional


class RenameToolError(Exception):
    """Base class for all errors raised by the rename tool"""


class ConfigError(RenameToolError, ValueError):
    """Mutation configuration is invalid"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class InvalidPathError(RenameToolError, ValueError):
    """Path does not canonicalize or does not exist"""

    def __init__(self, path: str, reason: str = "Directory does not exist"):
        super().__init__(f"{reason}: {path}")
        self.path = path
        self.reason = reason


class SnapshotError(RenameToolError, OSError):
    """Directory listing failed as a whole"""

    def __init__(self, directory_path: str, cause: Optional[BaseException] = None):
        message = f"Cannot read directory: {directory_path}"
        if cause is not None:
            message = f"{message} ({cause})"
        super().__init__(message)
        self.directory_path = directory_path
        self.cause = cause
