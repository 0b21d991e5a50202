"""
Error Types

Exceptions raised while discovering slices and encoding volumes.
All of them derive from VolumeError so callers can report any
failure of a run with a single handler.
"""

from pathlib import Path
from typing import Optional, Tuple


class VolumeError(Exception):
    """Base class for all slice discovery and volume encoding errors."""


class VolumeIOError(VolumeError):
    """A file system or stream operation failed (open, read, write, flush)."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class DecodeError(VolumeError):
    """A file could not be parsed as image data."""

    def __init__(self, path: Path, reason: str = ""):
        message = f'"{path}" is not a readable image'
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path


class DimensionMismatchError(VolumeError):
    """
    Two slices of the same stack have different dimensions.

    Attributes:
        expected: (width, height) of the reference slice
        actual: (width, height) of the offending slice
        reference_path: Path of the reference slice
        path: Path of the offending slice
    """

    def __init__(
        self,
        expected: Tuple[int, int],
        actual: Tuple[int, int],
        path: Path,
        reference_path: Optional[Path] = None,
    ):
        self.expected = expected
        self.actual = actual
        self.path = path
        self.reference_path = reference_path
        super().__init__(
            f"Images have different dimensions: first was "
            f"{expected[0]}×{expected[1]}, but \"{path}\" has "
            f"{actual[0]}×{actual[1]}"
        )


class ConfigError(VolumeError):
    """A value does not fit its on-disk field or a parameter is out of range."""
