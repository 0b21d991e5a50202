"""
Core Package

Contains the data structures, error types and event interface shared by
slice discovery and volume encoding.
"""

from .base import SliceSet, VolumeMetadata
from .errors import (
    VolumeError,
    VolumeIOError,
    DecodeError,
    DimensionMismatchError,
    ConfigError,
)
from .events import EncodeSummary, VolumeEventListener, notify

__all__ = [
    'SliceSet',
    'VolumeMetadata',
    'VolumeError',
    'VolumeIOError',
    'DecodeError',
    'DimensionMismatchError',
    'ConfigError',
    'EncodeSummary',
    'VolumeEventListener',
    'notify',
]
