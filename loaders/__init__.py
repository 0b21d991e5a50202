"""
Loaders Package

Contains slice discovery and decoding for image stacks.
"""

from .slice_loader import (
    SliceDiscovery,
    discover_slices,
    read_dimensions,
    read_slice,
)

__all__ = [
    'SliceDiscovery',
    'discover_slices',
    'read_dimensions',
    'read_slice',
]
