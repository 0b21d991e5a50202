"""
Exporters Package

Contains exporters for compressed volume files.
"""

from .zstd_volume import (
    ZstdVolumeExporter,
    build_metadata_frame,
    encode_volume,
    transpose_slice,
)

__all__ = [
    'ZstdVolumeExporter',
    'build_metadata_frame',
    'encode_volume',
    'transpose_slice',
]
