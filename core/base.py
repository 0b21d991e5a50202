"""
Core Data Structures

Provides the data structures passed from slice discovery to the
volume encoder.
"""

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Tuple


@dataclass(frozen=True)
class SliceSet:
    """
    Validated, ordered stack of slice images.

    Attributes:
        paths: Slice paths sorted ascending; the order is the depth axis
        width: Common width of every slice in pixels
        height: Common height of every slice in pixels
    """
    paths: Tuple[Path, ...]
    width: int
    height: int

    def __post_init__(self):
        if not self.paths:
            raise ValueError("SliceSet requires at least one slice")
        if len(set(self.paths)) != len(self.paths):
            raise ValueError("SliceSet paths must be unique")

    @property
    def depth(self) -> int:
        """Number of slices."""
        return len(self.paths)

    @property
    def shape(self) -> Tuple[int, int, int]:
        """Volume shape as (width, height, depth)."""
        return (self.width, self.height, self.depth)

    @property
    def num_samples(self) -> int:
        """Total number of voxels in the volume."""
        return self.width * self.height * self.depth


@dataclass(frozen=True)
class VolumeMetadata:
    """Shape and sample type of an encoded volume."""
    width: int
    height: int
    depth: int
    sample_type: str = "uint8"

    @classmethod
    def from_slice_set(cls, slice_set: SliceSet, sample_type: str = "uint8") -> "VolumeMetadata":
        return cls(
            width=slice_set.width,
            height=slice_set.height,
            depth=slice_set.depth,
            sample_type=sample_type,
        )

    def to_json(self) -> str:
        """
        Serialize to the compact metadata record.

        Key order and spelling are part of the file format, e.g.
        {"xSize":2,"ySize":2,"zSize":2,"type":"uint8"}
        """
        record = {
            "xSize": self.width,
            "ySize": self.height,
            "zSize": self.depth,
            "type": self.sample_type,
        }
        return json.dumps(record, separators=(",", ":"))
