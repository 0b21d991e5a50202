"""
Pytest configuration and shared fixtures for slice stacks.
"""

from pathlib import Path
from typing import Dict, List

import numpy as np
import pytest
from PIL import Image

from core.events import VolumeEventListener


def write_bmp(path: Path, pixels) -> Path:
    """Save a 2-D uint8 array as an 8-bit grayscale BMP."""
    Image.fromarray(np.asarray(pixels, dtype=np.uint8)).save(path, format="BMP")
    return path


class RecordingListener(VolumeEventListener):
    """Listener that records every hook call as (name, args)."""

    def __init__(self):
        self.events: List[tuple] = []

    def _record(self, name, *args):
        self.events.append((name, args))

    def search_started(self, directory):
        self._record("search_started", directory)

    def slice_checked(self, path):
        self._record("slice_checked", path)

    def nothing_found(self, directory):
        self._record("nothing_found", directory)

    def slices_found(self, count):
        self._record("slices_found", count)

    def encode_started(self, metadata, output_path):
        self._record("encode_started", metadata, output_path)

    def slice_encoded(self, index, path):
        self._record("slice_encoded", index, path)

    def encode_finished(self, summary):
        self._record("encode_finished", summary)

    def names(self) -> List[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def make_stack(tmp_path):
    """Factory writing {filename: pixels} into a fresh directory."""
    counter = {"n": 0}

    def _make(slices: Dict[str, np.ndarray]) -> Path:
        counter["n"] += 1
        directory = tmp_path / f"stack{counter['n']}"
        directory.mkdir()
        for name, pixels in slices.items():
            write_bmp(directory / name, pixels)
        return directory

    return _make


@pytest.fixture
def valid_stack(make_stack):
    """Two 2x2 slices with distinct sample values."""
    return make_stack({
        "1.bmp": [[1, 2], [3, 4]],
        "2.bmp": [[5, 6], [7, 8]],
    })


@pytest.fixture
def listener():
    return RecordingListener()
