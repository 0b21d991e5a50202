"""
Slice Stack Loader

Finds the BMP slices of a volume in a directory, checks that they form a
homogeneous stack, and decodes individual slices to 8-bit luma arrays.
"""

from pathlib import Path
from typing import Optional, List, Tuple
import logging

import numpy as np
from PIL import Image, UnidentifiedImageError

from config import DiscoveryConfig, DEFAULT_DISCOVERY
from core.base import SliceSet
from core.errors import VolumeIOError, DecodeError, DimensionMismatchError
from core.events import VolumeEventListener, notify


def _image_error(path: Path, error: Exception) -> Exception:
    """Map an error raised while opening an image to a VolumeError."""
    if isinstance(error, UnidentifiedImageError):
        return DecodeError(path, "cannot identify image file")
    # Pillow reports malformed content as OSError without an errno
    if isinstance(error, OSError) and error.errno is not None:
        return VolumeIOError(f'Failed to read "{path}": {error.strerror}', path)
    return DecodeError(path, str(error))


def read_dimensions(path: Path) -> Tuple[int, int]:
    """
    Decode an image and return its (width, height).

    The pixel data is decoded in full so that a corrupt body is reported
    here rather than when the slice is encoded.

    Raises:
        DecodeError: If the file is not a readable image
        VolumeIOError: If the file cannot be opened
    """
    try:
        with Image.open(path) as img:
            img.load()
            return img.size
    except (OSError, ValueError, SyntaxError) as e:
        raise _image_error(path, e) from e


def read_slice(path: Path) -> np.ndarray:
    """
    Decode an image to single-channel 8-bit samples.

    Args:
        path: Image file

    Returns:
        uint8 array of shape (height, width), row-major

    Raises:
        DecodeError: If the file is not a readable image
        VolumeIOError: If the file cannot be opened
    """
    try:
        with Image.open(path) as img:
            luma = img.convert("L")
            return np.asarray(luma, dtype=np.uint8)
    except (OSError, ValueError, SyntaxError) as e:
        raise _image_error(path, e) from e


class SliceDiscovery:
    """
    Discovers a stack of equally sized slice images in a directory.

    Only the top level of the directory is scanned. File extensions are
    matched case-insensitively. The returned paths are sorted ascending,
    so zero-padded numeric file names give the expected slice order.
    """

    def __init__(self, config: DiscoveryConfig = DEFAULT_DISCOVERY):
        self.config = config

    @property
    def extension(self) -> str:
        ext = self.config.extension.lower()
        return ext if ext.startswith(".") else f".{ext}"

    def is_candidate(self, path: Path) -> bool:
        """Check if a path has the slice extension."""
        return path.name.lower().endswith(self.extension)

    def find_candidates(self, directory: Path) -> List[Path]:
        """
        List matching files in scan order (not sorted).

        Raises:
            VolumeIOError: If the directory cannot be scanned
        """
        try:
            return [
                entry for entry in directory.iterdir()
                if self.is_candidate(entry) and entry.is_file()
            ]
        except OSError as e:
            raise VolumeIOError(
                f'Failed to scan "{directory}": {e.strerror or e}', directory
            ) from e

    def discover(
        self,
        directory: str | Path,
        listener: Optional[VolumeEventListener] = None
    ) -> Optional[SliceSet]:
        """
        Find and validate the slices in a directory.

        Args:
            directory: Directory to scan
            listener: Optional receiver of progress notifications

        Returns:
            SliceSet with sorted paths, or None if no matching file exists

        Raises:
            VolumeIOError: If the directory or a file cannot be read
            DecodeError: If a matching file is not an image
            DimensionMismatchError: On the first slice whose size differs
        """
        directory = Path(directory)
        notify(listener, "search_started", directory)

        paths = self.find_candidates(directory)
        if not paths:
            logging.info(f"No {self.extension} files found in {directory}")
            notify(listener, "nothing_found", directory)
            return None

        reference = paths[0]
        width, height = read_dimensions(reference)
        logging.debug(f"Reference slice {reference.name}: {width}x{height}")

        for path in paths:
            size = read_dimensions(path)
            if size != (width, height):
                raise DimensionMismatchError(
                    expected=(width, height),
                    actual=size,
                    path=path,
                    reference_path=reference,
                )
            notify(listener, "slice_checked", path)

        paths.sort(key=str)

        logging.info(f"Found {len(paths)} slices of {width}x{height} in {directory}")
        notify(listener, "slices_found", len(paths))

        return SliceSet(paths=tuple(paths), width=width, height=height)


def discover_slices(
    directory: str | Path,
    listener: Optional[VolumeEventListener] = None,
    config: DiscoveryConfig = DEFAULT_DISCOVERY
) -> Optional[SliceSet]:
    """Discover the slice stack in a directory with the given configuration."""
    return SliceDiscovery(config).discover(directory, listener)
