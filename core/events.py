"""
Progress and Status Events

The core reports what it is doing through a listener object instead of
printing. Presentation layers subclass VolumeEventListener and override
the hooks they care about.
"""

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Optional

from .base import VolumeMetadata


@dataclass
class EncodeSummary:
    """Result of a finished encoding run."""
    output_path: Path
    width: int
    height: int
    depth: int
    bytes_written: int
    elapsed: float  # seconds

    @property
    def dimensions(self) -> str:
        return f"{self.width}×{self.height}×{self.depth}"


class VolumeEventListener:
    """
    Receives progress notifications from discovery and encoding.

    Every hook is a no-op by default. Hooks are observational only:
    exceptions raised by a hook are logged and otherwise ignored.
    """

    def search_started(self, directory: Path) -> None:
        pass

    def slice_checked(self, path: Path) -> None:
        pass

    def nothing_found(self, directory: Path) -> None:
        pass

    def slices_found(self, count: int) -> None:
        pass

    def encode_started(self, metadata: VolumeMetadata, output_path: Path) -> None:
        pass

    def slice_encoded(self, index: int, path: Path) -> None:
        pass

    def encode_finished(self, summary: EncodeSummary) -> None:
        pass


def notify(listener: Optional[VolumeEventListener], hook: str, *args) -> None:
    """
    Call a listener hook without letting it fail the run.

    Args:
        listener: Listener to notify, or None
        hook: Name of the VolumeEventListener method to call
        *args: Arguments passed to the hook
    """
    if listener is None:
        return
    try:
        getattr(listener, hook)(*args)
    except Exception as e:
        logging.warning(f"Progress listener failed in {hook}: {e}")
