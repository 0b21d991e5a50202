"""
Console Reporter

Renders discovery and encoding events in the terminal: a spinner while
slices are checked, a progress bar while they are encoded, and one
status line per finished phase.
"""

import logging
import math
import sys
import time
from pathlib import Path
from typing import Optional, TextIO

from tqdm import tqdm

from core.base import VolumeMetadata
from core.events import EncodeSummary, VolumeEventListener
from .style import emoji, format_duration

# Seconds between progress refreshes
REFRESH_INTERVAL = 0.5


class TqdmLogHandler(logging.Handler):
    """
    Logging handler that writes through tqdm.

    Keeps log lines from tearing an active progress bar.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__()
        self.stream = stream

    def emit(self, record):
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream or sys.stderr)
        except Exception:
            self.handleError(record)


class ConsoleReporter(VolumeEventListener):
    """
    Terminal presentation of a run.

    Status lines go to `stream` (stdout by default); the spinner and the
    progress bar are drawn on `progress_stream` (stderr by default) and
    cleared when their phase ends.
    """

    def __init__(
        self,
        label: str = "BMP",
        stream: Optional[TextIO] = None,
        progress_stream: Optional[TextIO] = None,
        disable_progress: Optional[bool] = None
    ):
        """
        Initialize the reporter.

        Args:
            label: Name of the slice file type shown in messages
            stream: Stream for status lines
            progress_stream: Stream for the spinner and progress bar
            disable_progress: Hide progress bars; None hides them when
                progress_stream is not a terminal
        """
        self.label = label
        self.stream = stream or sys.stdout
        self.progress_stream = progress_stream or sys.stderr
        self.disable_progress = disable_progress
        self._start = time.perf_counter()
        self._spinner: Optional[tqdm] = None
        self._bar: Optional[tqdm] = None

    def _print(self, text: str) -> None:
        print(text, file=self.stream)

    def _close_spinner(self) -> None:
        if self._spinner is not None:
            self._spinner.close()
            self._spinner = None

    def _close_bar(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None

    def close(self) -> None:
        """Remove any progress display left by an interrupted run."""
        self._close_spinner()
        self._close_bar()

    # Discovery

    def search_started(self, directory: Path) -> None:
        self._start = time.perf_counter()
        self._spinner = tqdm(
            desc=f'Searching for {self.label} files in "{directory}"',
            bar_format="{desc} {n_fmt}",
            file=self.progress_stream,
            leave=False,
            mininterval=REFRESH_INTERVAL,
            disable=self.disable_progress,
        )

    def slice_checked(self, path: Path) -> None:
        if self._spinner is not None:
            self._spinner.update(1)

    def nothing_found(self, directory: Path) -> None:
        self._close_spinner()
        self._print(
            f'{emoji("frowning_face", self.stream)}'
            f'No {self.label} files found in "{directory}"'
        )

    def slices_found(self, count: int) -> None:
        self._close_spinner()
        self._print(f'{emoji("page_with_curl", self.stream)}Found {count} {self.label} file(s)')

    # Encoding

    def encode_started(self, metadata: VolumeMetadata, output_path: Path) -> None:
        width = int(math.log10(metadata.depth)) + 1 if metadata.depth > 0 else 1
        self._bar = tqdm(
            total=metadata.depth,
            desc="Processing",
            bar_format=(
                f"{{desc}} {{n_fmt:>{width}}}/{{total_fmt}} {{postfix}} "
                f"({{elapsed}}, ETA {{remaining}})"
            ),
            file=self.progress_stream,
            leave=False,
            mininterval=REFRESH_INTERVAL,
            disable=self.disable_progress,
        )

    def slice_encoded(self, index: int, path: Path) -> None:
        if self._bar is not None:
            self._bar.set_postfix_str(path.name, refresh=False)
            self._bar.update(1)

    def encode_finished(self, summary: EncodeSummary) -> None:
        self._close_bar()
        elapsed = time.perf_counter() - self._start
        self._print(
            f'{emoji("check_mark_button", self.stream)}Finished writing '
            f'{summary.dimensions} voxels to "{summary.output_path}" '
            f'in {format_duration(elapsed)}'
        )
