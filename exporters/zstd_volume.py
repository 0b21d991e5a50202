"""
Zstandard Volume Exporter

Writes a slice stack as a single Zstandard-compressed volume in
column-major (Fortran) order, preceded by a metadata frame describing
the volume shape and sample type.

File layout (little-endian):
    u32   METADATA_FRAME_MAGIC
    u32   length M of the metadata record
    M     metadata JSON, e.g. {"xSize":W,"ySize":H,"zSize":D,"type":"uint8"}
    ...   Zstandard frame holding W*H*D bytes
"""

from pathlib import Path
from typing import Optional
import logging
import struct
import time

import numpy as np
import zstandard as zstd

from config import EncoderConfig, DEFAULT_ENCODER, METADATA_FRAME_MAGIC, SAMPLE_TYPE
from core.base import SliceSet, VolumeMetadata
from core.errors import ConfigError, DimensionMismatchError, VolumeIOError
from core.events import EncodeSummary, VolumeEventListener, notify
from loaders.slice_loader import read_slice


U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1


def _check_field(name: str, value: int, maximum: int) -> int:
    if not 0 <= value <= maximum:
        raise ConfigError(f"{name} {value} does not fit in the range 0-{maximum}")
    return value


def build_metadata_frame(metadata: VolumeMetadata) -> bytes:
    """
    Encode the metadata frame that precedes the compressed payload.

    Raises:
        ConfigError: If a dimension or the record length overflows its field
    """
    _check_field("Width", metadata.width, U32_MAX)
    _check_field("Height", metadata.height, U32_MAX)
    _check_field("Depth", metadata.depth, U64_MAX)

    payload = metadata.to_json().encode("utf-8")
    _check_field("Metadata length", len(payload), U32_MAX)

    return struct.pack("<II", METADATA_FRAME_MAGIC, len(payload)) + payload


def transpose_slice(pixels: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Reorder a row-major slice to column-major.

    Args:
        pixels: (height, width) array
        out: Optional (width, height) array to fill in place

    Returns:
        (width, height) C-contiguous array with out[x, y] == pixels[y, x],
        i.e. flat index x*height + y holds the sample at row y, column x
    """
    if out is None:
        out = np.empty(pixels.shape[::-1], dtype=pixels.dtype)
    np.copyto(out, pixels.T)
    return out


class ZstdVolumeExporter:
    """
    Streams a SliceSet into a compressed volume file.

    Slices are decoded, transposed and compressed one at a time, so only
    a single slice is held in memory regardless of stack depth.
    """

    def __init__(self, config: EncoderConfig = DEFAULT_ENCODER):
        """
        Initialize the exporter.

        Args:
            config: Compression level, thread count and LDM switch

        Raises:
            ConfigError: If the compression parameters are out of range
        """
        config.validate()
        self.config = config

    def compression_parameters(self, source_size: int) -> zstd.ZstdCompressionParameters:
        """Zstandard parameters for a payload of the given size."""
        return zstd.ZstdCompressionParameters.from_level(
            self.config.level,
            source_size=source_size,
            threads=self.config.threads,
            enable_ldm=self.config.long_distance_matching,
            write_content_size=True,
        )

    def export(
        self,
        slice_set: SliceSet,
        output_path: str | Path,
        listener: Optional[VolumeEventListener] = None
    ) -> EncodeSummary:
        """
        Encode a slice stack to a volume file.

        The output is truncated if it exists; callers decide whether
        overwriting is allowed. On failure the compressed frame is not
        finalized and the partially written file is left in place.

        Args:
            slice_set: Validated slice stack
            output_path: Destination file
            listener: Optional receiver of progress notifications

        Returns:
            EncodeSummary describing the written volume

        Raises:
            ConfigError: If a header field would overflow
            DecodeError: If a slice cannot be decoded
            DimensionMismatchError: If a slice changed size since discovery
            VolumeIOError: If reading, writing or compressing fails
        """
        start = time.perf_counter()
        output_path = Path(output_path)

        metadata = VolumeMetadata.from_slice_set(slice_set, SAMPLE_TYPE)
        frame = build_metadata_frame(metadata)
        source_size = _check_field("Total sample count", slice_set.num_samples, U64_MAX)
        params = self.compression_parameters(source_size)

        logging.info(
            f"Encoding {slice_set.width}x{slice_set.height}x{slice_set.depth} volume "
            f"to {output_path} (level {self.config.level}, threads {self.config.threads})"
        )

        try:
            with open(output_path, "wb") as fh:
                fh.write(frame)
                notify(listener, "encode_started", metadata, output_path)
                self._write_payload(fh, slice_set, params, source_size, listener)
                fh.flush()
                bytes_written = fh.tell()
        except (OSError, zstd.ZstdError) as e:
            raise VolumeIOError(f'Failed to write "{output_path}": {e}', output_path) from e

        summary = EncodeSummary(
            output_path=output_path,
            width=slice_set.width,
            height=slice_set.height,
            depth=slice_set.depth,
            bytes_written=bytes_written,
            elapsed=time.perf_counter() - start,
        )
        logging.info(
            f"Wrote {summary.bytes_written} bytes to {output_path} "
            f"in {summary.elapsed:.2f}s"
        )
        notify(listener, "encode_finished", summary)
        return summary

    def _write_payload(
        self,
        fh,
        slice_set: SliceSet,
        params: zstd.ZstdCompressionParameters,
        source_size: int,
        listener: Optional[VolumeEventListener]
    ) -> None:
        compressor = zstd.ZstdCompressor(compression_params=params)
        # Closed only after the last slice; a failed run leaves the frame unterminated
        writer = compressor.stream_writer(fh, size=source_size, closefd=False)

        width, height = slice_set.width, slice_set.height
        buffer = np.empty((width, height), dtype=np.uint8)

        for index, path in enumerate(slice_set.paths):
            pixels = read_slice(path)
            if pixels.shape != (height, width):
                raise DimensionMismatchError(
                    expected=(width, height),
                    actual=(pixels.shape[1], pixels.shape[0]),
                    path=path,
                    reference_path=slice_set.paths[0],
                )
            transpose_slice(pixels, out=buffer)
            writer.write(buffer.reshape(-1).data)
            logging.debug(f"Encoded slice {index + 1}/{slice_set.depth}: {path.name}")
            notify(listener, "slice_encoded", index, path)

        # Ends the frame; fh stays open
        writer.close()


def encode_volume(
    slice_set: SliceSet,
    output_path: str | Path,
    level: int = DEFAULT_ENCODER.level,
    threads: int = DEFAULT_ENCODER.threads,
    listener: Optional[VolumeEventListener] = None
) -> EncodeSummary:
    """Encode a slice stack with the given compression level and thread count."""
    config = EncoderConfig(level=level, threads=threads)
    return ZstdVolumeExporter(config).export(slice_set, output_path, listener)
