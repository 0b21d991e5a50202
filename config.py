"""
stack2vol Configuration

Contains constants and default settings for slice discovery and
volume encoding.
"""

from dataclasses import dataclass

from core.errors import ConfigError


# On-disk format constants
# Magic of a Zstandard skippable frame, used here to carry the metadata record
METADATA_FRAME_MAGIC: int = 0x184D2A50
SAMPLE_TYPE: str = "uint8"

# Zstandard compression level range accepted by the encoder
MIN_LEVEL: int = 1
MAX_LEVEL: int = 22

VERSION: str = "0.1.0"


@dataclass
class DiscoveryConfig:
    """Configuration for slice discovery."""
    extension: str = ".bmp"  # Matched case-insensitively, leading dot included


@dataclass
class EncoderConfig:
    """Configuration for the Zstandard volume encoder."""
    level: int = 3  # Zstandard compression level (1-22)
    threads: int = 0  # Compression worker threads, 0 disables multithreading
    long_distance_matching: bool = True  # Better ratio on repetitive volumes

    def validate(self) -> None:
        """
        Check that the compression parameters are usable.

        Raises:
            ConfigError: If the level or thread count is out of range
        """
        if not MIN_LEVEL <= self.level <= MAX_LEVEL:
            raise ConfigError(
                f"Compression level must be in range {MIN_LEVEL}-{MAX_LEVEL}, "
                f"got {self.level}"
            )
        if self.threads < 0:
            raise ConfigError(
                f"Thread count must not be negative, got {self.threads}"
            )


# Default configurations
DEFAULT_DISCOVERY = DiscoveryConfig()
DEFAULT_ENCODER = EncoderConfig()
