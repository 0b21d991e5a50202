"""
Command Definitions

Argument parsing and command handlers for the stack2vol CLI.
"""

import argparse
from pathlib import Path
from typing import List, Optional

from config import (
    DiscoveryConfig,
    EncoderConfig,
    DEFAULT_ENCODER,
    MIN_LEVEL,
    MAX_LEVEL,
    VERSION,
)
from core.errors import VolumeError
from exporters.zstd_volume import ZstdVolumeExporter
from loaders.slice_loader import SliceDiscovery
from .reporter import ConsoleReporter


class OutputExistsError(VolumeError):
    """The output file exists and overwriting was not requested."""

    def __init__(self, path: Path):
        super().__init__(
            f'Output "{path}" already exists, run with `--force` to overwrite'
        )
        self.path = path


def existing_directory(value: str) -> Path:
    path = Path(value)
    if not path.exists():
        raise argparse.ArgumentTypeError(f'"{value}" does not exist')
    if not path.is_dir():
        raise argparse.ArgumentTypeError(f'"{value}" is not a directory')
    return path


def compression_level(value: str) -> int:
    try:
        level = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f'"{value}" is not an integer')
    if not MIN_LEVEL <= level <= MAX_LEVEL:
        raise argparse.ArgumentTypeError(
            f"{level} is not in {MIN_LEVEL}..={MAX_LEVEL}"
        )
    return level


def thread_count(value: str) -> int:
    try:
        threads = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f'"{value}" is not an integer')
    if threads < 0:
        raise argparse.ArgumentTypeError(f"{threads} is negative")
    return threads


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="stack2vol",
        description="Create compressed volumes from stacks of images",
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {VERSION}"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug log output"
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    encode = subparsers.add_parser(
        "encode",
        help="Create a new ZSTD volume from a stack of BMP images",
        description="Create a new ZSTD volume from a stack of BMP images",
    )
    encode.add_argument(
        "bmp_dir", type=existing_directory, help="Directory with BMP files"
    )
    encode.add_argument(
        "-o", "--output", type=Path, required=True, metavar="PATH",
        help="Path to output file",
    )
    encode.add_argument(
        "-f", "--force", action="store_true", help="Overwrite existing files"
    )
    encode.add_argument(
        "-l", "--zstd-level", type=compression_level, default=DEFAULT_ENCODER.level,
        metavar="LEVEL", help=f"ZSTD compression level ({MIN_LEVEL}-{MAX_LEVEL})",
    )
    encode.add_argument(
        "-t", "--zstd-threads", type=thread_count, default=DEFAULT_ENCODER.threads,
        metavar="THREADS", help="ZSTD compression thread count, 0 disables multithreading",
    )
    encode.set_defaults(handler=run_encode)

    return parser


def run_encode(args: argparse.Namespace, reporter: Optional[ConsoleReporter] = None) -> int:
    """
    Run the encode command.

    Args:
        args: Parsed arguments of the encode subcommand
        reporter: Console reporter, created if not given

    Returns:
        Process exit status

    Raises:
        OutputExistsError: If the output exists and --force was not given
        VolumeError: If discovery or encoding fails
    """
    if not args.force and args.output.is_file():
        raise OutputExistsError(args.output)

    discovery_config = DiscoveryConfig()
    encoder_config = EncoderConfig(level=args.zstd_level, threads=args.zstd_threads)
    label = discovery_config.extension.lstrip(".").upper()
    reporter = reporter or ConsoleReporter(label=label)

    try:
        slice_set = SliceDiscovery(discovery_config).discover(args.bmp_dir, reporter)
        if slice_set is None:
            return 0
        ZstdVolumeExporter(encoder_config).export(slice_set, args.output, reporter)
    finally:
        reporter.close()

    return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)
