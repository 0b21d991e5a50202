"""Console presentation layer for stack2vol."""

from .commands import OutputExistsError, build_parser, parse_args, run_encode
from .reporter import ConsoleReporter, TqdmLogHandler
from .style import emoji, format_duration

__all__ = [
    "OutputExistsError",
    "build_parser",
    "parse_args",
    "run_encode",
    "ConsoleReporter",
    "TqdmLogHandler",
    "emoji",
    "format_duration",
]
