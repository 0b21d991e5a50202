"""
stack2vol

Main entry point for the command-line tool.
"""

import sys
import logging
from typing import List, Optional

from termcolor import colored

from console import TqdmLogHandler, parse_args
from core.errors import VolumeError


def setup_logging(verbose: bool = False):
    """Configure logging through tqdm so progress bars stay intact."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[TqdmLogHandler()]
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Application entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        return args.handler(args)
    except VolumeError as e:
        logging.debug("Run failed", exc_info=True)
        print(colored(str(e), "red"), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
