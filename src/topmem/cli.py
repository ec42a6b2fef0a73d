"""Command line entry point for top-mem-util."""

import argparse
import logging
import os
import sys

from topmem import __version__
from topmem.ConfigManager import ConfigManager
from topmem.Controller import Controller
from topmem.shared_data import (
    DEFAULT_INTERVAL_SEC,
    DEFAULT_LOG_PATH,
    DEFAULT_PROCESSES,
    DEFAULT_TIMEOUT_MIN,
    EXIT_FAILURE,
    LOG_LEVEL_ENV,
)
from topmem.utils.errors import ConfigError

logger = logging.getLogger(__name__)


class UsageExitParser(argparse.ArgumentParser):
    """Unknown or malformed flags print the usage to stderr and exit 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = UsageExitParser(
        prog="top-mem-util",
        description="Periodically append the top memory consuming processes to an xz compressed log. "
                    "Each line reads: epoch rss_kb size_kb vsz_kb pid command.",
    )
    # values stay strings here, ConfigManager does the validation
    parser.add_argument("-f", "--file", metavar="PATH",
                        help=f"log file, appended to if it exists (default: {DEFAULT_LOG_PATH})")
    parser.add_argument("-i", "--interval", metavar="SECONDS",
                        help=f"seconds between samples (default: {DEFAULT_INTERVAL_SEC})")
    parser.add_argument("-p", "--processes", metavar="N",
                        help=f"number of processes logged per sample (default: {DEFAULT_PROCESSES})")
    parser.add_argument("-t", "--timeout", metavar="MINUTES",
                        help=f"stop after this many minutes, 0 runs until interrupted (default: {DEFAULT_TIMEOUT_MIN})")
    parser.add_argument("-c", "--config", metavar="YAML",
                        help="YAML file with file/interval/processes/timeout defaults")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def setup_logging() -> None:
    log_level = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(name)s - %(levelname)s - %(message)s",
    )


def main(argv=None) -> int:
    """Parse arguments, validate the config and run. Returns the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging()

    try:
        config = ConfigManager.from_args(args).data
    except ConfigError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    controller = Controller(config)
    controller.install_signal_handlers()
    return controller.run()


if __name__ == "__main__":
    sys.exit(main())
