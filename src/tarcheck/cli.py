"""Command line entry point for tarcheck."""

import argparse
import logging
import sys

from .config import LOG_LEVELS, CheckConfig, default_log_level
from .exceptions import TarCheckError
from .report import render_result
from .utils.validator import check_archive

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tarcheck",
        description=(
            "Check that every file referenced by a docker-archive manifest.json "
            "or an OCI index.json exists in a tar (or tar.zst) archive."
        ),
    )
    parser.add_argument("archive", help="path to a tar or zstd-compressed tar file")
    parser.add_argument(
        "--log-level",
        default=default_log_level(),
        type=str.upper,
        choices=LOG_LEVELS,
        help="diagnostic log level on stderr (default: $TARCHECK_LOG_LEVEL or WARNING)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the archive check and return the process exit code."""
    args = build_parser().parse_args(argv)
    config = CheckConfig.from_args(args)

    logging.basicConfig(
        level=config.log_level_value,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        result = check_archive(config.archive)
    except TarCheckError as e:
        logger.debug("Check aborted", exc_info=True)
        print(f"tarcheck: {e}", file=sys.stderr)
        return 2

    for line in render_result(result):
        print(line)
    return 0
