"""Runtime configuration for the tarcheck command."""

import argparse
import logging
import os
from dataclasses import dataclass
from pathlib import Path

LOG_LEVEL_ENV = "TARCHECK_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def default_log_level() -> str:
    """Log level from the environment, falling back to WARNING."""
    level = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    return level if level in LOG_LEVELS else DEFAULT_LOG_LEVEL


@dataclass(frozen=True)
class CheckConfig:
    """Settings for one archive check run."""

    archive: Path
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "CheckConfig":
        return cls(archive=Path(args.archive), log_level=args.log_level.upper())

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)
