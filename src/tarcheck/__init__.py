"""tarcheck - referential integrity checks for container image tar archives."""

__version__ = "0.1.0"

from .exceptions import (
    ArchiveReadError,
    DecompressionError,
    ManifestParseError,
    TarCheckError,
    TarReadError,
)
from .tar.models import CheckResult, LayoutReport
from .utils.validator import check_archive

__all__ = [
    "check_archive",
    "CheckResult",
    "LayoutReport",
    "TarCheckError",
    "ArchiveReadError",
    "DecompressionError",
    "TarReadError",
    "ManifestParseError",
]
