"""Archive stream detection and indexing."""

from .models import ArchiveIndex, normalize_entry_name
from .reader import index_archive
from .stream import detect_stream, open_archive

__all__ = ["ArchiveIndex", "detect_stream", "index_archive", "normalize_entry_name", "open_archive"]
