"""Utility functions for tarcheck."""

from .digest import blob_path, digest_to_blob_path, split_digest

__all__ = ["blob_path", "digest_to_blob_path", "split_digest"]
