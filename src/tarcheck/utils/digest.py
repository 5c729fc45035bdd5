"""Digest parsing utilities."""

import posixpath

DIGEST_SEPARATOR = ":"
BLOBS_DIR = "blobs"


def split_digest(digest: str) -> tuple[str, str] | None:
    """Split a digest into its algorithm and hex payload.

    Args:
        digest: Digest string in format "algorithm:hex"

    Returns:
        (algorithm, hex) tuple, or None if the digest does not contain exactly
        one separator with non-empty text on both sides
    """
    if not isinstance(digest, str) or digest.count(DIGEST_SEPARATOR) != 1:
        return None

    algorithm, encoded = digest.split(DIGEST_SEPARATOR, 1)
    if not algorithm or not encoded:
        return None
    return algorithm, encoded


def blob_path(algorithm: str, encoded: str) -> str:
    """Archive path of a blob in an OCI layout (blobs/<algorithm>/<hex>)."""
    return posixpath.normpath(posixpath.join(BLOBS_DIR, algorithm, encoded))


def digest_to_blob_path(digest: str) -> str | None:
    """Archive path a digest should be stored at, or None if malformed."""
    parts = split_digest(digest)
    if parts is None:
        return None
    return blob_path(*parts)
