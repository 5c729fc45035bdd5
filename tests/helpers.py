"""Helpers for building synthetic image archives."""

import hashlib
import io
import json
import tarfile
from pathlib import Path

import zstandard as zstd


def sha256_digest(data: bytes) -> str:
    """Digest string ("sha256:<hex>") of data."""
    return f"sha256:{hashlib.sha256(data).hexdigest()}"


def make_tar_bytes(files: dict[str, bytes], directories: tuple[str, ...] = ()) -> bytes:
    """Build an uncompressed tar in memory, directories first."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w") as tar:
        for name in directories:
            dir_info = tarfile.TarInfo(name)
            dir_info.type = tarfile.DIRTYPE
            dir_info.mode = 0o755
            tar.addfile(dir_info)

        for name, content in files.items():
            file_info = tarfile.TarInfo(name)
            file_info.size = len(content)
            tar.addfile(file_info, fileobj=io.BytesIO(content))

    return buffer.getvalue()


def write_tar(
    path: Path, files: dict[str, bytes], directories: tuple[str, ...] = ()
) -> Path:
    path.write_bytes(make_tar_bytes(files, directories))
    return path


def write_tar_zst(
    path: Path, files: dict[str, bytes], directories: tuple[str, ...] = ()
) -> Path:
    compressed = zstd.ZstdCompressor().compress(make_tar_bytes(files, directories))
    path.write_bytes(compressed)
    return path


def docker_manifest(*entries: dict) -> bytes:
    return json.dumps(list(entries)).encode("utf-8")


def docker_entry(config: str, layers: list[str], repo_tags=None) -> dict:
    return {
        "Config": config,
        "RepoTags": ["test/image:latest"] if repo_tags is None else repo_tags,
        "Layers": layers,
    }


def oci_index(*digests: str) -> bytes:
    manifests = [
        {
            "mediaType": "application/vnd.oci.image.manifest.v1+json",
            "digest": digest,
            "size": 512,
        }
        for digest in digests
    ]
    return json.dumps({"schemaVersion": 2, "manifests": manifests}).encode("utf-8")
