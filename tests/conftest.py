"""Test configuration and fixtures."""

import json

import pytest

from tests.helpers import docker_entry, docker_manifest, oci_index, sha256_digest, write_tar


@pytest.fixture
def docker_files():
    """Contents of a complete docker-archive (docker save) tar."""
    return {
        "manifest.json": docker_manifest(
            docker_entry(
                "blobs/sha256/config123",
                ["blobs/sha256/layer123", "blobs/sha256/layer456"],
            )
        ),
        "blobs/sha256/config123": b'{"os":"linux","architecture":"amd64"}',
        "blobs/sha256/layer123": b"layer content",
        "blobs/sha256/layer456": b"more layer content",
    }


@pytest.fixture
def oci_files():
    """Contents of a complete OCI layout tar with one image manifest."""
    manifest = json.dumps({"schemaVersion": 2, "layers": []}).encode("utf-8")
    digest = sha256_digest(manifest)
    return {
        "oci-layout": b'{"imageLayoutVersion":"1.0.0"}',
        "index.json": oci_index(digest),
        f"blobs/sha256/{digest.split(':', 1)[1]}": manifest,
    }


@pytest.fixture
def docker_tar(tmp_path, docker_files):
    return write_tar(tmp_path / "docker.tar", docker_files)


@pytest.fixture
def oci_tar(tmp_path, oci_files):
    return write_tar(tmp_path / "oci.tar", oci_files)


def pytest_configure(config):
    """Configure pytest markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as unit test (default)")
