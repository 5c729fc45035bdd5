"""Manifest consistency checks for docker-archive and OCI layout tar files."""

import json
import logging
from pathlib import Path
from typing import Any

from ..exceptions import ManifestParseError
from ..tar.models import (
    MISSING_BLOB,
    MISSING_CONFIG,
    MISSING_LAYER,
    UNEXPECTED_DIGEST,
    ArchiveIndex,
    CheckResult,
    DockerManifestEntry,
    EntryResult,
    Finding,
    LayoutReport,
    OCIDescriptor,
    OCIIndex,
)
from ..tar.reader import DOCKER_MANIFEST_NAME, OCI_INDEX_NAME, index_archive
from ..tar.stream import open_archive
from .digest import digest_to_blob_path

logger = logging.getLogger(__name__)

DOCKER_ARCHIVE = "docker-archive"
OCI_LAYOUT = "oci-layout"

OCI_REQUIRED_FIELDS = ["digest"]
DOCKER_REQUIRED_FIELDS = ["Config", "RepoTags", "Layers"]


def load_json(data: bytes, filename: str) -> Any:
    """Decode and parse JSON bytes captured from the archive."""
    try:
        return json.loads(data.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise ManifestParseError(filename, f"cannot decode: {e}") from e
    except json.JSONDecodeError as e:
        raise ManifestParseError(filename, f"invalid JSON: {e}") from e


def has_required_fields(entry: dict[str, Any], required_fields: list[str]) -> bool:
    """Check if a JSON object has all required fields."""
    return all(field in entry for field in required_fields)


def is_string_list(value: Any) -> bool:
    """Check if value is a list of strings."""
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def parse_string_list(value: Any, filename: str, field_name: str) -> list[str]:
    # docker save writes null RepoTags for untagged images
    if value is None:
        return []
    if not is_string_list(value):
        raise ManifestParseError(filename, f"{field_name} must be an array of strings")
    return list(value)


def parse_docker_manifest(data: bytes) -> list[DockerManifestEntry]:
    """Parse manifest.json bytes into typed manifest entries.

    Args:
        data: Raw manifest.json content

    Returns:
        Manifest entries in file order (possibly empty)

    Raises:
        ManifestParseError: If the content is not a JSON array of objects
            carrying Config, RepoTags and Layers
    """
    manifest_data = load_json(data, DOCKER_MANIFEST_NAME)
    if not isinstance(manifest_data, list):
        raise ManifestParseError(DOCKER_MANIFEST_NAME, "expected a JSON array")

    entries = []
    for position, raw_entry in enumerate(manifest_data):
        if not isinstance(raw_entry, dict):
            raise ManifestParseError(
                DOCKER_MANIFEST_NAME, f"entry[{position}] is not an object"
            )
        if not has_required_fields(raw_entry, DOCKER_REQUIRED_FIELDS):
            missing = [f for f in DOCKER_REQUIRED_FIELDS if f not in raw_entry]
            raise ManifestParseError(
                DOCKER_MANIFEST_NAME,
                f"entry[{position}] missing required field(s): {', '.join(missing)}",
            )

        config = raw_entry["Config"]
        if not isinstance(config, str):
            raise ManifestParseError(
                DOCKER_MANIFEST_NAME, f"entry[{position}] Config must be a string"
            )

        entries.append(
            DockerManifestEntry(
                config=config,
                repo_tags=parse_string_list(
                    raw_entry["RepoTags"], DOCKER_MANIFEST_NAME, "RepoTags"
                ),
                layers=parse_string_list(
                    raw_entry["Layers"], DOCKER_MANIFEST_NAME, "Layers"
                ),
            )
        )

    return entries


def parse_descriptor(raw: Any, position: int) -> OCIDescriptor:
    """Parse one descriptor object from index.json."""
    if not isinstance(raw, dict):
        raise ManifestParseError(OCI_INDEX_NAME, f"manifests[{position}] is not an object")
    if not has_required_fields(raw, OCI_REQUIRED_FIELDS):
        raise ManifestParseError(OCI_INDEX_NAME, f"manifests[{position}] missing digest")
    if not isinstance(raw["digest"], str):
        raise ManifestParseError(
            OCI_INDEX_NAME, f"manifests[{position}] digest must be a string"
        )

    # only the ref.name annotation is read, other descriptor fields are ignored
    annotations = raw.get("annotations")
    if not isinstance(annotations, dict):
        annotations = {}

    return OCIDescriptor(
        digest=raw["digest"],
        annotations={str(k): str(v) for k, v in annotations.items()},
    )


def parse_oci_index(data: bytes) -> OCIIndex:
    """Parse index.json bytes into a typed OCI index.

    Raises:
        ManifestParseError: If the content is not a JSON object with a
            manifests array of descriptors carrying a digest
    """
    index_data = load_json(data, OCI_INDEX_NAME)
    if not isinstance(index_data, dict):
        raise ManifestParseError(OCI_INDEX_NAME, "expected a JSON object")
    if "manifests" not in index_data:
        raise ManifestParseError(OCI_INDEX_NAME, "missing required field: manifests")

    manifests = index_data["manifests"]
    if not isinstance(manifests, list):
        raise ManifestParseError(OCI_INDEX_NAME, "manifests must be an array")

    return OCIIndex(
        manifests=[parse_descriptor(raw, position) for position, raw in enumerate(manifests)]
    )


def is_path_present(path: str, archive: ArchiveIndex) -> bool:
    """Check if a referenced path exists as an archive entry."""
    return archive.contains(path)


def find_missing_layers(layers: list[str], archive: ArchiveIndex) -> list[str]:
    """Layer paths absent from the archive, in manifest order."""
    return [layer for layer in layers if not is_path_present(layer, archive)]


def check_docker_entry(
    position: int, entry: DockerManifestEntry, archive: ArchiveIndex
) -> EntryResult:
    """Check the config and layer references of one manifest entry."""
    result = EntryResult(
        label=f"entry[{position}] tags=[{' '.join(entry.repo_tags)}] config={entry.config}"
    )

    if not is_path_present(entry.config, archive):
        result.findings.append(Finding(MISSING_CONFIG, entry.config))

    for layer in find_missing_layers(entry.layers, archive):
        result.findings.append(Finding(MISSING_LAYER, layer))

    return result


def check_docker_archive(
    entries: list[DockerManifestEntry], archive: ArchiveIndex
) -> LayoutReport:
    """Check every manifest.json reference against the archive entries."""
    report = LayoutReport(layout=DOCKER_ARCHIVE)
    for position, entry in enumerate(entries):
        report.entries.append(check_docker_entry(position, entry, archive))

    logger.debug(
        "Checked %d docker-archive entries, %d missing", len(entries), len(report.findings)
    )
    return report


def check_oci_descriptor(
    position: int, descriptor: OCIDescriptor, archive: ArchiveIndex
) -> EntryResult:
    """Check that the blob of one index descriptor exists."""
    label = f"manifest[{position}] digest={descriptor.digest}"
    if descriptor.ref_name:
        label += f" ref={descriptor.ref_name}"
    result = EntryResult(label=label)

    expected = digest_to_blob_path(descriptor.digest)
    if expected is None:
        result.findings.append(Finding(UNEXPECTED_DIGEST, descriptor.digest))
    elif not is_path_present(expected, archive):
        result.findings.append(Finding(MISSING_BLOB, expected))

    return result


def check_oci_layout(index: OCIIndex, archive: ArchiveIndex) -> LayoutReport:
    """Check every index.json descriptor against the archive's blobs/."""
    report = LayoutReport(layout=OCI_LAYOUT)
    for position, descriptor in enumerate(index.manifests):
        report.entries.append(check_oci_descriptor(position, descriptor, archive))

    logger.debug(
        "Checked %d OCI descriptors, %d problems", len(index.manifests), len(report.findings)
    )
    return report


def check_index(archive: ArchiveIndex) -> CheckResult:
    """Run every check whose manifest was captured during the scan."""
    result = CheckResult()

    if archive.has_docker_manifest:
        entries = parse_docker_manifest(archive.manifest_bytes)
        result.docker = check_docker_archive(entries, archive)

    if archive.has_oci_index:
        index = parse_oci_index(archive.index_bytes)
        result.oci = check_oci_layout(index, archive)

    return result


def check_archive(tar_path: Path) -> CheckResult:
    """tar 또는 tar.zst 파일이 참조하는 모든 파일이 아카이브에 있는지 검사합니다.

    manifest.json (docker-archive)과 index.json (OCI layout)을 모두 찾으며,
    둘 다 있으면 두 검사를 각각 실행합니다.

    Args:
        tar_path: 검사할 아카이브 경로
            - Path 객체: Path("/Users/user/images/app.tar")
            - zstd 압축: Path("./exports/app.tar.zst")

    Returns:
        CheckResult: 레이아웃별 검사 결과 (감지되지 않은 레이아웃은 None)

    Raises:
        ArchiveReadError: 파일을 열거나 읽을 수 없는 경우
        DecompressionError: zstd 압축 해제에 실패한 경우
        TarReadError: tar 구조가 손상된 경우
        ManifestParseError: manifest.json 또는 index.json 형식이 잘못된 경우

    Examples:
        result = check_archive(Path("nginx.tar"))
        if result.docker and result.docker.ok:
            print("모든 참조 파일이 존재합니다")
    """
    with open_archive(tar_path) as stream:
        archive = index_archive(stream)

    return check_index(archive)
