"""Data models for archive scanning and manifest checks."""

import posixpath
from dataclasses import dataclass, field

CURRENT_DIR_PREFIX = "./"


def normalize_entry_name(name: str) -> str:
    """Strip a single leading ``./`` from a tar entry name."""
    if name.startswith(CURRENT_DIR_PREFIX):
        return name[len(CURRENT_DIR_PREFIX) :]
    return name


@dataclass
class ArchiveIndex:
    """Entry names and captured manifest bytes from one pass over a tar."""

    entries: set[str] = field(default_factory=set)
    manifest_bytes: bytes | None = None
    index_bytes: bytes | None = None

    @property
    def has_docker_manifest(self) -> bool:
        return bool(self.manifest_bytes)

    @property
    def has_oci_index(self) -> bool:
        return bool(self.index_bytes)

    def add(self, name: str) -> str:
        """Record an entry name and return its normalized form."""
        normalized = normalize_entry_name(name)
        self.entries.add(normalized)
        return normalized

    def contains(self, path: str) -> bool:
        return normalize_entry_name(path) in self.entries

    def __len__(self) -> int:
        return len(self.entries)


def entry_basename(name: str) -> str:
    """Final path component of an entry name."""
    return posixpath.basename(name)


@dataclass(frozen=True)
class DockerManifestEntry:
    """One image entry of a docker-archive manifest.json."""

    config: str
    repo_tags: list[str]
    layers: list[str]


@dataclass(frozen=True)
class OCIDescriptor:
    """Manifest descriptor listed in an OCI index.json."""

    digest: str
    annotations: dict[str, str] = field(default_factory=dict)

    @property
    def ref_name(self) -> str | None:
        return self.annotations.get("org.opencontainers.image.ref.name")


@dataclass(frozen=True)
class OCIIndex:
    """Parsed OCI image index."""

    manifests: list[OCIDescriptor]


# Finding kinds
MISSING_CONFIG = "missing-config"
MISSING_LAYER = "missing-layer"
MISSING_BLOB = "missing-blob"
UNEXPECTED_DIGEST = "unexpected-digest"


@dataclass(frozen=True)
class Finding:
    """A referenced path absent from the archive, or a malformed digest."""

    kind: str
    path: str


@dataclass
class EntryResult:
    """Result of checking one manifest entry or index descriptor."""

    label: str
    findings: list[Finding] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.findings


@dataclass
class LayoutReport:
    """Integrity report for one detected layout."""

    layout: str
    entries: list[EntryResult] = field(default_factory=list)

    @property
    def findings(self) -> list[Finding]:
        return [finding for entry in self.entries for finding in entry.findings]

    @property
    def ok(self) -> bool:
        return all(entry.ok for entry in self.entries)


@dataclass
class CheckResult:
    """Reports for every layout found in an archive."""

    docker: LayoutReport | None = None
    oci: LayoutReport | None = None

    @property
    def classified(self) -> bool:
        return self.docker is not None or self.oci is not None
