"""Text rendering of archive check results."""

import json

from .tar.models import (
    MISSING_BLOB,
    MISSING_CONFIG,
    MISSING_LAYER,
    UNEXPECTED_DIGEST,
    CheckResult,
    Finding,
    LayoutReport,
)

DOCKER_HEADER = "Detected docker-archive (manifest.json). Checking referenced files..."
DOCKER_SUCCESS = "All docker-archive referenced files present."
OCI_HEADER = "Detected OCI layout (index.json). Checking blobs/ references..."
OCI_SUCCESS = "All OCI index referenced blobs present."
UNCLASSIFIED = "No manifest.json or index.json detected; tar may have an unexpected layout."


def format_finding(finding: Finding) -> str:
    if finding.kind == MISSING_CONFIG:
        return f"  MISSING: config {json.dumps(finding.path, ensure_ascii=False)}"
    if finding.kind == MISSING_LAYER:
        return f"  MISSING: layer {json.dumps(finding.path, ensure_ascii=False)}"
    if finding.kind == MISSING_BLOB:
        return f"  MISSING: {finding.path}"
    if finding.kind == UNEXPECTED_DIGEST:
        return f"  UNEXPECTED digest format: {json.dumps(finding.path, ensure_ascii=False)}"
    raise ValueError(f"Unknown finding kind: {finding.kind}")


def render_layout(report: LayoutReport, header: str, success: str, failure: str) -> list[str]:
    lines = [header]
    for entry in report.entries:
        lines.append(entry.label)
        lines.extend(format_finding(finding) for finding in entry.findings)
    lines.append(success if report.ok else failure.format(count=len(report.findings)))
    return lines


def render_result(result: CheckResult) -> list[str]:
    """Render a check result as report lines for standard output."""
    lines: list[str] = []

    if result.docker is not None:
        lines.extend(
            render_layout(
                result.docker,
                DOCKER_HEADER,
                DOCKER_SUCCESS,
                "docker-archive check failed: {count} missing reference(s).",
            )
        )

    if result.oci is not None:
        lines.extend(
            render_layout(
                result.oci,
                OCI_HEADER,
                OCI_SUCCESS,
                "OCI layout check failed: {count} problem(s) found.",
            )
        )

    if not result.classified:
        lines.append(UNCLASSIFIED)

    return lines
