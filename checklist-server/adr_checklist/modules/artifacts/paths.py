"""Storage path conventions for checklist archives."""

from __future__ import annotations

from typing import Optional

from .models import ArtifactRecord

LEGACY_REDUCED_ALIAS = "under1000"


def canonical_path(checklist_type: str, checklist_hash: str) -> str:
    return f"{checklist_type}/{checklist_hash}.zip"


def normalize_path(path: Optional[str], bucket: str) -> str:
    """Strip leading slashes and a leading bucket segment from a stored path."""
    if not path:
        return ""
    cleaned = path.strip().lstrip("/")
    prefix = f"{bucket}/"
    if cleaned.startswith(prefix):
        cleaned = cleaned[len(prefix):]
    return cleaned


def candidate_paths(record: ArtifactRecord, bucket: str) -> list[str]:
    """Locations to try for a record's archive, in fallback order.

    Stored path first, then the canonical path, then the legacy alias the
    reduced checklist was once stored under.
    """
    candidates = [
        normalize_path(record.file_path, bucket),
        canonical_path(record.checklist_type, record.checklist_hash),
    ]
    if record.checklist_type == "reduced":
        candidates.append(canonical_path(LEGACY_REDUCED_ALIAS, record.checklist_hash))

    ordered: list[str] = []
    for candidate in candidates:
        if candidate and candidate not in ordered:
            ordered.append(candidate)
    return ordered


__all__ = [
    "LEGACY_REDUCED_ALIAS",
    "canonical_path",
    "normalize_path",
    "candidate_paths",
]
