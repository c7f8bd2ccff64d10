"""Deduplicated storage of checklist archives."""

from .exceptions import (
    ArtifactConflictError,
    ArtifactError,
    ArtifactNotFoundError,
    ArtifactPersistenceError,
    ArtifactStorageError,
    ArtifactValidationError,
)
from .models import (
    CHECKLIST_TYPES,
    ArtifactListing,
    ArtifactMeta,
    ArtifactRecord,
    PreviewDocument,
    StoreResult,
)
from .paths import candidate_paths, canonical_path, normalize_path
from .repository import ArtifactRecordRepository

__all__ = [
    "ArtifactConflictError",
    "ArtifactError",
    "ArtifactNotFoundError",
    "ArtifactPersistenceError",
    "ArtifactStorageError",
    "ArtifactValidationError",
    "CHECKLIST_TYPES",
    "ArtifactListing",
    "ArtifactMeta",
    "ArtifactRecord",
    "PreviewDocument",
    "StoreResult",
    "candidate_paths",
    "canonical_path",
    "normalize_path",
    "ArtifactRecordRepository",
]
