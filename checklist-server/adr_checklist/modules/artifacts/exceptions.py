"""Artifact store specific exceptions."""


class ArtifactError(Exception):
    """Base class for artifact store errors."""


class ArtifactValidationError(ArtifactError):
    """Raised when a request is rejected before any side effect."""


class ArtifactNotFoundError(ArtifactError):
    """Raised when a record, archive or document inside an archive is missing."""


class ArtifactConflictError(ArtifactError):
    """Raised when the canonical path is already occupied on first insert."""


class ArtifactStorageError(ArtifactError):
    """Raised when the blob store reports an error."""


class ArtifactPersistenceError(ArtifactError):
    """Raised when the metadata table reports an error."""
