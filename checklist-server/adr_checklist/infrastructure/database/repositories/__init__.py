"""Concrete SQLAlchemy repositories."""

from .artifact_repository import SqlArtifactRecordRepository

__all__ = ["SqlArtifactRecordRepository"]
