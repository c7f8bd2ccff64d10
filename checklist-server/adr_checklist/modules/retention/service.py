"""Purge of artifacts whose retention window has passed."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from adr_checklist.infrastructure.database.repositories.artifact_repository import (
    SqlArtifactRecordRepository,
)
from adr_checklist.infrastructure.storage.blob_storage import BlobStorage, BlobStorageError
from adr_checklist.modules.artifacts.repository import ArtifactRecordRepository

if TYPE_CHECKING:
    from adr_checklist.core.container import ApplicationContainer

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SweepReport:
    deleted_rows: int = 0
    deleted_files_attempted: int = 0


class RetentionSweeper:
    """Deletes expired rows in batches, oldest expiry first.

    Blob removal is best effort; the rows of a batch are deleted even when
    their blobs could not be. Any database error aborts the sweep, and so
    does a batch whose rows stay in place after the delete, since the next
    query would return the same batch again.
    """

    def __init__(
        self,
        repository: ArtifactRecordRepository,
        storage: BlobStorage,
        *,
        batch_size: int = 200,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        self._repository = repository
        self._storage = storage
        self._batch_size = batch_size
        self._clock = clock

    @classmethod
    def with_session(cls, session: AsyncSession, container: "ApplicationContainer") -> "RetentionSweeper":
        return cls(
            SqlArtifactRecordRepository(session),
            container.storage,
            batch_size=container.settings.retention.sweep_batch_size,
        )

    async def sweep(self) -> SweepReport:
        report = SweepReport()
        cutoff = self._clock()

        while True:
            batch = await self._repository.list_expired(cutoff, self._batch_size)
            if not batch:
                break

            paths = [record.file_path for record in batch if record.file_path]
            if paths:
                try:
                    await self._storage.remove(paths)
                except BlobStorageError as exc:
                    logger.warning("Blob removal failed for %s expired archives: %s", len(paths), exc)
                else:
                    report.deleted_files_attempted += len(paths)

            deleted = await self._repository.delete_by_ids([record.id for record in batch])
            report.deleted_rows += deleted
            if deleted == 0:
                logger.warning(
                    "Expired batch of %s rows was not deleted and would be listed again, stopping sweep",
                    len(batch),
                )
                break

        logger.info(
            "Retention sweep removed %s rows (%s files attempted)",
            report.deleted_rows,
            report.deleted_files_attempted,
        )
        return report
