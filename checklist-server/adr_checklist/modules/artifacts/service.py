"""Artifact store: one archive per fingerprint, refreshed on every re-store."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from adr_checklist.infrastructure.database.repositories.artifact_repository import (
    SqlArtifactRecordRepository,
)
from adr_checklist.infrastructure.storage.blob_storage import (
    BlobAlreadyExistsError,
    BlobNotFoundError,
    BlobStorage,
    BlobStorageError,
)
from adr_checklist.modules.packaging.archive import ArchiveReadError, extract_document, safe_file_name

from .exceptions import (
    ArtifactConflictError,
    ArtifactNotFoundError,
    ArtifactPersistenceError,
    ArtifactStorageError,
    ArtifactValidationError,
)
from .models import (
    ARCHIVE_CONTENT_TYPE,
    CHECKLIST_TYPES,
    ArtifactListing,
    ArtifactMeta,
    ArtifactRecord,
    PreviewDocument,
    StoreResult,
)
from .paths import candidate_paths, canonical_path
from .repository import ArtifactRecordRepository

if TYPE_CHECKING:
    from adr_checklist.core.container import ApplicationContainer

logger = logging.getLogger(__name__)

_HASH_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,128}$")

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ArtifactStoreService:
    """Owns the fingerprint -> (metadata row, blob) mapping."""

    def __init__(
        self,
        repository: ArtifactRecordRepository,
        storage: BlobStorage,
        *,
        bucket: str = "adr-checklists",
        retention_days: int = 60,
        link_ttl_seconds: int = 3600,
        clock: Clock = _utcnow,
    ) -> None:
        self._repository = repository
        self._storage = storage
        self._bucket = bucket
        self._retention = timedelta(days=retention_days)
        self._link_ttl_seconds = link_ttl_seconds
        self._clock = clock

    @classmethod
    def with_session(cls, session: AsyncSession, container: "ApplicationContainer") -> "ArtifactStoreService":
        settings = container.settings
        return cls(
            SqlArtifactRecordRepository(session),
            container.storage,
            bucket=settings.storage.bucket,
            retention_days=settings.retention.days,
            link_ttl_seconds=settings.storage.link_ttl_seconds,
        )

    async def store(
        self,
        checklist_type: str,
        checklist_hash: str,
        archive: bytes,
        *,
        meta: Optional[ArtifactMeta] = None,
        email_sent: bool = False,
    ) -> StoreResult:
        checklist_hash = (checklist_hash or "").strip()
        if not checklist_hash:
            raise ArtifactValidationError("Missing checklist hash")
        if not _HASH_PATTERN.match(checklist_hash):
            raise ArtifactValidationError("Checklist hash may only contain letters, digits, '-' and '_'")
        if checklist_type not in CHECKLIST_TYPES:
            raise ArtifactValidationError(f"Unknown checklist type: {checklist_type}")
        if not archive:
            raise ArtifactValidationError("Missing archive bytes")

        meta = meta or ArtifactMeta()
        now = self._clock()
        expires_at = now + self._retention

        existing = await self._guard(self._repository.get_by_hash(checklist_hash))
        if existing is None:
            record = await self._create(checklist_type, checklist_hash, archive, meta, email_sent, now, expires_at)
            created = True
        else:
            record = await self._refresh(existing, meta, email_sent, expires_at)
            created = False

        download_url = await self._sign(record.file_path or canonical_path(record.checklist_type, checklist_hash))
        return StoreResult(record=record, created=created, download_url=download_url)

    async def list_records(
        self,
        checklist_type: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[ArtifactListing]:
        type_filter = checklist_type if checklist_type in CHECKLIST_TYPES else None
        records = await self._guard(self._repository.list_records(type_filter))

        listings: list[ArtifactListing] = []
        for record in records:
            if not record.matches(search):
                continue
            url = await self._first_signed_url(candidate_paths(record, self._bucket))
            listings.append(ArtifactListing(record=record, download_url=url))
        return listings

    async def resolve_link(
        self,
        *,
        record_id: Optional[str] = None,
        checklist_hash: Optional[str] = None,
    ) -> ArtifactListing:
        record = await self._get_record(record_id, checklist_hash)
        url = await self._first_signed_url(candidate_paths(record, self._bucket))
        if url is None:
            raise ArtifactNotFoundError("Archive not found in storage")
        return ArtifactListing(record=record, download_url=url)

    async def preview(
        self,
        *,
        record_id: Optional[str] = None,
        checklist_hash: Optional[str] = None,
    ) -> PreviewDocument:
        record = await self._get_record(record_id, checklist_hash)

        paths = candidate_paths(record, self._bucket)
        reduced = canonical_path("reduced", record.checklist_hash)
        if reduced not in paths:
            paths.append(reduced)

        archive = await self._first_download(paths)
        if archive is None:
            raise ArtifactNotFoundError("Archive not found in storage. Tried: " + ", ".join(paths))

        try:
            found = extract_document(archive)
        except ArchiveReadError as exc:
            raise ArtifactStorageError(f"Stored archive is unreadable: {exc}") from exc
        if found is None:
            raise ArtifactNotFoundError("No PDF found in archive")

        _, content = found
        return PreviewDocument(content=content, file_name=f"{safe_file_name(record.checklist_hash)}.pdf")

    async def delete(self, record_id: str) -> ArtifactRecord:
        if not record_id:
            raise ArtifactValidationError("Missing record id")
        record = await self._guard(self._repository.get_by_id(record_id))
        if record is None:
            raise ArtifactNotFoundError("Record not found")

        if record.file_path:
            try:
                await self._storage.remove([record.file_path])
            except BlobStorageError as exc:
                logger.warning("Blob removal failed for %s, deleting the row anyway: %s", record.file_path, exc)

        await self._guard(self._repository.delete_by_ids([record.id]))
        logger.info("Deleted artifact %s (%s)", record.id, record.checklist_hash)
        return record

    async def _create(
        self,
        checklist_type: str,
        checklist_hash: str,
        archive: bytes,
        meta: ArtifactMeta,
        email_sent: bool,
        now: datetime,
        expires_at: datetime,
    ) -> ArtifactRecord:
        path = canonical_path(checklist_type, checklist_hash)
        try:
            await self._storage.upload(path, archive, content_type=ARCHIVE_CONTENT_TYPE, fail_if_exists=True)
        except BlobAlreadyExistsError as exc:
            raise ArtifactConflictError(str(exc)) from exc
        except BlobStorageError as exc:
            raise ArtifactStorageError(str(exc)) from exc

        try:
            record = await self._repository.create(
                checklist_type=checklist_type,
                checklist_hash=checklist_hash,
                file_path=path,
                created_at=now,
                expires_at=expires_at,
                email_sent=email_sent,
                meta=meta,
            )
            # the blob is only safe to keep once its row is durable
            await self._repository.commit()
        except SQLAlchemyError as exc:
            logger.warning("Metadata insert failed for %s, removing uploaded blob", path)
            await self._remove_quietly([path])
            raise ArtifactPersistenceError(str(exc)) from exc

        logger.info("Stored new artifact %s at %s", checklist_hash, path)
        return record

    async def _refresh(
        self,
        existing: ArtifactRecord,
        meta: ArtifactMeta,
        email_sent: bool,
        expires_at: datetime,
    ) -> ArtifactRecord:
        updated = await self._guard(
            self._repository.update_by_hash(
                existing.checklist_hash,
                expires_at=expires_at,
                email_sent=existing.email_sent or email_sent,
                meta=existing.meta.merged_with(meta),
            )
        )
        if updated is None:
            raise ArtifactNotFoundError("Record disappeared during update")
        logger.info("Refreshed artifact %s until %s", existing.checklist_hash, expires_at.isoformat())
        return updated

    async def _get_record(self, record_id: Optional[str], checklist_hash: Optional[str]) -> ArtifactRecord:
        if record_id:
            record = await self._guard(self._repository.get_by_id(record_id))
        elif checklist_hash:
            record = await self._guard(self._repository.get_by_hash(checklist_hash.strip()))
        else:
            raise ArtifactValidationError("Missing id or hash")
        if record is None:
            raise ArtifactNotFoundError("Record not found")
        return record

    async def _sign(self, path: str) -> Optional[str]:
        try:
            return await self._storage.create_signed_url(path, self._link_ttl_seconds)
        except BlobStorageError as exc:
            logger.warning("Could not issue link for %s: %s", path, exc)
            return None

    async def _first_signed_url(self, paths: Sequence[str]) -> Optional[str]:
        for path in paths:
            try:
                return await self._storage.create_signed_url(path, self._link_ttl_seconds)
            except BlobStorageError:
                continue
        return None

    async def _first_download(self, paths: Sequence[str]) -> Optional[bytes]:
        for path in paths:
            try:
                return await self._storage.download(path)
            except BlobNotFoundError:
                continue
            except BlobStorageError as exc:
                logger.warning("Download of %s failed: %s", path, exc)
                continue
        return None

    async def _remove_quietly(self, paths: Sequence[str]) -> None:
        try:
            await self._storage.remove(paths)
        except BlobStorageError as exc:
            logger.warning("Compensating removal failed for %s: %s", ", ".join(paths), exc)

    @staticmethod
    async def _guard(awaitable):
        try:
            return await awaitable
        except SQLAlchemyError as exc:
            raise ArtifactPersistenceError(str(exc)) from exc
