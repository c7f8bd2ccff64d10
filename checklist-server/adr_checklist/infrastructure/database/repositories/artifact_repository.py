"""SQLAlchemy implementation of the artifact record repository."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from adr_checklist.db.models import ArtifactRecord as ArtifactRecordModel
from adr_checklist.modules.artifacts.models import ArtifactMeta, ArtifactRecord
from adr_checklist.modules.artifacts.repository import ArtifactRecordRepository


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SqlArtifactRecordRepository(ArtifactRecordRepository):
    """Artifact metadata stored in the ``artifact_records`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_hash(self, checklist_hash: str) -> ArtifactRecord | None:
        model = await self._get_model_by_hash(checklist_hash)
        return self._to_domain(model)

    async def get_by_id(self, record_id: str) -> ArtifactRecord | None:
        stmt = select(ArtifactRecordModel).where(ArtifactRecordModel.id == record_id)
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def list_records(self, checklist_type: Optional[str] = None) -> Sequence[ArtifactRecord]:
        stmt = select(ArtifactRecordModel)
        if checklist_type:
            stmt = stmt.where(ArtifactRecordModel.checklist_type == checklist_type)
        stmt = stmt.order_by(ArtifactRecordModel.created_at.desc(), ArtifactRecordModel.id)
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def list_expired(self, before: datetime, limit: int) -> Sequence[ArtifactRecord]:
        stmt = (
            select(ArtifactRecordModel)
            .where(ArtifactRecordModel.expires_at < before)
            .order_by(ArtifactRecordModel.expires_at.asc(), ArtifactRecordModel.id)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def create(
        self,
        *,
        checklist_type: str,
        checklist_hash: str,
        file_path: str,
        created_at: datetime,
        expires_at: datetime,
        email_sent: bool,
        meta: ArtifactMeta,
    ) -> ArtifactRecord:
        model = ArtifactRecordModel(
            checklist_type=checklist_type,
            checklist_hash=checklist_hash,
            file_path=file_path,
            created_at=created_at,
            expires_at=expires_at,
            email_sent=email_sent,
            meta=meta.to_json(),
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def update_by_hash(
        self,
        checklist_hash: str,
        *,
        expires_at: datetime,
        email_sent: bool,
        meta: ArtifactMeta,
    ) -> ArtifactRecord | None:
        model = await self._get_model_by_hash(checklist_hash)
        if model is None:
            return None

        model.expires_at = expires_at
        model.email_sent = email_sent
        model.meta = meta.to_json()

        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def delete_by_ids(self, record_ids: Sequence[str]) -> int:
        if not record_ids:
            return 0
        stmt = delete(ArtifactRecordModel).where(ArtifactRecordModel.id.in_(list(record_ids)))
        result = await self._session.execute(stmt)
        await self._session.flush()
        return int(result.rowcount or 0)

    async def commit(self) -> None:
        await self._session.commit()

    async def _get_model_by_hash(self, checklist_hash: str) -> ArtifactRecordModel | None:
        stmt = select(ArtifactRecordModel).where(ArtifactRecordModel.checklist_hash == checklist_hash)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: ArtifactRecordModel | None) -> ArtifactRecord | None:
        if model is None:
            return None
        return ArtifactRecord(
            id=str(model.id),
            checklist_type=model.checklist_type,
            checklist_hash=model.checklist_hash,
            file_path=model.file_path or "",
            created_at=_as_utc(model.created_at),
            expires_at=_as_utc(model.expires_at),
            email_sent=bool(model.email_sent),
            meta=ArtifactMeta.parse(model.meta),
        )
