"""Repository protocol for artifact metadata persistence."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .models import ArtifactMeta, ArtifactRecord


class ArtifactRecordRepository(Protocol):
    async def get_by_hash(self, checklist_hash: str) -> ArtifactRecord | None:
        ...

    async def get_by_id(self, record_id: str) -> ArtifactRecord | None:
        ...

    async def list_records(self, checklist_type: Optional[str] = None) -> Sequence[ArtifactRecord]:
        ...

    async def list_expired(self, before: datetime, limit: int) -> Sequence[ArtifactRecord]:
        ...

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
        ...

    async def update_by_hash(
        self,
        checklist_hash: str,
        *,
        expires_at: datetime,
        email_sent: bool,
        meta: ArtifactMeta,
    ) -> ArtifactRecord | None:
        ...

    async def delete_by_ids(self, record_ids: Sequence[str]) -> int:
        ...

    async def commit(self) -> None:
        ...
