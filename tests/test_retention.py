"""Tests for the retention sweeper."""

from __future__ import annotations

import pytest

from adr_checklist.infrastructure.database.repositories import SqlArtifactRecordRepository
from adr_checklist.infrastructure.storage import BlobStorageError
from adr_checklist.modules.retention.service import RetentionSweeper

from conftest import zip_archive as make_archive


class _BrokenRemoval:
    """Wraps a storage and fails every removal."""

    def __init__(self, storage) -> None:
        self._storage = storage
        self.remove_calls = 0

    async def remove(self, paths):
        self.remove_calls += 1
        raise BlobStorageError("bucket offline")

    def __getattr__(self, name):
        return getattr(self._storage, name)


class _StuckDeletes(SqlArtifactRecordRepository):
    async def delete_by_ids(self, record_ids):
        return 0


class TestRetentionSweeper:
    async def test_expired_records_are_removed_in_batches(self, artifact_service, repository, storage, clock):
        for index in range(5):
            await artifact_service.store("full", f"old-{index}", make_archive())
        clock.advance(days=30)
        await artifact_service.store("reduced", "fresh", make_archive())
        clock.advance(days=31)

        sweeper = RetentionSweeper(repository, storage, batch_size=2, clock=clock)
        report = await sweeper.sweep()

        assert report.deleted_rows == 5
        assert report.deleted_files_attempted == 5
        remaining = await repository.list_records()
        assert [record.checklist_hash for record in remaining] == ["fresh"]
        assert not await storage.exists("full/old-0.zip")
        assert await storage.exists("reduced/fresh.zip")

    async def test_nothing_to_do(self, repository, storage, clock):
        report = await RetentionSweeper(repository, storage, clock=clock).sweep()
        assert (report.deleted_rows, report.deleted_files_attempted) == (0, 0)

    async def test_rows_go_even_when_blobs_cannot_be_removed(self, artifact_service, repository, storage, clock):
        await artifact_service.store("full", "old-a", make_archive())
        await artifact_service.store("full", "old-b", make_archive())
        clock.advance(days=61)

        broken = _BrokenRemoval(storage)
        report = await RetentionSweeper(repository, broken, clock=clock).sweep()

        assert report.deleted_rows == 2
        assert report.deleted_files_attempted == 0
        assert broken.remove_calls == 1
        assert await repository.list_records() == []

    async def test_refreshed_record_survives(self, artifact_service, repository, storage, clock):
        await artifact_service.store("full", "kept", make_archive())
        clock.advance(days=59)
        await artifact_service.store("full", "kept", make_archive())
        clock.advance(days=2)

        report = await RetentionSweeper(repository, storage, clock=clock).sweep()
        assert report.deleted_rows == 0
        assert await repository.get_by_hash("kept") is not None

    async def test_batch_that_is_never_deleted_stops_the_sweep(self, artifact_service, session, storage, clock):
        await artifact_service.store("full", "stuck", make_archive())
        clock.advance(days=61)

        report = await RetentionSweeper(_StuckDeletes(session), storage, clock=clock).sweep()

        assert report.deleted_rows == 0
        assert report.deleted_files_attempted == 1

    def test_batch_size_must_be_positive(self):
        with pytest.raises(ValueError):
            RetentionSweeper(object(), object(), batch_size=0)
