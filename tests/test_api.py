"""HTTP tests for the checklist service routes."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from adr_checklist.api.deps import get_app_container, get_db_session, get_photo_client
from adr_checklist.core.config import get_settings
from adr_checklist.core.container import ApplicationContainer
from adr_checklist.infrastructure.database.base import Base
from adr_checklist.main import create_app
from adr_checklist.modules.checklist.identity import fingerprint_form
from adr_checklist.modules.mail.mailer import ChecklistMailer
from adr_checklist.schemas import ChecklistFormPayload

from conftest import INSPECTOR, INSPECTOR_EMAIL, zip_archive

HASH = "b" * 64

FORM_JSON = {
    "variant": "full",
    "driverName": "Jan de Vries",
    "truckPlate": "AB-123-C",
    "trailerPlate": "TR-987",
    "inspectionDate": "14-03-2026",
    "drivingLicenceExpiry": {"month": "08", "year": "2027"},
    "adrCertificateExpiry": {"month": "02", "year": "2026"},
    "truckDocumentExpiry": {"month": "03", "year": "2026"},
    "trailerDocumentExpiry": {"month": "", "year": ""},
    "equipmentChecks": {"Fire extinguisher": True, "Shovel": True},
    "equipmentExpiry": {"Fire extinguisher": {"month": "12", "year": "2026"}},
    "beforeLoadingChecks": {"ADR plate front+back": True},
    "afterLoadingChecks": {"Seal on right door": True},
    "remarks": "All fine",
    "inspectorName": INSPECTOR,
    "photos": [{"url": "https://photos.test/front.jpg", "name": "front.jpg"}],
}


def _photo_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, content=b"jpeg-bytes")


@pytest.fixture
def container(settings, smtp_factory) -> ApplicationContainer:
    app_container = ApplicationContainer.from_settings(settings)
    app_container.storage.ensure_bucket()
    app_container.mailer = ChecklistMailer(settings.mail, app_container.inspectors, smtp_factory=smtp_factory)
    return app_container


@pytest.fixture
def client(tmp_path: Path, settings, container) -> TestClient:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'api.db'}", poolclass=NullPool)

    async def create_tables() -> None:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_tables())
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async def override_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def override_photo_client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(_photo_handler)) as photo_client:
            yield photo_client

    app = create_app()
    app.dependency_overrides[get_db_session] = override_session
    app.dependency_overrides[get_app_container] = lambda: container
    app.dependency_overrides[get_photo_client] = override_photo_client
    app.dependency_overrides[get_settings] = lambda: settings

    yield TestClient(app)
    asyncio.run(engine.dispose())


def _store(client: TestClient, checklist_hash: str = HASH, **fields) -> httpx.Response:
    data = {"checklist_type": "full", "checklist_hash": checklist_hash, **fields}
    files = {"file": ("archive.zip", zip_archive(b"%PDF-1.4 api"), "application/zip")}
    return client.post("/api/artifacts/store", data=data, files=files)


def _path_of(url: str) -> str:
    parsed = httpx.URL(url)
    return f"{parsed.path}?{parsed.query.decode()}"


class TestFingerprint:
    def test_matches_the_domain_fingerprint(self, client):
        response = client.post("/api/checklists/fingerprint", json=FORM_JSON)
        assert response.status_code == 200
        body = response.json()
        expected = fingerprint_form(ChecklistFormPayload.model_validate(FORM_JSON).to_domain())
        assert body["success"] is True
        assert body["data"] == {"checklist_hash": expected, "checklist_type": "full"}

    def test_legacy_variant_is_reduced(self, client):
        response = client.post("/api/checklists/fingerprint", json={**FORM_JSON, "variant": "under1000"})
        assert response.json()["data"]["checklist_type"] == "reduced"

    def test_validation_errors_are_400(self, client):
        response = client.post("/api/checklists/fingerprint", json={**FORM_JSON, "variant": "huge"})
        assert response.status_code == 400
        assert response.json()["success"] is False


class TestStoreAndHistory:
    def test_store_then_update(self, client):
        first = _store(client, meta=json.dumps({"driverName": "Jan"}), email_sent="true")
        assert first.status_code == 200
        assert first.json()["message"] == "Stored"
        assert first.json()["data"]["created"] is True
        assert first.json()["data"]["record"]["meta"]["driver_name"] == "Jan"

        second = _store(client, meta=json.dumps({"truckNumber": "AB-1"}))
        body = second.json()["data"]
        assert second.json()["message"] == "Updated"
        assert body["created"] is False
        assert body["record"]["email_sent"] is True
        assert body["record"]["meta"]["driver_name"] == "Jan"
        assert body["record"]["meta"]["truck_plate"] == "AB-1"

    def test_missing_file(self, client):
        response = client.post("/api/artifacts/store", data={"checklist_type": "full", "checklist_hash": HASH})
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Missing file"}

    def test_bad_hash_is_rejected(self, client):
        assert _store(client, checklist_hash="bad/hash").status_code == 400

    def test_listing_is_not_cached_and_searchable(self, client):
        _store(client, meta=json.dumps({"driverName": "Jan de Vries"}))
        _store(client, checklist_hash="c" * 64, meta=json.dumps({"driverName": "Piet"}))

        response = client.get("/api/artifacts", params={"q": "vries"})
        assert response.status_code == 200
        assert response.headers["cache-control"] == "no-store"
        data = response.json()["data"]
        assert data["total"] == 1
        assert data["items"][0]["checklist_hash"] == HASH
        assert data["items"][0]["download_url"]

        assert client.get("/api/artifacts", params={"type": "reduced"}).json()["data"]["total"] == 0

    def test_link_and_download(self, client):
        _store(client)
        link = client.get("/api/artifacts/link", params={"hash": HASH})
        assert link.status_code == 200
        url = link.json()["data"]["download_url"]

        download = client.get(_path_of(url))
        assert download.status_code == 200
        assert download.headers["content-type"] == "application/zip"
        assert download.content == zip_archive(b"%PDF-1.4 api")

    def test_link_for_unknown_hash(self, client):
        assert client.get("/api/artifacts/link", params={"hash": "nope"}).status_code == 404

    def test_download_with_a_bad_token(self, client):
        response = client.get("/api/artifacts/download", params={"token": "not-a-token"})
        assert response.status_code == 401

    def test_preview_is_inline_pdf(self, client):
        _store(client)
        response = client.get("/api/artifacts/preview", params={"hash": HASH})
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == f'inline; filename="{HASH}.pdf"'
        assert response.headers["cache-control"] == "no-store"
        assert response.content == b"%PDF-1.4 api"


class TestDelete:
    def test_requires_admin_credentials(self, client):
        record_id = _store(client).json()["data"]["record"]["id"]
        response = client.post(
            "/api/artifacts/delete",
            json={"id": record_id, "username": "admin", "password": "wrong"},
        )
        assert response.status_code == 401
        assert client.get("/api/artifacts").json()["data"]["total"] == 1

    def test_deletes_record(self, client):
        record_id = _store(client).json()["data"]["record"]["id"]
        response = client.post(
            "/api/artifacts/delete",
            json={"id": record_id, "username": "admin", "password": "s3cret-pass"},
        )
        assert response.status_code == 200
        assert response.json()["data"]["id"] == record_id
        assert client.get("/api/artifacts").json()["data"]["total"] == 0

    def test_unknown_record(self, client):
        response = client.post(
            "/api/artifacts/delete",
            json={"id": "missing", "username": "admin", "password": "s3cret-pass"},
        )
        assert response.status_code == 404

    def test_missing_id_is_a_validation_error(self, client):
        response = client.post("/api/artifacts/delete", json={"username": "admin", "password": "s3cret-pass"})
        assert response.status_code == 400


class TestExports:
    def test_download_export(self, client):
        response = client.post("/api/exports/download", json=FORM_JSON)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["created"] is True
        assert data["photo_count"] == 1
        assert data["archive_name"] == "ADR-Check_Jan_de_Vries_14.03.2026.zip"
        assert data["download_url"]

        again = client.post("/api/exports/download", json=FORM_JSON).json()
        assert again["data"]["created"] is False
        assert again["data"]["record_id"] == data["record_id"]

    def test_email_export(self, client, smtp_factory):
        response = client.post("/api/exports/email", json=FORM_JSON)
        assert response.status_code == 200
        assert response.json()["data"]["emailed_to"] == [INSPECTOR_EMAIL]
        assert response.json()["data"]["created"] is True
        assert len(smtp_factory.instances) == 1

        listed = client.get("/api/artifacts").json()["data"]["items"]
        assert listed[0]["email_sent"] is True

    def test_email_export_without_recipients(self, client):
        response = client.post("/api/exports/email", json={**FORM_JSON, "inspectorName": "Nobody"})
        assert response.status_code == 400

        listed = client.get("/api/artifacts").json()["data"]["items"]
        assert len(listed) == 1
        assert listed[0]["email_sent"] is False


class TestPurge:
    def test_requires_the_cron_secret(self, client):
        assert client.post("/api/maintenance/purge-expired").status_code == 401
        response = client.post("/api/maintenance/purge-expired", headers={"x-cron-secret": "wrong"})
        assert response.status_code == 401

    def test_runs_the_sweep(self, client):
        _store(client)
        response = client.post("/api/maintenance/purge-expired", headers={"x-cron-secret": "cron-secret"})
        assert response.status_code == 200
        assert response.json()["data"] == {"deleted_rows": 0, "deleted_files_attempted": 0}


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json()["status"] == "ok"
