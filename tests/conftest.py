"""Shared fixtures for the checklist service tests."""

from __future__ import annotations

import base64
import io
import zipfile
from collections.abc import AsyncIterator, Iterator
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from adr_checklist.core.config import MailSettings, Settings
from adr_checklist.db import models  # noqa: F401
from adr_checklist.infrastructure.database.base import Base
from adr_checklist.infrastructure.database.repositories import SqlArtifactRecordRepository
from adr_checklist.infrastructure.storage import LocalBlobStorage
from adr_checklist.modules.artifacts.service import ArtifactStoreService
from adr_checklist.modules.checklist.catalogue import (
    EQUIPMENT_ITEMS,
    FIRE_EXTINGUISHER,
    MASK_AND_FILTER,
    after_loading_items,
    before_loading_items,
)
from adr_checklist.modules.checklist.inspectors import InspectorDirectory, InspectorProfile
from adr_checklist.modules.checklist.models import (
    ChecklistForm,
    ChecklistVariant,
    MonthYear,
    PhotoDescriptor,
)

SECRET_KEY = "test-secret-key-0123456789"
DOWNLOAD_ROUTE = "http://testserver/api/artifacts/download"
INSPECTOR = "Anna Berg"
INSPECTOR_EMAIL = "anna.berg@example.com"
SMTP_SETTINGS = MailSettings(host="smtp.example.com", port=587, user="checklists@example.com", password="pw")


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: Any) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class RecordingSMTP:
    """Stand-in for ``smtplib.SMTP`` that records the conversation."""

    instances: list["RecordingSMTP"] = []
    fail_with: Exception | None = None

    def __init__(self, host: str, port: int, timeout: float | None = None) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self.calls: list[str] = []
        self.messages: list[Any] = []
        RecordingSMTP.instances.append(self)

    def __enter__(self) -> "RecordingSMTP":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.calls.append("quit")

    def ehlo(self) -> None:
        self.calls.append("ehlo")

    def starttls(self) -> None:
        self.calls.append("starttls")

    def login(self, user: str, password: str) -> None:
        self.calls.append(f"login:{user}")

    def send_message(self, message: Any) -> None:
        if RecordingSMTP.fail_with is not None:
            raise RecordingSMTP.fail_with
        self.calls.append("send_message")
        self.messages.append(message)


def png_bytes(color: str = "red", size: tuple[int, int] = (8, 8)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def png_data_url(color: str = "black") -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes(color, (60, 20))).decode("ascii")


def zip_archive(pdf: bytes | None = b"%PDF-1.4 stored") -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as bundle:
        if pdf is not None:
            bundle.writestr("ADR-Checklist_Jan_14.03.2026.pdf", pdf)
        bundle.writestr("photos/01_front.jpg", b"jpeg")
    return buffer.getvalue()


def build_form(**overrides: Any) -> ChecklistForm:
    variant = overrides.pop("variant", ChecklistVariant.FULL)
    values: dict[str, Any] = {
        "variant": variant,
        "driver_name": "Jan de Vries",
        "truck_plate": "AB-123-C",
        "trailer_plate": "TR-987",
        "inspection_date": "14-03-2026",
        "driving_licence_expiry": MonthYear("08", "2027"),
        "adr_certificate_expiry": MonthYear("02", "2026"),
        "truck_document_expiry": MonthYear("03", "2026"),
        "trailer_document_expiry": MonthYear(),
        "equipment_checks": {item.name: True for item in EQUIPMENT_ITEMS},
        "equipment_expiry": {
            FIRE_EXTINGUISHER: MonthYear("12", "2026"),
            MASK_AND_FILTER: MonthYear("01", "2026"),
        },
        "before_loading_checks": {label: True for label in before_loading_items(variant)},
        "after_loading_checks": {label: True for label in after_loading_items(variant)},
        "remarks": "Left mirror cracked, replacement ordered.",
        "inspector_name": INSPECTOR,
        "photos": [
            PhotoDescriptor(url="https://photos.test/front.jpg", name="front view.jpg"),
            PhotoDescriptor(url="https://photos.test/seal.jpg", name="seal.jpg"),
        ],
    }
    values.update(overrides)
    return ChecklistForm(**values)


@pytest.fixture
def sample_form() -> ChecklistForm:
    return build_form()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def inspectors() -> InspectorDirectory:
    return InspectorDirectory([InspectorProfile(INSPECTOR, "#1E90FF", (INSPECTOR_EMAIL,))])


@pytest.fixture
def storage(tmp_path: Path) -> LocalBlobStorage:
    blob_storage = LocalBlobStorage(
        tmp_path / "bucket",
        secret_key=SECRET_KEY,
        algorithm="HS256",
        download_route=DOWNLOAD_ROUTE,
    )
    blob_storage.ensure_bucket()
    return blob_storage


@pytest.fixture
def smtp_factory() -> Iterator[type[RecordingSMTP]]:
    RecordingSMTP.instances = []
    RecordingSMTP.fail_with = None
    yield RecordingSMTP
    RecordingSMTP.instances = []
    RecordingSMTP.fail_with = None


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    from adr_checklist.core.crypto import hash_password

    return Settings(
        _env_file=None,
        environment="test",
        database={"url": f"sqlite+aiosqlite:///{tmp_path / 'app.db'}"},
        security={
            "secret_key": SECRET_KEY,
            "admin_username": "admin",
            "admin_password_hash": hash_password("s3cret-pass"),
            "cron_secret": "cron-secret",
        },
        storage={"root": tmp_path / "storage", "public_base_url": "http://testserver"},
        rendering={"assets_dir": tmp_path / "assets"},
        mail={"host": "smtp.example.com", "user": "checklists@example.com", "password": "pw"},
        inspectors={INSPECTOR: {"color": "#1E90FF", "emails": [INSPECTOR_EMAIL]}},
    )


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    db_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db_engine
    await db_engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as db:
        yield db


@pytest.fixture
def repository(session: AsyncSession) -> SqlArtifactRecordRepository:
    return SqlArtifactRecordRepository(session)


@pytest.fixture
def artifact_service(
    repository: SqlArtifactRecordRepository,
    storage: LocalBlobStorage,
    clock: FixedClock,
) -> ArtifactStoreService:
    return ArtifactStoreService(repository, storage, clock=clock)
