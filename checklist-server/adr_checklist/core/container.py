"""Dependency container wiring settings to the long-lived collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

import httpx

from adr_checklist.core.config import Settings, get_settings
from adr_checklist.infrastructure.database.session import get_engine
from adr_checklist.infrastructure.storage.blob_storage import LocalBlobStorage
from adr_checklist.modules.checklist.inspectors import InspectorDirectory
from adr_checklist.modules.mail.mailer import ChecklistMailer
from adr_checklist.modules.rendering.images import AssetLoader
from adr_checklist.modules.rendering.renderer import ChecklistRenderer


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    storage: LocalBlobStorage
    inspectors: InspectorDirectory
    renderer: ChecklistRenderer
    mailer: ChecklistMailer

    @classmethod
    def from_settings(cls, settings: Settings) -> "ApplicationContainer":
        inspectors = InspectorDirectory.from_settings(settings.inspectors)
        storage = LocalBlobStorage(
            settings.bucket_dir,
            secret_key=settings.secret_key,
            algorithm=settings.algorithm,
            download_route=settings.download_route,
        )
        renderer = ChecklistRenderer(
            AssetLoader(settings.rendering.assets_dir),
            inspectors,
            watermark_file=settings.rendering.watermark_file,
            watermark_opacity=settings.rendering.watermark_opacity,
        )
        return cls(
            settings=settings,
            storage=storage,
            inspectors=inspectors,
            renderer=renderer,
            mailer=ChecklistMailer(settings.mail, inspectors),
        )

    def init_infrastructure(self) -> None:
        """Ensure the database engine and the bucket directory exist."""
        get_engine()
        self.storage.ensure_bucket()

    def photo_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.settings.photo_fetch_timeout, follow_redirects=True)


@lru_cache()
def get_container() -> ApplicationContainer:
    container = ApplicationContainer.from_settings(get_settings())
    container.init_infrastructure()
    return container


__all__ = ["ApplicationContainer", "get_container"]
