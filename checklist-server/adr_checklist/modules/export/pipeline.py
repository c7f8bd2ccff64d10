"""Server side export of a checklist: hash, render, package, store, mail."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from adr_checklist.modules.artifacts.models import ArtifactMeta, StoreResult
from adr_checklist.modules.artifacts.service import ArtifactStoreService
from adr_checklist.modules.checklist.identity import fingerprint_form
from adr_checklist.modules.checklist.models import ChecklistForm
from adr_checklist.modules.mail.exceptions import MailerNotConfiguredError
from adr_checklist.modules.mail.mailer import ChecklistMailer
from adr_checklist.modules.packaging.archive import Archive, ArchivePackager, archive_file_name
from adr_checklist.modules.rendering.renderer import ChecklistRenderer, RenderedDocument

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ExportResult:
    checklist_hash: str
    checklist_type: str
    document: RenderedDocument
    archive: Archive
    stored: StoreResult
    emailed_to: list[str] = field(default_factory=list)

    @property
    def download_url(self) -> Optional[str]:
        return self.stored.download_url


def meta_from_form(form: ChecklistForm) -> ArtifactMeta:
    return ArtifactMeta.parse(
        {
            "driver_name": form.driver_name,
            "truck_plate": form.truck_plate,
            "trailer_plate": form.trailer_plate,
            "inspection_date": form.inspection_date,
            "inspector_name": form.inspector_name,
        }
    )


class ChecklistExportPipeline:
    """Runs every export through the same sequence.

    The fingerprint is taken from the form before rendering, and the archive
    is stored only once it holds the finished document. Mail goes out after
    the store, and a delivered mail refreshes the record with the sent flag.
    """

    def __init__(
        self,
        renderer: ChecklistRenderer,
        packager: ArchivePackager,
        store: ArtifactStoreService,
        mailer: Optional[ChecklistMailer] = None,
    ) -> None:
        self._renderer = renderer
        self._packager = packager
        self._store = store
        self._mailer = mailer

    async def export(self, form: ChecklistForm, *, send_email: bool = False) -> ExportResult:
        if send_email and self._mailer is None:
            raise MailerNotConfiguredError("No mailer available for this export")

        checklist_hash = fingerprint_form(form)
        document = self._renderer.render(form)
        archive = await self._packager.package(document, form.photos, file_name=archive_file_name(form))
        meta = meta_from_form(form)

        stored = await self._store.store(
            form.checklist_type,
            checklist_hash,
            archive.content,
            meta=meta,
            email_sent=False,
        )

        recipients: list[str] = []
        if send_email:
            # smtplib blocks, keep it off the event loop
            recipients = await asyncio.to_thread(self._mailer.send, form, archive)
            refreshed = await self._store.store(
                form.checklist_type,
                checklist_hash,
                archive.content,
                meta=meta,
                email_sent=True,
            )
            stored = replace(refreshed, created=stored.created)

        logger.info(
            "Exported %s checklist %s (%s bytes, new=%s, emailed=%s)",
            form.checklist_type,
            checklist_hash,
            archive.size_bytes,
            stored.created,
            bool(recipients),
        )
        return ExportResult(
            checklist_hash=checklist_hash,
            checklist_type=form.checklist_type,
            document=document,
            archive=archive,
            stored=stored,
            emailed_to=recipients,
        )
