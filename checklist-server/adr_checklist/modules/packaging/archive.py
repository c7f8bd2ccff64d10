"""ZIP packaging of a rendered checklist and its photos."""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Sequence
from zipfile import ZIP_DEFLATED, BadZipFile, ZipFile, ZipInfo

import httpx

from adr_checklist.modules.checklist.models import ChecklistForm, PhotoDescriptor
from adr_checklist.modules.rendering.renderer import RenderedDocument

logger = logging.getLogger(__name__)

COMPRESS_LEVEL = 6
PHOTO_DIR = "photos"
# DOS epoch; keeps identical inputs byte-identical
ENTRY_DATE_TIME = (1980, 1, 1, 0, 0, 0)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


class ArchiveReadError(Exception):
    """Raised when stored bytes are not a readable ZIP archive."""


@dataclass(slots=True)
class SkippedPhoto:
    position: int
    name: str
    reason: str


@dataclass(slots=True)
class Archive:
    content: bytes
    file_name: str
    photo_count: int = 0
    skipped: list[SkippedPhoto] = field(default_factory=list)
    media_type: str = "application/zip"

    @property
    def size_bytes(self) -> int:
        return len(self.content)


def safe_file_name(value: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", value)


def archive_file_name(form: ChecklistForm) -> str:
    return f"ADR-Check_{form.driver_slug()}_{form.dotted_date()}.zip"


def photo_entry_name(index: int, name: Optional[str]) -> str:
    position = index + 1
    base = (name or "").strip() or f"photo_{position}.jpg"
    return f"{PHOTO_DIR}/{position:02d}_{safe_file_name(base)}"


def extract_document(archive: bytes, suffix: str = ".pdf") -> Optional[tuple[str, bytes]]:
    """Return ``(entry name, bytes)`` of the first entry ending in ``suffix``."""
    try:
        with ZipFile(io.BytesIO(archive)) as bundle:
            for info in bundle.infolist():
                if not info.is_dir() and info.filename.lower().endswith(suffix):
                    return info.filename, bundle.read(info)
    except BadZipFile as exc:
        raise ArchiveReadError(str(exc)) from exc
    return None


def _entry(name: str) -> ZipInfo:
    info = ZipInfo(name, date_time=ENTRY_DATE_TIME)
    info.compress_type = ZIP_DEFLATED
    info.external_attr = 0o644 << 16
    return info


class ArchivePackager:
    """Bundles the document with photos fetched one after another.

    A photo that cannot be fetched is logged and left out; the document is
    always written.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def package(
        self,
        document: RenderedDocument,
        photos: Sequence[PhotoDescriptor] = (),
        *,
        file_name: str = "checklist.zip",
    ) -> Archive:
        buffer = io.BytesIO()
        skipped: list[SkippedPhoto] = []
        written = 0

        with ZipFile(buffer, mode="w", compression=ZIP_DEFLATED, compresslevel=COMPRESS_LEVEL) as bundle:
            bundle.writestr(_entry(document.file_name), document.content, compresslevel=COMPRESS_LEVEL)

            for index, photo in enumerate(photos):
                entry_name = photo_entry_name(index, photo.name)
                if not (photo.url or "").strip():
                    skipped.append(SkippedPhoto(index + 1, entry_name, "missing url"))
                    continue
                try:
                    data = await self._fetch(photo.url)
                except (httpx.HTTPError, httpx.InvalidURL) as exc:
                    logger.warning("Photo %s could not be fetched, leaving it out: %s", photo.url, exc)
                    skipped.append(SkippedPhoto(index + 1, entry_name, str(exc)))
                    continue
                if not data:
                    logger.warning("Photo %s returned an empty body, leaving it out", photo.url)
                    skipped.append(SkippedPhoto(index + 1, entry_name, "empty body"))
                    continue
                bundle.writestr(_entry(entry_name), data, compresslevel=COMPRESS_LEVEL)
                written += 1

        content = buffer.getvalue()
        logger.info(
            "Packaged %s with %s/%s photos (%s bytes)",
            file_name,
            written,
            len(photos),
            len(content),
        )
        return Archive(content=content, file_name=file_name, photo_count=written, skipped=skipped)

    async def _fetch(self, url: str) -> bytes:
        response = await self._client.get(url)
        response.raise_for_status()
        return response.content
