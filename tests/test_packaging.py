"""Tests for ZIP packaging of rendered checklists."""

from __future__ import annotations

import io
import zipfile

import httpx
import pytest

from adr_checklist.modules.checklist.models import PhotoDescriptor
from adr_checklist.modules.packaging.archive import (
    ENTRY_DATE_TIME,
    ArchivePackager,
    ArchiveReadError,
    archive_file_name,
    extract_document,
    photo_entry_name,
    safe_file_name,
)
from adr_checklist.modules.rendering.renderer import RenderedDocument

from conftest import build_form

PDF = RenderedDocument(content=b"%PDF-1.4 fake document", file_name="ADR-Checklist_Jan_de_Vries_14.03.2026.pdf")


def _photo_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/down.jpg":
        raise httpx.ConnectError("connection refused", request=request)
    if request.url.path == "/missing.jpg":
        return httpx.Response(404)
    if request.url.path == "/empty.jpg":
        return httpx.Response(200, content=b"")
    return httpx.Response(200, content=b"jpeg:" + request.url.path.encode())


@pytest.fixture
async def packager():
    async with httpx.AsyncClient(transport=httpx.MockTransport(_photo_handler)) as client:
        yield ArchivePackager(client)


class TestNames:
    def test_safe_file_name(self):
        assert safe_file_name("front view (1).jpg") == "front_view__1_.jpg"

    def test_photo_entry_name_is_one_based_and_padded(self):
        assert photo_entry_name(0, "seal.jpg") == "photos/01_seal.jpg"
        assert photo_entry_name(11, "") == "photos/12_photo_12.jpg"

    def test_archive_file_name(self):
        assert archive_file_name(build_form()) == "ADR-Check_Jan_de_Vries_14.03.2026.zip"


class TestArchivePackager:
    async def test_document_and_photos_are_written(self, packager):
        photos = [
            PhotoDescriptor(url="https://photos.test/front.jpg", name="front view.jpg"),
            PhotoDescriptor(url="https://photos.test/seal.jpg", name=""),
        ]
        archive = await packager.package(PDF, photos, file_name="bundle.zip")

        with zipfile.ZipFile(io.BytesIO(archive.content)) as bundle:
            assert bundle.namelist() == [PDF.file_name, "photos/01_front_view.jpg", "photos/02_photo_2.jpg"]
            assert bundle.read(PDF.file_name) == PDF.content
            assert bundle.read("photos/01_front_view.jpg") == b"jpeg:/front.jpg"
            for info in bundle.infolist():
                assert info.compress_type == zipfile.ZIP_DEFLATED
                assert info.date_time == ENTRY_DATE_TIME

        assert archive.file_name == "bundle.zip"
        assert archive.photo_count == 2
        assert archive.skipped == []
        assert archive.size_bytes == len(archive.content)

    async def test_failed_photos_are_skipped(self, packager):
        photos = [
            PhotoDescriptor(url="https://photos.test/down.jpg", name="down.jpg"),
            PhotoDescriptor(url="https://photos.test/missing.jpg", name="missing.jpg"),
            PhotoDescriptor(url="https://photos.test/empty.jpg", name="empty.jpg"),
            PhotoDescriptor(url="", name="nourl.jpg"),
            PhotoDescriptor(url="https://photos.test/ok.jpg", name="ok.jpg"),
        ]
        archive = await packager.package(PDF, photos)

        with zipfile.ZipFile(io.BytesIO(archive.content)) as bundle:
            assert bundle.namelist() == [PDF.file_name, "photos/05_ok.jpg"]
        assert archive.photo_count == 1
        assert [skipped.position for skipped in archive.skipped] == [1, 2, 3, 4]

    async def test_identical_inputs_give_identical_bytes(self, packager):
        photos = [PhotoDescriptor(url="https://photos.test/a.jpg", name="a.jpg")]
        first = await packager.package(PDF, photos)
        second = await packager.package(PDF, photos)
        assert first.content == second.content


class TestExtractDocument:
    async def test_returns_first_pdf_entry(self, packager):
        archive = await packager.package(PDF, [])
        assert extract_document(archive.content) == (PDF.file_name, PDF.content)

    def test_archive_without_pdf(self):
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as bundle:
            bundle.writestr("photos/01_a.jpg", b"jpeg")
        assert extract_document(buffer.getvalue()) is None

    def test_garbage_bytes_raise(self):
        with pytest.raises(ArchiveReadError):
            extract_document(b"definitely not a zip")
