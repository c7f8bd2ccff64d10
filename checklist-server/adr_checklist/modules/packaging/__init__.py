"""Archive packaging of rendered checklists."""

from .archive import (
    Archive,
    ArchivePackager,
    ArchiveReadError,
    SkippedPhoto,
    archive_file_name,
    extract_document,
    photo_entry_name,
    safe_file_name,
)

__all__ = [
    "Archive",
    "ArchivePackager",
    "ArchiveReadError",
    "SkippedPhoto",
    "archive_file_name",
    "extract_document",
    "photo_entry_name",
    "safe_file_name",
]
