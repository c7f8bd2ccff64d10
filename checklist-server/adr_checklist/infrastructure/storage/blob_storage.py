"""Blob storage for checklist archives.

``LocalBlobStorage`` keeps a bucket directory on disk and hands out signed
retrieval links that point back at the service's download route.
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Optional, Protocol, Sequence

from adr_checklist.core.security import create_link_token, decode_link_token

logger = logging.getLogger(__name__)


class BlobStorageError(Exception):
    """Raised when the blob store cannot complete an operation."""


class BlobAlreadyExistsError(BlobStorageError):
    """Raised when ``fail_if_exists`` is set and the path is occupied."""


class BlobNotFoundError(BlobStorageError):
    """Raised when no object exists at the requested path."""


class BlobStorage(Protocol):
    async def upload(
        self,
        path: str,
        data: bytes,
        *,
        content_type: str = "application/octet-stream",
        fail_if_exists: bool = True,
    ) -> None:
        ...

    async def remove(self, paths: Sequence[str]) -> list[str]:
        ...

    async def create_signed_url(self, path: str, ttl_seconds: int) -> str:
        ...

    async def download(self, path: str) -> bytes:
        ...

    async def exists(self, path: str) -> bool:
        ...


class LocalBlobStorage:
    """Filesystem-backed bucket."""

    def __init__(
        self,
        root: Path,
        *,
        secret_key: str,
        algorithm: str,
        download_route: str,
    ) -> None:
        self._root = Path(root).resolve()
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._download_route = download_route

    @property
    def root(self) -> Path:
        return self._root

    def ensure_bucket(self) -> None:
        self._root.mkdir(parents=True, exist_ok=True)

    async def upload(
        self,
        path: str,
        data: bytes,
        *,
        content_type: str = "application/octet-stream",
        fail_if_exists: bool = True,
    ) -> None:
        target = self._resolve(path)
        mode = "xb" if fail_if_exists else "wb"
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open(mode) as buffer:
                buffer.write(data)
        except FileExistsError as exc:
            raise BlobAlreadyExistsError(f"The resource already exists: {path}") from exc
        except OSError as exc:
            target.unlink(missing_ok=True)
            raise BlobStorageError(f"Upload failed for {path}: {exc}") from exc
        logger.debug("Stored %s (%s, %s bytes)", path, content_type, len(data))

    async def remove(self, paths: Sequence[str]) -> list[str]:
        """Delete every path; missing objects are ignored, other failures raise after the loop."""
        removed: list[str] = []
        failures: list[str] = []
        for path in paths:
            try:
                target = self._resolve(path)
                if target.exists():
                    target.unlink()
                    removed.append(path)
            except (OSError, BlobStorageError) as exc:
                failures.append(f"{path}: {exc}")
        if failures:
            raise BlobStorageError("Failed to remove " + "; ".join(failures))
        return removed

    async def create_signed_url(self, path: str, ttl_seconds: int) -> str:
        if not await self.exists(path):
            raise BlobNotFoundError(f"Object not found: {path}")
        token = create_link_token(
            path.strip().lstrip("/"),
            ttl_seconds,
            secret_key=self._secret_key,
            algorithm=self._algorithm,
        )
        return f"{self._download_route}?token={token}"

    async def download(self, path: str) -> bytes:
        target = self._resolve(path)
        try:
            return target.read_bytes()
        except FileNotFoundError as exc:
            raise BlobNotFoundError(f"Object not found: {path}") from exc
        except OSError as exc:
            raise BlobStorageError(f"Download failed for {path}: {exc}") from exc

    async def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    async def open_signed(self, token: str) -> tuple[str, bytes]:
        """Return ``(path, content)`` for a valid retrieval token."""
        path = decode_link_token(token, secret_key=self._secret_key, algorithm=self._algorithm)
        return path, await self.download(path)

    @staticmethod
    def guess_content_type(path: str) -> str:
        content_type, _ = mimetypes.guess_type(path)
        return content_type or "application/octet-stream"

    def _resolve(self, path: Optional[str]) -> Path:
        cleaned = (path or "").strip().lstrip("/")
        if not cleaned:
            raise BlobStorageError("Empty object path")
        target = (self._root / cleaned).resolve()
        if self._root not in target.parents:
            raise BlobStorageError(f"Invalid object path: {path}")
        return target


__all__ = [
    "BlobStorage",
    "LocalBlobStorage",
    "BlobStorageError",
    "BlobAlreadyExistsError",
    "BlobNotFoundError",
]
