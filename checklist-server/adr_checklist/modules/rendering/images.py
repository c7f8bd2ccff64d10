"""Image loading for the checklist document.

Every loader returns ``None`` instead of raising: a missing icon, watermark
or signature leaves a gap in the page, nothing more.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
from pathlib import Path
from typing import Optional

from PIL import Image

logger = logging.getLogger(__name__)


def open_image(source: Path | bytes) -> Optional[Image.Image]:
    try:
        handle = io.BytesIO(source) if isinstance(source, bytes) else source
        with Image.open(handle) as image:
            image.load()
            return image.convert("RGBA")
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        logger.debug("Skipping unreadable image %s: %s", source if isinstance(source, Path) else "<bytes>", exc)
        return None


def decode_data_url(value: Optional[str]) -> Optional[Image.Image]:
    """Decode a ``data:image/...;base64,`` URL as produced by a signature pad."""
    if not value or not value.startswith("data:"):
        return None
    header, _, payload = value.partition(",")
    if ";base64" not in header or not payload:
        return None
    try:
        raw = base64.b64decode(payload)
    except (binascii.Error, ValueError) as exc:
        logger.debug("Skipping malformed data URL: %s", exc)
        return None
    return open_image(raw)


class AssetLoader:
    """Reads images from the assets directory, remembering misses too."""

    def __init__(self, assets_dir: Path) -> None:
        self._assets_dir = Path(assets_dir)
        self._cache: dict[str, Optional[Image.Image]] = {}

    @property
    def assets_dir(self) -> Path:
        return self._assets_dir

    def get(self, file_name: str) -> Optional[Image.Image]:
        if file_name not in self._cache:
            path = self._assets_dir / file_name
            self._cache[file_name] = open_image(path) if path.is_file() else None
            if self._cache[file_name] is None:
                logger.debug("Asset %s unavailable", path)
        return self._cache[file_name]
