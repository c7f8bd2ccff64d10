"""Domain models for stored checklist archives."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from typing import Any, Optional

CHECKLIST_TYPES: tuple[str, ...] = ("full", "reduced")
ARCHIVE_CONTENT_TYPE = "application/zip"
DOCUMENT_CONTENT_TYPE = "application/pdf"

# Key spellings written by the different generations of the checklist UI.
_META_ALIASES: dict[str, tuple[str, ...]] = {
    "driver_name": ("driver_name", "driverName"),
    "truck_plate": ("truck_plate", "truckPlate", "truck_number", "truckNumber"),
    "trailer_plate": ("trailer_plate", "trailerPlate", "trailer_number", "trailerNumber"),
    "inspection_date": ("inspection_date", "inspectionDate"),
    "inspector_name": ("inspector_name", "inspectorName"),
}


@dataclass(slots=True, frozen=True)
class ArtifactMeta:
    """Descriptive, non identity-bearing fields shown in the history list."""

    driver_name: Optional[str] = None
    truck_plate: Optional[str] = None
    trailer_plate: Optional[str] = None
    inspection_date: Optional[str] = None
    inspector_name: Optional[str] = None

    @classmethod
    def parse(cls, raw: Any) -> "ArtifactMeta":
        """Build meta from a mapping or a JSON-encoded mapping; anything else yields empty meta."""
        if raw is None:
            return cls()
        if isinstance(raw, ArtifactMeta):
            return raw
        if isinstance(raw, (str, bytes)):
            try:
                raw = json.loads(raw)
            except (TypeError, ValueError):
                return cls()
        if not isinstance(raw, Mapping):
            return cls()

        values: dict[str, str] = {}
        for name, aliases in _META_ALIASES.items():
            for alias in aliases:
                value = raw.get(alias)
                if value is None or isinstance(value, (dict, list)):
                    continue
                text = str(value).strip()
                if text:
                    values[name] = text
                    break
        return cls(**values)

    def to_mapping(self) -> dict[str, str]:
        return {key: value for key, value in asdict(self).items() if value is not None}

    def to_json(self) -> str:
        return json.dumps(self.to_mapping(), ensure_ascii=False, sort_keys=True)

    def merged_with(self, other: "ArtifactMeta") -> "ArtifactMeta":
        """Shallow merge: fields set on ``other`` overwrite ours."""
        return replace(self, **other.to_mapping())

    def is_empty(self) -> bool:
        return not self.to_mapping()

    def matches(self, query: str) -> bool:
        needle = query.strip().lower()
        if not needle:
            return True
        haystack = (
            self.driver_name,
            self.truck_plate,
            self.trailer_plate,
            self.inspector_name,
        )
        return any(needle in value.lower() for value in haystack if value)


@dataclass(slots=True)
class ArtifactRecord:
    id: str
    checklist_type: str
    checklist_hash: str
    file_path: str
    expires_at: datetime
    created_at: Optional[datetime] = None
    email_sent: bool = False
    meta: ArtifactMeta = field(default_factory=ArtifactMeta)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at < now

    def matches(self, query: Optional[str]) -> bool:
        if not query or not query.strip():
            return True
        return query.strip().lower() in self.checklist_hash.lower() or self.meta.matches(query)


@dataclass(slots=True)
class StoreResult:
    record: ArtifactRecord
    created: bool
    download_url: Optional[str] = None


@dataclass(slots=True)
class ArtifactListing:
    record: ArtifactRecord
    download_url: Optional[str] = None


@dataclass(slots=True)
class PreviewDocument:
    content: bytes
    file_name: str
    media_type: str = DOCUMENT_CONTENT_TYPE
