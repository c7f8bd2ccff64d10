"""Deterministic fingerprints of checklist form state.

The fingerprint is the SHA-256 of a canonical JSON rendering of the form:
object keys sorted, list order kept, compact separators, UTF-8 bytes. Two
forms that are deeply equal always share a fingerprint, whatever order
their maps were filled in.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from .models import ChecklistForm, MonthYear

CIRCULAR_MARKER = "[Circular]"


def _month_year(value: MonthYear) -> dict[str, str]:
    return {"month": value.month, "year": value.year}


def build_identity(form: ChecklistForm) -> dict[str, Any]:
    """Project every form field, signatures and photo descriptors included."""
    return {
        "variant": form.variant.value,
        "driver_name": form.driver_name,
        "truck_plate": form.truck_plate,
        "trailer_plate": form.trailer_plate,
        "inspection_date": form.inspection_date,
        "driving_licence_expiry": _month_year(form.driving_licence_expiry),
        "adr_certificate_expiry": _month_year(form.adr_certificate_expiry),
        "truck_document_expiry": _month_year(form.truck_document_expiry),
        "trailer_document_expiry": _month_year(form.trailer_document_expiry),
        "equipment_checks": dict(form.equipment_checks),
        "equipment_expiry": {name: _month_year(value) for name, value in form.equipment_expiry.items()},
        "before_loading_checks": dict(form.before_loading_checks),
        "after_loading_checks": dict(form.after_loading_checks),
        "remarks": form.remarks,
        "inspector_name": form.inspector_name,
        "driver_signature": form.driver_signature,
        "inspector_signature": form.inspector_signature,
        "photos": [
            {"url": photo.url, "name": photo.name, "content_type": photo.content_type}
            for photo in form.photos
        ],
    }


def _normalize(value: Any, ancestors: set[int]) -> Any:
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, Enum):
        return _normalize(value.value, ancestors)
    if isinstance(value, str):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        value = {f.name: getattr(value, f.name) for f in fields(value)}

    if isinstance(value, (Mapping, list, tuple)):
        marker = id(value)
        if marker in ancestors:
            return CIRCULAR_MARKER
        ancestors.add(marker)
        try:
            if isinstance(value, Mapping):
                return {str(key): _normalize(value[key], ancestors) for key in sorted(value, key=str)}
            return [_normalize(item, ancestors) for item in value]
        finally:
            ancestors.discard(marker)

    return str(value)


def canonical_json(value: Any) -> str:
    return json.dumps(_normalize(value, set()), ensure_ascii=False, separators=(",", ":"))


def fingerprint(identity: Any) -> str:
    """Lowercase hex SHA-256 of the canonical JSON of ``identity``."""
    return hashlib.sha256(canonical_json(identity).encode("utf-8")).hexdigest()


def fingerprint_form(form: ChecklistForm) -> str:
    return fingerprint(build_identity(form))
