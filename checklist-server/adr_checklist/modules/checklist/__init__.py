"""Checklist form model, item catalogue, expiry rule and fingerprints."""

from .catalogue import (
    AFTER_LOADING_ITEMS,
    BEFORE_LOADING_ITEMS,
    EQUIPMENT_ITEMS,
    EquipmentItem,
    after_loading_items,
    before_loading_items,
    equipment_items,
)
from .expiry import CheckStatus, equipment_status, is_expired, is_expired_on, line_status
from .identity import build_identity, canonical_json, fingerprint, fingerprint_form
from .inspectors import DEFAULT_INSPECTOR_COLOR, InspectorDirectory, InspectorProfile
from .models import ChecklistForm, ChecklistVariant, MonthYear, PhotoDescriptor

__all__ = [
    "AFTER_LOADING_ITEMS",
    "BEFORE_LOADING_ITEMS",
    "EQUIPMENT_ITEMS",
    "EquipmentItem",
    "after_loading_items",
    "before_loading_items",
    "equipment_items",
    "CheckStatus",
    "equipment_status",
    "is_expired",
    "is_expired_on",
    "line_status",
    "build_identity",
    "canonical_json",
    "fingerprint",
    "fingerprint_form",
    "DEFAULT_INSPECTOR_COLOR",
    "InspectorDirectory",
    "InspectorProfile",
    "ChecklistForm",
    "ChecklistVariant",
    "MonthYear",
    "PhotoDescriptor",
]
