"""Form state of an ADR inspection checklist."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional

_INSPECTION_DATE_FORMATS = ("%d-%m-%Y", "%Y-%m-%d", "%d.%m.%Y", "%d/%m/%Y")


class ChecklistVariant(str, Enum):
    FULL = "full"
    REDUCED = "reduced"
    # older clients post the reduced checklist under this name
    UNDER_1000 = "under1000"

    @property
    def is_reduced(self) -> bool:
        return self is not ChecklistVariant.FULL

    @property
    def checklist_type(self) -> str:
        return "full" if self is ChecklistVariant.FULL else "reduced"

    @property
    def subtitle(self) -> str:
        return "Reduced (Under 1000 pts)" if self.is_reduced else "Full (1000+ pts)"


@dataclass(slots=True, frozen=True)
class MonthYear:
    """A month/year pair exactly as typed into the form."""

    month: str = ""
    year: str = ""

    def is_filled(self) -> bool:
        return bool(self.month) and bool(self.year)

    def as_tuple(self) -> Optional[tuple[int, int]]:
        """``(year, month)`` when both parts are valid numbers, else ``None``."""
        if not (self.month.isdigit() and self.year.isdigit()):
            return None
        month, year = int(self.month), int(self.year)
        if not 1 <= month <= 12 or year < 1000:
            return None
        return year, month

    def is_complete(self) -> bool:
        return len(self.month) == 2 and len(self.year) == 4 and self.as_tuple() is not None

    def display(self) -> str:
        return f"{self.month}/{self.year}"


@dataclass(slots=True, frozen=True)
class PhotoDescriptor:
    url: str
    name: str = ""
    content_type: str = "image/jpeg"


@dataclass(slots=True)
class ChecklistForm:
    variant: ChecklistVariant = ChecklistVariant.FULL
    driver_name: str = ""
    truck_plate: str = ""
    trailer_plate: str = ""
    inspection_date: str = ""
    driving_licence_expiry: MonthYear = field(default_factory=MonthYear)
    adr_certificate_expiry: MonthYear = field(default_factory=MonthYear)
    truck_document_expiry: MonthYear = field(default_factory=MonthYear)
    trailer_document_expiry: MonthYear = field(default_factory=MonthYear)
    equipment_checks: dict[str, bool] = field(default_factory=dict)
    equipment_expiry: dict[str, MonthYear] = field(default_factory=dict)
    before_loading_checks: dict[str, bool] = field(default_factory=dict)
    after_loading_checks: dict[str, bool] = field(default_factory=dict)
    remarks: str = ""
    inspector_name: str = ""
    driver_signature: Optional[str] = None
    inspector_signature: Optional[str] = None
    photos: list[PhotoDescriptor] = field(default_factory=list)

    @property
    def checklist_type(self) -> str:
        return self.variant.checklist_type

    @property
    def includes_adr_certificate(self) -> bool:
        return self.variant is ChecklistVariant.FULL

    def inspection_day(self) -> Optional[date]:
        raw = (self.inspection_date or "").strip()
        for fmt in _INSPECTION_DATE_FORMATS:
            try:
                return datetime.strptime(raw, fmt).date()
            except ValueError:
                continue
        return None

    def inspection_period(self) -> Optional[tuple[int, int]]:
        day = self.inspection_day()
        if day is None:
            return None
        return day.year, day.month

    def dotted_date(self) -> str:
        day = self.inspection_day()
        if day is not None:
            return day.strftime("%d.%m.%Y")
        return (self.inspection_date or "date").strip().replace("-", ".") or "date"

    def driver_slug(self) -> str:
        return re.sub(r"\s+", "_", (self.driver_name or "").strip() or "Driver")

    def is_checked(self, name: str) -> bool:
        return bool(self.equipment_checks.get(name))

    def expiry_for(self, name: str) -> MonthYear:
        return self.equipment_expiry.get(name) or MonthYear()
