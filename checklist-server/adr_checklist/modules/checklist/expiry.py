"""Expiry rule shared by the load details card and the equipment rows.

A month/year expiry is valid through the whole of that month, so it has
lapsed only when it lies in a month before the inspection month.
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping

from .catalogue import EquipmentItem
from .models import ChecklistForm, MonthYear


class CheckStatus(str, Enum):
    OK = "ok"
    BAD = "bad"
    NA = "na"


def is_expired(expiry: MonthYear, inspection_year: int, inspection_month: int) -> bool:
    parsed = expiry.as_tuple()
    if parsed is None:
        return False
    year, month = parsed
    return year < inspection_year or (year == inspection_year and month < inspection_month)


def is_expired_on(expiry: MonthYear, form: ChecklistForm) -> bool:
    """Apply :func:`is_expired` against the form's inspection date; unknown dates never expire."""
    period = form.inspection_period()
    if period is None:
        return False
    return is_expired(expiry, *period)


def equipment_status(item: EquipmentItem, form: ChecklistForm) -> CheckStatus:
    checked = form.is_checked(item.name)
    if not item.has_date:
        return CheckStatus.OK if checked else CheckStatus.BAD

    expiry = form.expiry_for(item.name)
    if not expiry.is_complete():
        return CheckStatus.NA
    if is_expired_on(expiry, form):
        return CheckStatus.BAD
    return CheckStatus.OK if checked else CheckStatus.BAD


def line_status(label: str, checks: Mapping[str, bool]) -> CheckStatus:
    return CheckStatus.OK if checks.get(label) else CheckStatus.BAD
