"""Tests for request payload conversion."""

from __future__ import annotations

from adr_checklist.modules.checklist.models import ChecklistVariant, MonthYear
from adr_checklist.schemas import ChecklistFormPayload, MonthYearPayload


class TestChecklistFormPayload:
    def test_camel_and_snake_case_are_both_accepted(self):
        camel = ChecklistFormPayload.model_validate({"driverName": " Jan ", "truckPlate": "AB-1"})
        snake = ChecklistFormPayload.model_validate({"driver_name": "Jan", "truck_plate": "AB-1"})
        assert camel.to_domain() == snake.to_domain()
        assert camel.to_domain().driver_name == "Jan"

    def test_month_year_keeps_digits_only(self):
        payload = MonthYearPayload.model_validate({"month": "0a3", "year": 2026})
        assert payload.to_domain() == MonthYear("03", "2026")
        assert MonthYearPayload.model_validate({"month": None}).to_domain() == MonthYear("", "")

    def test_defaults_and_empty_signatures(self):
        form = ChecklistFormPayload.model_validate({"variant": "under1000", "driverSignature": ""}).to_domain()
        assert form.variant is ChecklistVariant.UNDER_1000
        assert form.driver_signature is None
        assert form.photos == []
        assert form.checklist_type == "reduced"
