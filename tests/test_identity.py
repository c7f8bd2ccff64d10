"""Tests for checklist fingerprints."""

from __future__ import annotations

import re
from datetime import date

from adr_checklist.modules.checklist.identity import (
    CIRCULAR_MARKER,
    build_identity,
    canonical_json,
    fingerprint,
    fingerprint_form,
)
from adr_checklist.modules.checklist.models import MonthYear, PhotoDescriptor

from conftest import build_form


class TestCanonicalJson:
    def test_keys_are_sorted_at_every_depth(self):
        assert canonical_json({"b": 1, "a": {"d": 2, "c": 3}}) == '{"a":{"c":3,"d":2},"b":1}'

    def test_list_order_is_kept(self):
        assert canonical_json([3, 1, 2]) == "[3,1,2]"

    def test_non_ascii_text_is_kept_verbatim(self):
        assert canonical_json({"driver": "Jörg Müller"}) == '{"driver":"Jörg Müller"}'

    def test_dates_become_iso_strings(self):
        assert canonical_json({"day": date(2026, 3, 14)}) == '{"day":"2026-03-14"}'

    def test_circular_reference_is_replaced_by_marker(self):
        node: dict = {"name": "loop"}
        node["self"] = node
        assert canonical_json(node) == '{"name":"loop","self":"%s"}' % CIRCULAR_MARKER

    def test_shared_subtree_is_not_treated_as_circular(self):
        shared = {"x": 1}
        assert canonical_json({"a": shared, "b": shared}) == '{"a":{"x":1},"b":{"x":1}}'


class TestFingerprint:
    def test_is_lowercase_sha256_hex(self):
        digest = fingerprint({"a": 1})
        assert re.fullmatch(r"[0-9a-f]{64}", digest)

    def test_map_fill_order_does_not_matter(self):
        first = {"b": True, "a": False}
        second = {"a": False, "b": True}
        assert fingerprint(first) == fingerprint(second)

    def test_list_order_matters(self):
        assert fingerprint({"photos": ["a", "b"]}) != fingerprint({"photos": ["b", "a"]})

    def test_equal_forms_share_a_fingerprint(self):
        assert fingerprint_form(build_form()) == fingerprint_form(build_form())

    def test_equipment_map_order_does_not_matter(self):
        form = build_form()
        reordered = build_form(equipment_checks=dict(reversed(list(form.equipment_checks.items()))))
        assert fingerprint_form(form) == fingerprint_form(reordered)

    def test_signature_changes_the_fingerprint(self):
        assert fingerprint_form(build_form()) != fingerprint_form(build_form(driver_signature="data:image/png;base64,AA=="))

    def test_photo_descriptors_change_the_fingerprint(self):
        extra = build_form().photos + [PhotoDescriptor(url="https://photos.test/rear.jpg", name="rear.jpg")]
        assert fingerprint_form(build_form()) != fingerprint_form(build_form(photos=extra))

    def test_expiry_change_changes_the_fingerprint(self):
        later = build_form(truck_document_expiry=MonthYear("04", "2026"))
        assert fingerprint_form(build_form()) != fingerprint_form(later)


class TestBuildIdentity:
    def test_projects_every_form_field(self):
        identity = build_identity(build_form())
        assert identity["variant"] == "full"
        assert identity["driving_licence_expiry"] == {"month": "08", "year": "2027"}
        assert identity["photos"][0] == {
            "url": "https://photos.test/front.jpg",
            "name": "front view.jpg",
            "content_type": "image/jpeg",
        }
        assert "driver_signature" in identity and "inspector_signature" in identity
