"""Single page A4 rendering of an ADR checklist.

Layout is expressed in millimetres measured from the top-left corner of the
page; ``_Sheet`` converts to reportlab's bottom-left point coordinates.
"""

from __future__ import annotations

import io
import logging
import math
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from PIL import Image
from reportlab.lib.colors import Color, HexColor, white
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from adr_checklist.modules.checklist.catalogue import (
    EquipmentItem,
    after_loading_items,
    before_loading_items,
    equipment_items,
)
from adr_checklist.modules.checklist.expiry import (
    CheckStatus,
    equipment_status,
    is_expired_on,
    line_status,
)
from adr_checklist.modules.checklist.inspectors import DEFAULT_INSPECTOR_COLOR, InspectorDirectory
from adr_checklist.modules.checklist.models import ChecklistForm, MonthYear

from .images import AssetLoader, decode_data_url
from .text import fit_paragraph, truncate_to_width

logger = logging.getLogger(__name__)

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

INK = HexColor("#0F172A")
LABEL = HexColor("#334155")
MUTED = HexColor("#475569")
FAINT = HexColor("#64748B")
SIGNATURE_FRAME = HexColor("#94A3B8")
ICON_FRAME = HexColor("#CBD5E1")
BORDER = HexColor("#E2E8F0")
PANEL = HexColor("#F8FAFC")
NEUTRAL = HexColor("#9CA3AF")
VALID = HexColor("#16A34A")
EXPIRED = HexColor("#DC2626")

MARGIN = 10.0
SIGNATURE_BOX_H = 28.0
REMARKS_BOX_H = 20.0
REMARKS_GAP = 2.0

EQUIPMENT_COL_GAP = 6.0
EQUIPMENT_ROW_H = 9.2
EQUIPMENT_ROW_GAP = 1.8
ICON_SIZE = 7.2
STATUS_SIZE = 5.2
CHECK_ROW_H = 5.1

SIGNATURE_W = 72.0
SIGNATURE_H = 14.0
WATERMARK_SIZE = 120.0


@dataclass(slots=True)
class RenderedDocument:
    content: bytes
    file_name: str
    media_type: str = "application/pdf"

    @property
    def size_bytes(self) -> int:
        return len(self.content)


def document_file_name(form: ChecklistForm) -> str:
    return f"ADR-Checklist_{form.driver_slug()}_{form.dotted_date()}.pdf"


def _safe(value: Optional[str]) -> str:
    text = (value or "").strip()
    return text or "-"


def _expiry_color(expired: bool) -> Color:
    return EXPIRED if expired else VALID


def _parse_color(value: Optional[str]) -> Color:
    try:
        return HexColor(value or DEFAULT_INSPECTOR_COLOR)
    except (TypeError, ValueError):
        return HexColor(DEFAULT_INSPECTOR_COLOR)


def _halves(items: Sequence) -> tuple[Sequence, Sequence]:
    split = math.ceil(len(items) / 2)
    return items[:split], items[split:]


class _Sheet:
    """Millimetre, top-down drawing helpers over a reportlab canvas."""

    def __init__(self, pdf: canvas.Canvas) -> None:
        self.pdf = pdf
        self.width = A4[0] / mm
        self.height = A4[1] / mm

    def _y(self, top: float) -> float:
        return (self.height - top) * mm

    def box(
        self,
        x: float,
        top: float,
        w: float,
        h: float,
        radius: float,
        *,
        stroke: Optional[Color] = BORDER,
        fill: Optional[Color] = white,
        line_width: float = 0.35,
    ) -> None:
        self.pdf.setLineWidth(line_width * mm)
        if stroke is not None:
            self.pdf.setStrokeColor(stroke)
        if fill is not None:
            self.pdf.setFillColor(fill)
        self.pdf.roundRect(
            x * mm,
            self._y(top + h),
            w * mm,
            h * mm,
            radius * mm,
            stroke=1 if stroke is not None else 0,
            fill=1 if fill is not None else 0,
        )

    def line(self, x1: float, y1: float, x2: float, y2: float, *, color: Color, width: float) -> None:
        self.pdf.setStrokeColor(color)
        self.pdf.setLineWidth(width * mm)
        self.pdf.line(x1 * mm, self._y(y1), x2 * mm, self._y(y2))

    def text(
        self,
        x: float,
        baseline: float,
        value: str,
        *,
        size: float,
        bold: bool = False,
        color: Color = INK,
        align: str = "left",
    ) -> None:
        self.pdf.setFont(FONT_BOLD if bold else FONT, size)
        self.pdf.setFillColor(color)
        if align == "center":
            self.pdf.drawCentredString(x * mm, self._y(baseline), value)
        elif align == "right":
            self.pdf.drawRightString(x * mm, self._y(baseline), value)
        else:
            self.pdf.drawString(x * mm, self._y(baseline), value)

    def image(self, image: Optional[Image.Image], x: float, top: float, w: float, h: float) -> bool:
        if image is None:
            return False
        try:
            self.pdf.drawImage(
                ImageReader(image),
                x * mm,
                self._y(top + h),
                width=w * mm,
                height=h * mm,
                mask="auto",
                preserveAspectRatio=True,
                anchor="c",
            )
        except Exception as exc:  # reportlab raises assorted errors for odd image data
            logger.debug("Skipping image that failed to draw: %s", exc)
            return False
        return True


class ChecklistRenderer:
    """Lays out a :class:`ChecklistForm` on one A4 page."""

    def __init__(
        self,
        assets: AssetLoader,
        inspectors: InspectorDirectory,
        *,
        watermark_file: str = "watermark.png",
        watermark_opacity: float = 0.12,
    ) -> None:
        self._assets = assets
        self._inspectors = inspectors
        self._watermark_file = watermark_file
        self._watermark_opacity = watermark_opacity

    def render(self, form: ChecklistForm) -> RenderedDocument:
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4, invariant=1)
        pdf.setTitle("ADR Checklist")
        pdf.setSubject(form.variant.subtitle)
        sheet = _Sheet(pdf)

        content_w = sheet.width - MARGIN * 2
        signature_top = sheet.height - MARGIN - SIGNATURE_BOX_H
        remarks_top = signature_top - REMARKS_GAP - REMARKS_BOX_H
        bottom_limit = remarks_top

        y = self._draw_header(sheet, form, MARGIN, content_w)
        y = self._draw_details(sheet, form, y, content_w)
        y = self._draw_equipment(sheet, form, y, content_w, bottom_limit)
        if y < bottom_limit - 20:
            y = self._draw_check_section(
                sheet, "Before Loading", before_loading_items(form.variant), form.before_loading_checks, y, content_w, bottom_limit
            )
        if y < bottom_limit - 20:
            y = self._draw_check_section(
                sheet, "After Loading", after_loading_items(form.variant), form.after_loading_checks, y, content_w, bottom_limit
            )
        self._draw_remarks(sheet, form, remarks_top, content_w)
        self._draw_signatures(sheet, form, signature_top, content_w)
        self._draw_watermark(sheet)

        pdf.showPage()
        pdf.save()
        return RenderedDocument(content=buffer.getvalue(), file_name=document_file_name(form))

    def _draw_header(self, sheet: _Sheet, form: ChecklistForm, y: float, content_w: float) -> float:
        sheet.box(MARGIN, y, content_w, 18, 3)
        sheet.text(sheet.width / 2, y + 7, "ADR Checklist", size=16, bold=True, align="center")
        sheet.text(sheet.width / 2, y + 14, form.variant.subtitle, size=9, bold=True, color=LABEL, align="center")
        sheet.text(
            sheet.width - MARGIN - 3,
            y + 7,
            f"Inspection: {_safe(form.inspection_date)}",
            size=9,
            color=MUTED,
            align="right",
        )
        return y + 22

    def _draw_details(self, sheet: _Sheet, form: ChecklistForm, y: float, content_w: float) -> float:
        sheet.box(MARGIN, y, content_w, 26, 3)
        sheet.text(MARGIN + 3, y + 6, "Load details", size=10, bold=True)

        left_x = MARGIN + 3
        right_x = MARGIN + content_w / 2 + 2
        column_w = content_w / 2 - 5

        for offset, (label, value) in zip(
            (12, 17, 22),
            (("Driver:", form.driver_name), ("Truck:", form.truck_plate), ("Trailer:", form.trailer_plate)),
        ):
            self._key_value(sheet, label, _safe(value), left_x, y + offset, column_w)

        expiries: list[tuple[str, MonthYear]] = [("Driving licence:", form.driving_licence_expiry)]
        if form.includes_adr_certificate:
            expiries.append(("ADR certificate:", form.adr_certificate_expiry))
        expiries.append(("Truck doc:", form.truck_document_expiry))
        expiries.append(("Trailer doc:", form.trailer_document_expiry))

        start, step = (11.0, 4.5) if len(expiries) == 4 else (12.0, 5.0)
        for index, (label, expiry) in enumerate(expiries):
            if expiry.is_filled():
                expired = is_expired_on(expiry, form)
                value = expiry.display() + (" (EXPIRED)" if expired else "")
                color = _expiry_color(expired)
            else:
                value, color = "-", INK
            self._key_value(sheet, label, value, right_x, y + start + index * step, column_w, color)

        return y + 32

    @staticmethod
    def _key_value(
        sheet: _Sheet,
        label: str,
        value: str,
        x: float,
        baseline: float,
        width: float,
        color: Color = INK,
    ) -> None:
        size = 8.7
        sheet.text(x, baseline, label, size=size, bold=True, color=LABEL)
        label_w = stringWidth(label, FONT_BOLD, size) / mm + 1
        fitted = truncate_to_width(value, FONT, size, (width - label_w) * mm)
        sheet.text(x + label_w, baseline, fitted, size=size, color=color)

    @staticmethod
    def _section_header(sheet: _Sheet, title: str, y: float, content_w: float) -> float:
        sheet.box(MARGIN, y, content_w, 7, 2, fill=PANEL)
        sheet.text(MARGIN + 3, y + 5, title, size=10, bold=True)
        return y + 9

    def _draw_equipment(
        self, sheet: _Sheet, form: ChecklistForm, y: float, content_w: float, bottom_limit: float
    ) -> float:
        y = self._section_header(sheet, "Equipment", y, content_w)
        col_w = (content_w - EQUIPMENT_COL_GAP) / 2
        left, right = _halves(equipment_items(form.variant))
        rows = max(len(left), len(right))

        for index in range(rows):
            row_top = y + index * (EQUIPMENT_ROW_H + EQUIPMENT_ROW_GAP)
            if row_top + EQUIPMENT_ROW_H + 4 > bottom_limit:
                break
            if index < len(left):
                self._equipment_row(sheet, form, left[index], MARGIN, row_top, col_w)
            if index < len(right):
                self._equipment_row(sheet, form, right[index], MARGIN + col_w + EQUIPMENT_COL_GAP, row_top, col_w)

        return y + rows * (EQUIPMENT_ROW_H + EQUIPMENT_ROW_GAP) + 2

    def _equipment_row(
        self, sheet: _Sheet, form: ChecklistForm, item: EquipmentItem, x: float, top: float, col_w: float
    ) -> None:
        sheet.box(x, top, col_w, EQUIPMENT_ROW_H, 2)

        icon_x = x + 2
        icon_top = top + (EQUIPMENT_ROW_H - ICON_SIZE) / 2
        sheet.box(icon_x, icon_top, ICON_SIZE, ICON_SIZE, 1.6, stroke=ICON_FRAME, fill=PANEL)
        sheet.image(self._assets.get(item.icon), icon_x + 0.6, icon_top + 0.6, ICON_SIZE - 1.2, ICON_SIZE - 1.2)

        text_x = icon_x + ICON_SIZE + 2.2
        max_w = col_w - (text_x - x) - STATUS_SIZE - 3
        sheet.text(text_x, top + 4.0, truncate_to_width(item.label, FONT_BOLD, 8.2, max_w * mm), size=8.2, bold=True)

        if item.has_date:
            expiry = form.expiry_for(item.name)
            if expiry.is_filled():
                expired = is_expired_on(expiry, form)
                label = expiry.display() + (" EXP" if expired else "")
                sheet.text(text_x, top + 7.3, label, size=7.2, bold=True, color=_expiry_color(expired))
            else:
                sheet.text(text_x, top + 7.2, "Expiry: -", size=7.0, color=FAINT)

        self._status_glyph(
            sheet,
            equipment_status(item, form),
            x + col_w - STATUS_SIZE - 2.2,
            top + (EQUIPMENT_ROW_H - STATUS_SIZE) / 2,
        )

    def _draw_check_section(
        self,
        sheet: _Sheet,
        title: str,
        items: Sequence[str],
        checks: Mapping[str, bool],
        y: float,
        content_w: float,
        bottom_limit: float,
    ) -> float:
        top = self._section_header(sheet, title, y, content_w)
        col_w = (content_w - EQUIPMENT_COL_GAP) / 2
        left, right = _halves(items)
        rows = max(len(left), len(right))

        for index in range(rows):
            baseline = top + 4 + index * CHECK_ROW_H
            if baseline + CHECK_ROW_H + 3 > bottom_limit:
                break
            for column, x in ((left, MARGIN), (right, MARGIN + col_w + EQUIPMENT_COL_GAP)):
                if index >= len(column):
                    continue
                label = column[index]
                self._status_glyph(sheet, line_status(label, checks), x + 2, baseline - 4.0)
                fitted = truncate_to_width(label, FONT, 8.0, (col_w - 10) * mm)
                sheet.text(x + 9, baseline, fitted, size=8.0)

        return top + rows * CHECK_ROW_H + 2

    @staticmethod
    def _status_glyph(sheet: _Sheet, status: CheckStatus, x: float, top: float) -> None:
        size = STATUS_SIZE
        if status is CheckStatus.OK:
            sheet.box(x, top, size, size, 1.1, stroke=None, fill=VALID)
            sheet.line(x + 1.1, top + 2.9, x + 2.1, top + 3.9, color=white, width=0.9)
            sheet.line(x + 2.1, top + 3.9, x + 4.3, top + 1.3, color=white, width=0.9)
        elif status is CheckStatus.BAD:
            sheet.box(x, top, size, size, 1.1, stroke=None, fill=EXPIRED)
            sheet.line(x + 1.2, top + 1.2, x + 4.0, top + 4.0, color=white, width=0.9)
            sheet.line(x + 4.0, top + 1.2, x + 1.2, top + 4.0, color=white, width=0.9)
        else:
            sheet.box(x, top, size, size, 1.1, stroke=NEUTRAL, fill=None)

    def _draw_remarks(self, sheet: _Sheet, form: ChecklistForm, top: float, content_w: float) -> None:
        sheet.box(MARGIN, top, content_w, REMARKS_BOX_H, 3)
        sheet.text(MARGIN + 3, top + 6, "Remarks", size=9.2, bold=True)

        paragraph = fit_paragraph(form.remarks, FONT, (content_w - 6) * mm, (REMARKS_BOX_H - 12) * mm)
        baseline = top + 10
        for line in paragraph.lines:
            sheet.text(MARGIN + 3, baseline, line, size=paragraph.font_size)
            baseline += paragraph.line_height / mm

    def _draw_signatures(self, sheet: _Sheet, form: ChecklistForm, top: float, content_w: float) -> None:
        sheet.box(MARGIN, top, content_w, SIGNATURE_BOX_H, 3)
        sheet.text(MARGIN + 3, top + 6, "Signatures", size=10, bold=True)

        driver_x = MARGIN + 3
        inspector_x = MARGIN + content_w - 3 - SIGNATURE_W
        for x, data_url in ((driver_x, form.driver_signature), (inspector_x, form.inspector_signature)):
            sheet.box(x, top + 10, SIGNATURE_W, SIGNATURE_H, 2, stroke=SIGNATURE_FRAME, fill=None)
            drawn = sheet.image(decode_data_url(data_url), x + 1, top + 10.8, SIGNATURE_W - 2, SIGNATURE_H - 1.6)
            if not drawn:
                sheet.line(x + 4, top + 21, x + SIGNATURE_W - 4, top + 21, color=ICON_FRAME, width=0.3)

        sheet.text(driver_x, top + 26, "Driver", size=8.6, bold=True, color=LABEL)
        sheet.text(inspector_x, top + 26, "Inspector", size=8.6, bold=True, color=LABEL)

        name_x = inspector_x + stringWidth("Inspector", FONT_BOLD, 8.6) / mm + 2
        name = truncate_to_width(
            _safe(form.inspector_name), FONT_BOLD, 8.6, (inspector_x + SIGNATURE_W - name_x) * mm
        )
        color = _parse_color(self._inspectors.color_for(form.inspector_name))
        sheet.text(name_x, top + 26, name, size=8.6, bold=True, color=color)

    def _draw_watermark(self, sheet: _Sheet) -> None:
        watermark = self._assets.get(self._watermark_file)
        if watermark is None:
            return
        sheet.pdf.saveState()
        sheet.pdf.setFillAlpha(self._watermark_opacity)
        sheet.pdf.setStrokeAlpha(self._watermark_opacity)
        sheet.image(
            watermark,
            (sheet.width - WATERMARK_SIZE) / 2,
            (sheet.height - WATERMARK_SIZE) / 2,
            WATERMARK_SIZE,
            WATERMARK_SIZE,
        )
        sheet.pdf.restoreState()
