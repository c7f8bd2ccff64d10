"""Text measuring helpers on top of reportlab's font metrics.

All widths and heights are in points.
"""

from __future__ import annotations

from dataclasses import dataclass

from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth

ELLIPSIS = "..."


@dataclass(slots=True)
class FittedParagraph:
    font_size: float
    lines: list[str]
    line_height: float
    compressed: bool = False

    @property
    def height(self) -> float:
        return len(self.lines) * self.line_height


def truncate_to_width(text: str, font_name: str, font_size: float, max_width: float) -> str:
    """Shorten ``text`` with a trailing ellipsis until it fits ``max_width``."""
    if stringWidth(text, font_name, font_size) <= max_width:
        return text

    trimmed = text
    while trimmed:
        trimmed = trimmed[:-1]
        candidate = trimmed.rstrip() + ELLIPSIS
        if stringWidth(candidate, font_name, font_size) <= max_width:
            return candidate
    return ELLIPSIS if stringWidth(ELLIPSIS, font_name, font_size) <= max_width else ""


def wrap_text(text: str, font_name: str, font_size: float, max_width: float) -> list[str]:
    lines: list[str] = []
    for paragraph in text.splitlines() or [""]:
        lines.extend(simpleSplit(paragraph, font_name, font_size, max_width) or [""])
    return lines


def fit_paragraph(
    text: str,
    font_name: str,
    width: float,
    height: float,
    *,
    max_font: float = 8.2,
    min_font: float = 1.5,
    step: float = 0.25,
    line_height_factor: float = 1.05,
) -> FittedParagraph:
    """Pick the largest font size whose wrapped lines fit the box.

    Content is never dropped: when even ``min_font`` overflows, the line
    spacing is squeezed so every line still lands inside ``height``.
    """
    clean = (text or "").strip() or "-"

    size = max_font
    while size >= min_font:
        lines = wrap_text(clean, font_name, size, width)
        line_height = size * line_height_factor
        if len(lines) * line_height <= height:
            return FittedParagraph(size, lines, line_height)
        size = round(size - step, 2)

    lines = wrap_text(clean, font_name, min_font, width)
    line_height = min(min_font * line_height_factor, height / len(lines))
    return FittedParagraph(min_font, lines, line_height, compressed=True)


__all__ = ["ELLIPSIS", "FittedParagraph", "truncate_to_width", "wrap_text", "fit_paragraph"]
