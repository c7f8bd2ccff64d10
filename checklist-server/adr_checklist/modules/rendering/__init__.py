"""PDF rendering of checklist forms."""

from .images import AssetLoader, decode_data_url
from .renderer import ChecklistRenderer, RenderedDocument, document_file_name
from .text import FittedParagraph, fit_paragraph, truncate_to_width

__all__ = [
    "AssetLoader",
    "decode_data_url",
    "ChecklistRenderer",
    "RenderedDocument",
    "document_file_name",
    "FittedParagraph",
    "fit_paragraph",
    "truncate_to_width",
]
