"""
Laid-out document model for word box extraction.
Frame trees from PDF pages and page images; no tokenization here.
"""

from .document import PDFDocumentReader
from .page import (
    Document,
    Frame,
    Glyph,
    GroupRef,
    ImageItem,
    Page,
    PageTextLayer,
    Point,
    ShapeItem,
    TagEnd,
    TagStart,
    TextRun,
)

__all__ = [
    "PDFDocumentReader",
    "PageTextLayer",
    "Document",
    "Page",
    "Frame",
    "Point",
    "Glyph",
    "TextRun",
    "GroupRef",
    "TagStart",
    "TagEnd",
    "ShapeItem",
    "ImageItem",
]
