"""
Frame tree models and PDF page frame extraction.
"""

from .models import (
    Document,
    Frame,
    FrameItem,
    Glyph,
    GroupRef,
    ImageItem,
    Page,
    Point,
    ShapeItem,
    TagEnd,
    TagStart,
    TextRun,
)
from .text_layer import PageTextLayer

__all__ = [
    "PageTextLayer",
    "Document",
    "Page",
    "Frame",
    "FrameItem",
    "Point",
    "Glyph",
    "TextRun",
    "GroupRef",
    "TagStart",
    "TagEnd",
    "ShapeItem",
    "ImageItem",
]
