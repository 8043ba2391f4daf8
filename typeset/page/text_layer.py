"""
Frame tree extraction for PDF pages.

Turns the character-level ``rawdict`` output of PyMuPDF into the frame
model used by the word box extractor.  The PDF is treated as the output
of a typesetting engine: positions and advances are taken as-is.
"""

import logging
from typing import List, Optional, Tuple

import fitz

from .models import Frame, GroupRef, Glyph, ImageItem, Point, TagEnd, TagStart, TextRun

logger = logging.getLogger(__name__)

BLOCK_TAG = "block"

# How text is grouped into aggregate tokens
GROUP_BY_BLOCK = "block"
GROUP_BY_LINE = "line"
GROUP_BY_NONE = "none"
GROUPINGS = (GROUP_BY_BLOCK, GROUP_BY_LINE, GROUP_BY_NONE)

# Fallback metrics (fractions of the font size) when PyMuPDF omits them
_DEFAULT_ASCENDER = 0.8
_DEFAULT_DESCENDER = -0.2


class PageTextLayer:
    """
    Builds the root frame of a single PDF page.

    Spans become text runs placed at their baseline origin.  *grouping*
    decides which aggregate tokens the page yields:

    - ``"block"``: each text block is a tagged ``block`` region;
    - ``"line"``: each horizontal line is a nested group placed at the
      line's top-left corner;
    - ``"none"``: runs sit directly in the page frame.

    Image blocks are kept as opaque image items.
    """

    def __init__(self, page: fitz.Page, grouping: str = GROUP_BY_BLOCK):
        if grouping not in GROUPINGS:
            raise ValueError(
                f"Unknown grouping '{grouping}' (expected one of {', '.join(GROUPINGS)})"
            )
        self.page = page
        self.grouping = grouping
        self.frame = Frame(size=(page.rect.width, page.rect.height))
        self.run_count = 0
        self.skipped_lines = 0

        self._extract_frame()

    def _extract_frame(self):
        """Walk blocks, lines and spans and push the matching items."""
        flags = (
            fitz.TEXT_PRESERVE_WHITESPACE
            | fitz.TEXT_PRESERVE_LIGATURES
            | fitz.TEXT_PRESERVE_IMAGES
        )
        text_dict = self.page.get_text("rawdict", flags=flags)
        tag_blocks = self.grouping == GROUP_BY_BLOCK

        for block_data in text_dict.get("blocks", []):
            x0, y0, x1, y1 = block_data.get("bbox", (0, 0, 0, 0))

            if block_data.get("type") != 0:
                self.frame.push(
                    Point(x0, y0),
                    ImageItem(size=(x1 - x0, y1 - y0), bbox=(x0, y0, x1, y1)),
                )
                continue

            if tag_blocks:
                self.frame.push(Point(), TagStart(BLOCK_TAG))
            for line_data in block_data.get("lines", []):
                self._push_line(line_data)
            if tag_blocks:
                self.frame.push(Point(), TagEnd())

    def _push_line(self, line_data: dict):
        direction = tuple(line_data.get("dir", (1, 0)))
        if direction != (1, 0):
            # Advances are horizontal only; rotated text has no sensible box
            self.skipped_lines += 1
            logger.debug("Skipping non-horizontal line (dir=%s)", direction)
            return

        group_line = self.grouping == GROUP_BY_LINE
        x0, y0, x1, y1 = line_data.get("bbox", (0, 0, 0, 0))
        line_origin = Point(x0, y0) if group_line else Point()
        line_frame = Frame(size=(x1 - x0, y1 - y0))

        for span_data in line_data.get("spans", []):
            placed = span_to_run(span_data)
            if placed is None:
                continue
            origin, run = placed
            line_frame.push(origin - line_origin, run)
            self.run_count += 1

        if not line_frame.items:
            return

        if group_line:
            self.frame.push(line_origin, GroupRef(line_frame))
        else:
            self.frame.items.extend(line_frame.items)

    def __len__(self) -> int:
        return self.run_count


def span_to_run(span_data: dict) -> Optional[Tuple[Point, TextRun]]:
    """
    Convert one ``rawdict`` span into a text run and its baseline origin.

    Returns ``None`` for spans without characters.
    """
    chars = span_data.get("chars", [])
    if not chars:
        return None

    size = span_data.get("size", 12.0)
    ascender = span_data.get("ascender", _DEFAULT_ASCENDER) * size
    descender = span_data.get("descender", _DEFAULT_DESCENDER) * size

    text = "".join(c.get("c", "") for c in chars)
    origins = [tuple(c.get("origin", (0, 0))) for c in chars]

    glyphs: List[Glyph] = []
    cursor = 0
    for i, char_data in enumerate(chars):
        length = len(char_data.get("c", "").encode("utf-8"))
        bbox = char_data.get("bbox", (0, 0, 0, 0))
        origin_x = origins[i][0]
        if i + 1 < len(chars):
            advance = origins[i + 1][0] - origin_x
        else:
            advance = bbox[2] - origin_x
        glyphs.append(
            Glyph(
                start=cursor,
                end=cursor + length,
                x_advance=max(0.0, advance),
                x_offset=bbox[0] - origin_x,
            )
        )
        cursor += length

    run = TextRun(
        text=text,
        glyphs=glyphs,
        ascender=ascender,
        descender=descender,
        size=size,
        font=span_data.get("font", ""),
    )
    return Point(*origins[0]), run
