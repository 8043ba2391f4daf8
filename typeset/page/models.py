"""
Frame tree data models for laid-out documents.

A document is a list of pages, each holding one root frame.  Frames are
ordered lists of ``(offset, item)`` pairs in visual stacking order; items
are text runs, nested groups, tag markers, or opaque shapes and images.
All lengths are in points, with y growing downward.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union


@dataclass(frozen=True)
class Point:
    """A position in points."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Glyph:
    """
    One shaped glyph of a text run.

    ``start``/``end`` are UTF-8 byte offsets into the run text.  The
    advance and offset are already scaled to the run's font size.
    """

    start: int
    end: int
    x_advance: float
    x_offset: float = 0.0


@dataclass
class TextRun:
    """A run of shaped text with uniform font metrics."""

    text: str
    glyphs: List[Glyph] = field(default_factory=list)
    ascender: float = 0.0
    descender: float = 0.0
    size: float = 12.0
    font: str = ""

    @property
    def height(self) -> float:
        return self.ascender - self.descender


@dataclass
class GroupRef:
    """A nested frame, placed by the offset of the item that holds it."""

    frame: "Frame"


@dataclass(frozen=True)
class TagStart:
    """Opens a named semantic region."""

    name: str


@dataclass(frozen=True)
class TagEnd:
    """Closes the innermost open region."""


@dataclass
class ShapeItem:
    """Vector geometry.  Carried through, never tokenized."""

    kind: str = "path"
    size: Tuple[float, float] = (0.0, 0.0)


@dataclass
class ImageItem:
    """Raster image.  Carried through, never tokenized."""

    size: Tuple[float, float] = (0.0, 0.0)
    bbox: Optional[Tuple[float, float, float, float]] = None


FrameItem = Union[TextRun, GroupRef, TagStart, TagEnd, ShapeItem, ImageItem]


@dataclass
class Frame:
    """Positioned items for one region of a page."""

    size: Tuple[float, float] = (0.0, 0.0)  # width, height
    items: List[Tuple[Point, FrameItem]] = field(default_factory=list)

    @property
    def width(self) -> float:
        return self.size[0]

    @property
    def height(self) -> float:
        return self.size[1]

    def push(self, offset: Point, item: FrameItem) -> None:
        """Append *item* at *offset*, on top of everything added so far."""
        self.items.append((offset, item))

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class Page:
    frame: Frame
    number: int = 1

    @property
    def width(self) -> float:
        return self.frame.width

    @property
    def height(self) -> float:
        return self.frame.height


@dataclass
class Document:
    """An ordered list of laid-out pages."""

    pages: List[Page] = field(default_factory=list)

    def page_offsets(self, gap: float = 1.0) -> List[float]:
        """
        Vertical offset of each page when the pages are stacked top to
        bottom with *gap* points between them.
        """
        offsets = []
        y = 0.0
        for page in self.pages:
            offsets.append(y)
            y += page.height + gap
        return offsets

    def merged_size(self, gap: float = 1.0) -> Tuple[float, float]:
        """Width and height of all pages stacked with *gap* between them."""
        if not self.pages:
            return 0.0, 0.0
        width = max(page.width for page in self.pages)
        height = sum(page.height for page in self.pages)
        height += gap * (len(self.pages) - 1)
        return width, height

    def __len__(self) -> int:
        return len(self.pages)
