"""
Data models for extracted word boxes.

A Token pairs a label with its page-space bounding box.  Leaf tokens
come from a single text run (words, delimiters, whitespace); group
tokens are synthesized when a nested group or tagged region closes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class GlyphRangeError(ValueError):
    """Glyph byte ranges that do not map cleanly onto the run text."""


class TokenKind(Enum):
    """What a token was built from."""

    WORD = "word"
    DELIMITER = "delimiter"
    WHITESPACE = "whitespace"
    GROUP = "group"


@dataclass(frozen=True)
class BBox:
    """Axis-aligned box in points: top-left corner plus size."""

    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def union(self, other: "BBox") -> "BBox":
        """Smallest box containing both *self* and *other*."""
        left = min(self.left, other.left)
        top = min(self.top, other.top)
        right = max(self.right, other.right)
        bottom = max(self.bottom, other.bottom)
        return BBox(left, top, right - left, bottom - top)

    def contains(self, other: "BBox") -> bool:
        return (
            self.left <= other.left
            and self.top <= other.top
            and self.right >= other.right
            and self.bottom >= other.bottom
        )

    def scaled(self, factor: float) -> "BBox":
        return BBox(
            self.x * factor,
            self.y * factor,
            self.width * factor,
            self.height * factor,
        )

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class Token:
    """
    An extracted ``(label, bbox)`` pair.

    ``scope`` names the accumulator a group token came from (``"group"``
    for nested frames, the tag name for tagged regions).
    """

    label: str
    bbox: BBox
    kind: TokenKind = TokenKind.WORD
    scope: Optional[str] = None

    @property
    def is_group(self) -> bool:
        return self.kind is TokenKind.GROUP

    def as_pair(self) -> Tuple[str, Tuple[float, float, float, float]]:
        return (self.label, self.bbox.as_tuple())

    def __repr__(self) -> str:
        x, y, w, h = self.bbox.as_tuple()
        tag = f" <{self.scope}>" if self.scope else ""
        return (
            f"Token({self.kind.name}{tag}, {self.label!r}, "
            f"[{x:.1f},{y:.1f} {w:.1f}x{h:.1f}])"
        )


@dataclass
class GroupAccumulator:
    """Children collected for one open group or tagged region."""

    kind: str
    children: List[Token] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.children

    @property
    def text(self) -> str:
        return "".join(child.label for child in self.children)

    def bbox(self) -> Optional[BBox]:
        """Union of all child boxes, or ``None`` when there are no children."""
        if not self.children:
            return None
        box = self.children[0].bbox
        for child in self.children[1:]:
            box = box.union(child.bbox)
        return box
