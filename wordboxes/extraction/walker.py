"""
Depth-first traversal of frame trees into word box tokens.

Pages are stacked top to bottom with a fixed gap, the same merged
coordinate space the rasterizer draws into, so every box lands on the
merged page image after scaling by the render resolution.
"""

import logging
from typing import Iterator, List, Tuple

from typeset.page.models import (
    Document,
    Frame,
    FrameItem,
    GroupRef,
    Point,
    TagEnd,
    TagStart,
    TextRun,
)

from .aggregator import BBoxAggregator
from .models import Token
from .tokenizer import TextTokenizer

logger = logging.getLogger(__name__)

GROUP_SCOPE = "group"

# Gap between stacked pages, in points
DEFAULT_PAGE_GAP = 1.0


class FrameWalker:
    """
    Walks frames in document order and collects tokens.

    Traversal uses an explicit work list rather than recursion, so deeply
    nested groups cannot exhaust the interpreter stack.  The scope stack
    persists across pages: a tagged region may start on one page and end
    on the next.
    """

    def __init__(self, tokenizer: TextTokenizer):
        self.tokenizer = tokenizer
        self.aggregator = BBoxAggregator()
        self.tokens: List[Token] = []

    def walk(self, frame: Frame, base: Point = Point()) -> None:
        """Collect tokens from *frame*, placed with its origin at *base*."""
        # Each entry: (remaining items, origin, closes a group scope on exhaustion)
        work: List[Tuple[Iterator[Tuple[Point, FrameItem]], Point, bool]] = [
            (iter(frame.items), base, False)
        ]

        while work:
            items, origin, closes_scope = work[-1]
            entry = next(items, None)

            if entry is None:
                work.pop()
                if closes_scope:
                    self.aggregator.close(self.tokens)
                continue

            offset, item = entry
            position = origin + offset

            if isinstance(item, TextRun):
                self._add_run(item, position)
            elif isinstance(item, GroupRef):
                self.aggregator.push(GROUP_SCOPE)
                work.append((iter(item.frame.items), position, True))
            elif isinstance(item, TagStart):
                self.aggregator.push(item.name)
            elif isinstance(item, TagEnd):
                # Stray end markers on an empty stack are harmless
                self.aggregator.close(self.tokens)
            # Shapes and images never produce or enlarge tokens

    def _add_run(self, run: TextRun, position: Point) -> None:
        for token in self.tokenizer.tokenize(run, position):
            self.aggregator.add(token)
            self.tokens.append(token)

    def finish(self) -> List[Token]:
        """Close any scopes left open and return the collected tokens."""
        if self.aggregator.depth:
            logger.warning(
                "%d tagged region(s) never closed; closing at end of document",
                self.aggregator.depth,
            )
            self.aggregator.close_all(self.tokens)
        return self.tokens


def words_in_frame(
    frame: Frame,
    include_whitespace: bool = False,
    include_delimiters: bool = False,
    trim_words: bool = False,
) -> List[Token]:
    """Return all tokens of a single frame, with its origin at (0, 0)."""
    walker = FrameWalker(
        TextTokenizer(include_whitespace, include_delimiters, trim_words)
    )
    walker.walk(frame)
    return walker.finish()


def words_with_boxes(
    document: Document,
    include_whitespace: bool = False,
    include_delimiters: bool = False,
    trim_words: bool = False,
    page_gap: float = DEFAULT_PAGE_GAP,
) -> List[Token]:
    """
    Return every token of *document* in the page-merged coordinate space.

    Each page starts below the previous one, separated by *page_gap*
    points.  Group tokens follow the leaf tokens they were built from.
    """
    walker = FrameWalker(
        TextTokenizer(include_whitespace, include_delimiters, trim_words)
    )
    for page, y_offset in zip(document.pages, document.page_offsets(page_gap)):
        walker.walk(page.frame, Point(0.0, y_offset))
    return walker.finish()
