"""Word and group token extraction from frame trees."""

from .aggregator import BBoxAggregator
from .models import BBox, GlyphRangeError, GroupAccumulator, Token, TokenKind
from .tokenizer import TextTokenizer, is_delimiter_text, is_whitespace_text
from .walker import DEFAULT_PAGE_GAP, FrameWalker, words_in_frame, words_with_boxes

__all__ = [
    "BBox",
    "Token",
    "TokenKind",
    "GroupAccumulator",
    "GlyphRangeError",
    "TextTokenizer",
    "BBoxAggregator",
    "FrameWalker",
    "DEFAULT_PAGE_GAP",
    "words_in_frame",
    "words_with_boxes",
    "is_delimiter_text",
    "is_whitespace_text",
]
