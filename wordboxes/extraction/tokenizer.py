"""
Glyph-level tokenization of a single text run.

Glyphs are classified purely by the characters they span: a glyph made
only of whitespace and ASCII punctuation is a delimiter and ends the
current word.  Box geometry comes from the run's font metrics and the
glyph advances, so words are measured exactly as they were laid out.
"""

import string
from typing import List, Sequence

from typeset.page.models import Glyph, Point, TextRun

from .models import BBox, GlyphRangeError, Token, TokenKind

_ASCII_PUNCTUATION = frozenset(string.punctuation)

# Information separators count as whitespace for str.isspace but are not
# Unicode White_Space
_SEPARATORS = frozenset("\x1c\x1d\x1e\x1f")


def _is_space(c: str) -> bool:
    return c.isspace() and c not in _SEPARATORS


def is_delimiter_text(text: str) -> bool:
    """True for non-empty text made only of whitespace and ASCII punctuation."""
    return bool(text) and all(_is_space(c) or c in _ASCII_PUNCTUATION for c in text)


def is_whitespace_text(text: str) -> bool:
    """True for non-empty text made only of whitespace."""
    return bool(text) and all(_is_space(c) for c in text)


class TextTokenizer:
    """
    Splits text runs into word, delimiter and whitespace tokens.

    Words are always emitted.  Whitespace glyphs are emitted only with
    *include_whitespace*, punctuation glyphs only with
    *include_delimiters*.  With *trim_words*, word labels are stripped of
    surrounding whitespace; their boxes are left as measured.
    """

    def __init__(
        self,
        include_whitespace: bool = False,
        include_delimiters: bool = False,
        trim_words: bool = False,
    ):
        self.include_whitespace = include_whitespace
        self.include_delimiters = include_delimiters
        self.trim_words = trim_words

    def tokenize(self, run: TextRun, origin: Point) -> List[Token]:
        """
        Tokenize *run* whose baseline origin sits at *origin* (absolute).

        Raises:
            GlyphRangeError: If glyph byte ranges are out of bounds,
                             overlapping, or split a UTF-8 sequence.
        """
        glyphs = run.glyphs
        if not glyphs:
            return []

        data = run.text.encode("utf-8")
        tokens: List[Token] = []

        # Pending word: glyphs[word_start:i], starting at word_start_x
        word_start = 0
        word_start_x = 0.0
        cursor = 0.0
        previous_end = 0

        for i, glyph in enumerate(glyphs):
            _check_range(glyph, previous_end, len(data), i)
            previous_end = glyph.end
            glyph_text = _decode(data, glyph.start, glyph.end)

            is_delimiter = is_delimiter_text(glyph_text)
            if is_delimiter:
                if word_start < i:
                    self._emit_word(
                        tokens, data, run, origin, glyphs[word_start:i], word_start_x
                    )

                is_whitespace = is_whitespace_text(glyph_text)
                if (not is_whitespace or self.include_whitespace) and (
                    is_whitespace or self.include_delimiters
                ):
                    kind = TokenKind.WHITESPACE if is_whitespace else TokenKind.DELIMITER
                    tokens.append(
                        _finalize(data, run, origin, [glyph], cursor, kind)
                    )
                word_start = i + 1

            cursor += glyph.x_advance

            if is_delimiter:
                word_start_x = cursor

        if word_start < len(glyphs):
            self._emit_word(
                tokens, data, run, origin, glyphs[word_start:], word_start_x
            )

        return tokens

    def _emit_word(
        self,
        tokens: List[Token],
        data: bytes,
        run: TextRun,
        origin: Point,
        glyphs: Sequence[Glyph],
        start_x: float,
    ) -> None:
        token = _finalize(data, run, origin, glyphs, start_x, TokenKind.WORD)
        if self.trim_words:
            label = token.label.strip()
            if not label:
                return
            token = Token(label=label, bbox=token.bbox, kind=token.kind)
        tokens.append(token)


def _finalize(
    data: bytes,
    run: TextRun,
    origin: Point,
    glyphs: Sequence[Glyph],
    start_x: float,
    kind: TokenKind,
) -> Token:
    """Build one token from a contiguous glyph window."""
    first = glyphs[0]
    label = _decode(data, first.start, glyphs[-1].end)
    width = sum(g.x_advance for g in glyphs)
    x = origin.x + start_x + first.x_offset
    y = origin.y - run.ascender
    return Token(label=label, bbox=BBox(x, y, width, run.height), kind=kind)


def _check_range(glyph: Glyph, previous_end: int, length: int, index: int) -> None:
    if glyph.start < previous_end or glyph.start > glyph.end or glyph.end > length:
        raise GlyphRangeError(
            f"Glyph {index} has byte range {glyph.start}..{glyph.end} "
            f"(previous glyph ended at {previous_end}, text is {length} bytes)"
        )


def _decode(data: bytes, start: int, end: int) -> str:
    try:
        return data[start:end].decode("utf-8")
    except UnicodeDecodeError as e:
        raise GlyphRangeError(
            f"Byte range {start}..{end} does not fall on character boundaries"
        ) from e
