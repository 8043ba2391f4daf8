"""Builders for small in-memory frame trees."""

from typeset.page.models import Frame, Glyph, Point, TextRun

ASCENDER = 8.0
DESCENDER = -2.0


def make_run(text, advance=5.0, ascender=ASCENDER, descender=DESCENDER, size=10.0):
    """One glyph per character, each *advance* points wide."""
    glyphs = []
    cursor = 0
    for ch in text:
        length = len(ch.encode("utf-8"))
        glyphs.append(Glyph(start=cursor, end=cursor + length, x_advance=advance))
        cursor += length
    return TextRun(
        text=text, glyphs=glyphs, ascender=ascender, descender=descender, size=size
    )


def make_frame(*items, size=(200.0, 100.0)):
    """Frame from ``(x, y, item)`` triples."""
    frame = Frame(size=size)
    for x, y, item in items:
        frame.push(Point(x, y), item)
    return frame


def labels(tokens):
    return [t.label for t in tokens]
