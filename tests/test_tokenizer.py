import pytest

from typeset.page.models import Glyph, Point, TextRun
from wordboxes.extraction.models import BBox, GlyphRangeError, TokenKind
from wordboxes.extraction.tokenizer import (
    TextTokenizer,
    is_delimiter_text,
    is_whitespace_text,
)

from tests.helpers import labels, make_run

ORIGIN = Point(10.0, 50.0)


def test_classification_by_character_class():
    assert is_delimiter_text(",")
    assert is_delimiter_text(" ")
    assert is_delimiter_text(" .")
    assert not is_delimiter_text("")
    assert not is_delimiter_text("a,")
    assert not is_delimiter_text("—")  # em dash is not ASCII punctuation
    assert is_whitespace_text("\t ")
    assert not is_whitespace_text(" ,")
    assert not is_whitespace_text("")


def test_information_separators_are_word_characters():
    for sep in "\x1c\x1d\x1e\x1f":
        assert not is_delimiter_text(sep)
        assert not is_whitespace_text(sep)
    assert is_whitespace_text("\x85  ")

    tokens = TextTokenizer(include_whitespace=True).tokenize(
        make_run("a\x1fb c"), ORIGIN
    )
    assert labels(tokens) == ["a\x1fb", " ", "c"]


def test_run_without_delimiters_is_one_word():
    run = make_run("Hello")
    tokens = TextTokenizer().tokenize(run, ORIGIN)

    assert len(tokens) == 1
    word = tokens[0]
    assert word.label == "Hello"
    assert word.kind is TokenKind.WORD
    assert word.bbox == BBox(10.0, 42.0, 25.0, 10.0)


def test_hello_world_words_only():
    tokens = TextTokenizer().tokenize(make_run("Hello, world!"), ORIGIN)

    assert labels(tokens) == ["Hello", "world"]
    assert tokens[0].bbox == BBox(10.0, 42.0, 25.0, 10.0)
    # "world" starts after "Hello, " (7 glyphs)
    assert tokens[1].bbox == BBox(45.0, 42.0, 25.0, 10.0)


def test_hello_world_with_delimiters():
    tokens = TextTokenizer(include_delimiters=True).tokenize(
        make_run("Hello, world!"), ORIGIN
    )

    assert labels(tokens) == ["Hello", ",", "world", "!"]
    comma = tokens[1]
    assert comma.kind is TokenKind.DELIMITER
    assert comma.bbox == BBox(35.0, 42.0, 5.0, 10.0)
    assert tokens[3].bbox.x == 70.0


def test_hello_world_with_whitespace_only():
    tokens = TextTokenizer(include_whitespace=True).tokenize(
        make_run("Hello, world!"), ORIGIN
    )

    assert labels(tokens) == ["Hello", " ", "world"]
    assert tokens[1].kind is TokenKind.WHITESPACE
    assert tokens[1].bbox.x == 40.0


def test_flags_do_not_move_words():
    run = make_run("a.b c, d")
    baseline = [
        t for t in TextTokenizer().tokenize(run, ORIGIN) if t.kind is TokenKind.WORD
    ]

    for ws in (False, True):
        for delims in (False, True):
            tokens = TextTokenizer(ws, delims).tokenize(run, ORIGIN)
            words = [t for t in tokens if t.kind is TokenKind.WORD]
            assert words == baseline
            assert any(t.kind is TokenKind.WHITESPACE for t in tokens) == ws
            assert any(t.kind is TokenKind.DELIMITER for t in tokens) == delims


def test_whitespace_only_run():
    run = make_run("   ")
    assert TextTokenizer().tokenize(run, ORIGIN) == []

    tokens = TextTokenizer(include_whitespace=True).tokenize(run, ORIGIN)
    assert labels(tokens) == [" ", " ", " "]
    assert [t.bbox.x for t in tokens] == [10.0, 15.0, 20.0]


def test_empty_run_yields_nothing():
    run = TextRun(text="", glyphs=[], ascender=8.0, descender=-2.0)
    assert TextTokenizer(True, True).tokenize(run, ORIGIN) == []


def test_multibyte_labels_follow_byte_ranges():
    tokens = TextTokenizer().tokenize(make_run("héllo wörld"), ORIGIN)
    assert labels(tokens) == ["héllo", "wörld"]
    assert tokens[1].bbox.x == 10.0 + 6 * 5.0


def test_ligature_glyph_spans_several_characters():
    # "office" shaped as o + ffi + c + e
    run = TextRun(
        text="office",
        glyphs=[
            Glyph(0, 1, 5.0),
            Glyph(1, 4, 9.0),
            Glyph(4, 5, 5.0),
            Glyph(5, 6, 5.0),
        ],
        ascender=8.0,
        descender=-2.0,
    )
    tokens = TextTokenizer().tokenize(run, ORIGIN)
    assert labels(tokens) == ["office"]
    assert tokens[0].bbox.width == 24.0


def test_first_glyph_offset_shifts_box():
    run = TextRun(
        text="ab cd",
        glyphs=[
            Glyph(0, 1, 5.0),
            Glyph(1, 2, 5.0),
            Glyph(2, 3, 3.0),
            Glyph(3, 4, 5.0, x_offset=1.5),
            Glyph(4, 5, 5.0),
        ],
        ascender=8.0,
        descender=-2.0,
    )
    tokens = TextTokenizer().tokenize(run, ORIGIN)
    assert labels(tokens) == ["ab", "cd"]
    assert tokens[1].bbox.x == 10.0 + 13.0 + 1.5
    assert tokens[1].bbox.width == 10.0


def test_mixed_glyph_keeps_exact_slice_unless_trimmed():
    # A single glyph spanning "b " is not a delimiter, so the space stays
    run = TextRun(
        text="ab c",
        glyphs=[Glyph(0, 1, 5.0), Glyph(1, 3, 8.0), Glyph(3, 4, 5.0)],
        ascender=8.0,
        descender=-2.0,
    )
    assert labels(TextTokenizer().tokenize(run, ORIGIN)) == ["ab c"]

    run.text = "a  b"
    run.glyphs = [Glyph(0, 2, 5.0), Glyph(2, 3, 3.0), Glyph(3, 4, 5.0)]
    untrimmed = TextTokenizer().tokenize(run, ORIGIN)
    trimmed = TextTokenizer(trim_words=True).tokenize(run, ORIGIN)
    assert labels(untrimmed) == ["a ", "b"]
    assert labels(trimmed) == ["a", "b"]
    assert trimmed[0].bbox == untrimmed[0].bbox


@pytest.mark.parametrize(
    "glyphs",
    [
        [Glyph(0, 2, 5.0), Glyph(1, 3, 5.0)],  # overlapping
        [Glyph(2, 3, 5.0), Glyph(0, 1, 5.0)],  # decreasing
        [Glyph(0, 9, 5.0)],  # past the end
        [Glyph(2, 1, 5.0)],  # reversed
    ],
)
def test_malformed_glyph_ranges_fail_fast(glyphs):
    run = TextRun(text="abc", glyphs=glyphs, ascender=8.0, descender=-2.0)
    with pytest.raises(GlyphRangeError):
        TextTokenizer().tokenize(run, ORIGIN)


def test_range_splitting_a_character_fails():
    run = TextRun(text="é", glyphs=[Glyph(0, 1, 5.0)], ascender=8.0, descender=-2.0)
    with pytest.raises(GlyphRangeError):
        TextTokenizer().tokenize(run, ORIGIN)
