import json

from wordboxes.export import WordBox, tokens_to_json, tokens_to_records, write_json
from wordboxes.extraction.models import BBox, Token, TokenKind

TOKENS = [
    Token(label="Fig", bbox=BBox(30, 42, 15, 10)),
    Token(label="1", bbox=BBox(50, 42, 5, 10)),
    Token(label="Fig1", bbox=BBox(30, 42, 25, 10), kind=TokenKind.GROUP, scope="group"),
]


def test_records_match_word_box_layout():
    records = tokens_to_records(TOKENS)
    assert records[0] == {"word": "Fig", "x": 30, "y": 42, "width": 15, "height": 10}
    assert all(set(r) == {"word", "x", "y", "width", "height"} for r in records)


def test_kind_and_scope_are_opt_in():
    records = tokens_to_records(TOKENS, include_kind=True)
    assert records[0]["kind"] == "word"
    assert "scope" not in records[0]
    assert records[2]["kind"] == "group"
    assert records[2]["scope"] == "group"


def test_json_is_pretty_and_keeps_unicode():
    text = tokens_to_json([Token(label="wörld", bbox=BBox(0, 0, 1, 1))])
    assert "wörld" in text
    assert text.startswith("[\n  {")


def test_write_json_round_trips(tmp_path):
    out = write_json(TOKENS, tmp_path / "nested" / "words.json")
    data = json.loads(out.read_text(encoding="utf-8"))
    assert [d["word"] for d in data] == ["Fig", "1", "Fig1"]
    assert WordBox(**data[2]).width == 25
