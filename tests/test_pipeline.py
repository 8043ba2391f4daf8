import argparse
import json

import fitz
import pytest
from PIL import Image

from extract_words import _parse_page_range
from wordboxes.pipeline import ExtractionConfig, WordBoxPipeline
from wordboxes.render.rasterizer import PageTooLargeError


@pytest.fixture
def sample_pdf(tmp_path):
    path = tmp_path / "sample.pdf"
    doc = fitz.open()
    doc.new_page(width=200, height=100).insert_text((20, 50), "Hello, world!")
    doc.new_page(width=200, height=100).insert_text((20, 50), "Second page")
    doc.save(str(path))
    doc.close()
    return path


def test_run_writes_json_and_renders(sample_pdf, tmp_path):
    out = tmp_path / "out" / "words.json"
    plain = tmp_path / "out" / "page.png"
    boxes = tmp_path / "out" / "boxes.png"

    pipeline = WordBoxPipeline(ExtractionConfig(disable_tqdm=True))
    result = pipeline.run(str(sample_pdf), str(out), str(plain), str(boxes))

    assert result.total_pages == 2
    assert result.pages_processed == 2
    assert result.word_count == 4
    assert result.group_count == 2
    assert result.token_count == len(result.tokens)

    records = json.loads(out.read_text(encoding="utf-8"))
    words = [r["word"] for r in records]
    assert words[:2] == ["Hello", "world"]
    assert "Secondpage" in words

    # Second page words sit below the first page plus the gap
    second = next(r for r in records if r["word"] == "Second")
    assert second["y"] > 101

    with Image.open(plain) as img:
        assert img.size == (200, 201)
    with Image.open(boxes) as img:
        assert img.size == (200, 201)
    assert "EXTRACTION COMPLETE" in result.summary()


def test_flags_and_page_range(sample_pdf, tmp_path):
    config = ExtractionConfig(
        include_delimiters=True,
        grouping="none",
        page_range=(0, 0),
        include_kind=True,
        disable_tqdm=True,
    )
    out = tmp_path / "words.json"
    result = WordBoxPipeline(config).run(str(sample_pdf), str(out))

    assert result.pages_processed == 1
    records = json.loads(out.read_text(encoding="utf-8"))
    assert [(r["word"], r["kind"]) for r in records] == [
        ("Hello", "word"),
        (",", "delimiter"),
        ("world", "word"),
        ("!", "delimiter"),
    ]
    assert all("scope" not in r for r in records)


def test_oversized_pages_fail_before_rendering(sample_pdf, tmp_path):
    config = ExtractionConfig(max_page_size=150, disable_tqdm=True)
    png = tmp_path / "page.png"

    with pytest.raises(PageTooLargeError):
        WordBoxPipeline(config).run(str(sample_pdf), render_path=str(png))
    assert not png.exists()


def test_page_range_argument():
    assert _parse_page_range("3") == (2, 2)
    assert _parse_page_range("2-5") == (1, 4)
    with pytest.raises(argparse.ArgumentTypeError):
        _parse_page_range("0-2")
    with pytest.raises(argparse.ArgumentTypeError):
        _parse_page_range("x")


def test_line_grouping_in_json(sample_pdf, tmp_path):
    config = ExtractionConfig(grouping="line", include_kind=True, disable_tqdm=True)
    out = tmp_path / "words.json"
    result = WordBoxPipeline(config).run(str(sample_pdf), str(out))

    assert result.group_count == 2
    records = json.loads(out.read_text(encoding="utf-8"))
    groups = [(r["word"], r["scope"]) for r in records if r["kind"] == "group"]
    assert groups == [("Helloworld", "group"), ("Secondpage", "group")]
