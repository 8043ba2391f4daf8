import pytest
from PIL import Image

from typeset.page.models import Document, Frame, Page
from wordboxes.extraction.models import BBox, Token
from wordboxes.render.overlay import draw_token_boxes
from wordboxes.render.rasterizer import (
    DEFAULT_MAX_PAGE_SIZE,
    PageTooLargeError,
    check_page_limits,
    cm_to_pt,
    render_merged,
)

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)


def make_doc(*sizes):
    return Document(pages=[Page(Frame(size=s), number=i + 1) for i, s in enumerate(sizes)])


def test_default_limit_is_one_metre():
    assert DEFAULT_MAX_PAGE_SIZE == pytest.approx(2834.6457, abs=1e-3)
    assert cm_to_pt(2.54) == pytest.approx(72)


def test_oversized_page_is_rejected_with_dimensions():
    doc = make_doc((100, 100), (3000, 50))
    with pytest.raises(PageTooLargeError) as info:
        check_page_limits(doc)

    err = info.value
    assert err.page_index == 1
    assert (err.width, err.height) == (3000, 50)
    assert "3000.0pt x 50.0pt" in str(err)

    with pytest.raises(PageTooLargeError):
        render_merged(doc, [Image.new("RGB", (1, 1))] * 2)


def test_pages_are_stacked_with_gap_on_black():
    doc = make_doc((100, 50), (80, 30))
    images = [
        Image.new("RGB", (200, 100), WHITE),
        Image.new("RGB", (160, 60), WHITE),
    ]
    merged = render_merged(doc, images, pixel_per_pt=2, gap=1)

    assert merged.size == (200, 162)
    assert merged.getpixel((0, 99)) == WHITE
    assert merged.getpixel((0, 100)) == BLACK
    assert merged.getpixel((0, 101)) == BLACK
    assert merged.getpixel((0, 102)) == WHITE
    # Narrower page leaves the background visible on the right
    assert merged.getpixel((180, 120)) == BLACK


def test_render_needs_one_image_per_page():
    with pytest.raises(ValueError):
        render_merged(make_doc(), [])
    with pytest.raises(ValueError):
        render_merged(make_doc((10, 10)), [])


def test_overlay_strokes_box_outline_only():
    image = Image.new("RGB", (60, 60), WHITE)
    token = Token(label="w", bbox=BBox(10, 10, 20, 20))

    boxed = draw_token_boxes(image, [token])
    r, g, b = boxed.getpixel((10, 20))
    assert r > 200 and g < 150 and b < 150
    assert boxed.getpixel((20, 20)) == WHITE
    # Source image is untouched
    assert image.getpixel((10, 20)) == WHITE


def test_overlay_scales_boxes():
    image = Image.new("RGB", (100, 100), WHITE)
    token = Token(label="w", bbox=BBox(10, 10, 20, 20))

    boxed = draw_token_boxes(image, [token], pixel_per_pt=2)
    assert boxed.getpixel((10, 30)) == WHITE
    r, g, _ = boxed.getpixel((20, 30))
    assert r > 200 and g < 150


def test_overlay_skips_degenerate_boxes():
    image = Image.new("RGB", (20, 20), WHITE)
    token = Token(label=" ", bbox=BBox(5, 5, 0, 10))
    assert list(draw_token_boxes(image, [token]).getdata()) == list(image.getdata())
