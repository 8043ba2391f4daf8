"""
Merges per-page images into one image in the page-merged coordinate space.

Pages are stacked top to bottom with a fixed gap on a black background,
matching the offsets the extractor uses for token boxes.
"""

import logging
import math
from typing import Sequence, Tuple

from PIL import Image

from typeset.page.models import Document

logger = logging.getLogger(__name__)

POINTS_PER_CM = 72 / 2.54

# Largest page side accepted for rendering (100 cm)
DEFAULT_MAX_PAGE_SIZE = 100 * POINTS_PER_CM

BACKGROUND = (0, 0, 0)


class PageTooLargeError(ValueError):
    """A page exceeds the rasterizer's size limit."""

    def __init__(self, page_index: int, width: float, height: float, limit: float):
        self.page_index = page_index
        self.width = width
        self.height = height
        self.limit = limit
        super().__init__(
            f"Page {page_index} is too large to render: "
            f"{width:.1f}pt x {height:.1f}pt (limit {limit:.1f}pt per side)"
        )


def cm_to_pt(cm: float) -> float:
    return cm * POINTS_PER_CM


def check_page_limits(document: Document, limit: float = DEFAULT_MAX_PAGE_SIZE) -> None:
    """
    Reject the document if any page is wider or taller than *limit* points.

    Raises:
        PageTooLargeError: For the first offending page.
    """
    for idx, page in enumerate(document.pages):
        if page.width > limit or page.height > limit:
            raise PageTooLargeError(idx, page.width, page.height, limit)


def merged_canvas_size(
    document: Document, pixel_per_pt: float, gap: float
) -> Tuple[int, int]:
    width, height = document.merged_size(gap)
    return (
        max(1, math.ceil(width * pixel_per_pt)),
        max(1, math.ceil(height * pixel_per_pt)),
    )


def render_merged(
    document: Document,
    page_images: Sequence[Image.Image],
    pixel_per_pt: float = 1.0,
    gap: float = 1.0,
    limit: float = DEFAULT_MAX_PAGE_SIZE,
    background: Tuple[int, int, int] = BACKGROUND,
) -> Image.Image:
    """
    Paste *page_images* (one per page of *document*, rendered at
    *pixel_per_pt*) onto a single canvas.

    Raises:
        PageTooLargeError: If a page exceeds *limit* points on either side.
        ValueError:        If the document has no pages or the image count
                           does not match the page count.
    """
    check_page_limits(document, limit)

    if not document.pages:
        raise ValueError("Cannot render a document without pages")
    if len(page_images) != len(document.pages):
        raise ValueError(
            f"Expected {len(document.pages)} page images, got {len(page_images)}"
        )

    canvas_size = merged_canvas_size(document, pixel_per_pt, gap)
    canvas = Image.new("RGB", canvas_size, background)

    for image, y_offset in zip(page_images, document.page_offsets(gap)):
        canvas.paste(image.convert("RGB"), (0, round(y_offset * pixel_per_pt)))

    logger.debug(
        "Merged %d pages into %dx%d px", len(page_images), *canvas_size
    )
    return canvas
