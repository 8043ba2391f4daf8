"""Merged page rendering and token box overlays."""

from .overlay import BOX_COLOR, draw_token_boxes
from .rasterizer import (
    DEFAULT_MAX_PAGE_SIZE,
    PageTooLargeError,
    check_page_limits,
    cm_to_pt,
    render_merged,
)

__all__ = [
    "render_merged",
    "check_page_limits",
    "cm_to_pt",
    "PageTooLargeError",
    "DEFAULT_MAX_PAGE_SIZE",
    "draw_token_boxes",
    "BOX_COLOR",
]
