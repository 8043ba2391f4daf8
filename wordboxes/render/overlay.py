"""
Draws token bounding boxes over a rendered page image.
"""

from typing import Iterable, Tuple

from PIL import Image, ImageDraw

from wordboxes.extraction.models import Token

# Red with some transparency
BOX_COLOR = (255, 0, 0, 180)


def draw_token_boxes(
    image: Image.Image,
    tokens: Iterable[Token],
    pixel_per_pt: float = 1.0,
    color: Tuple[int, int, int, int] = BOX_COLOR,
    line_width: int = 1,
) -> Image.Image:
    """
    Stroke a rectangle around every token on a copy of *image*.

    Token boxes are in points and are scaled by *pixel_per_pt*.  Boxes
    with zero width or height are skipped.
    """
    img = image.convert("RGBA")
    layer = Image.new("RGBA", img.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)

    for token in tokens:
        box = token.bbox.scaled(pixel_per_pt)
        if box.width <= 0 or box.height <= 0:
            continue
        draw.rectangle(
            [box.left, box.top, box.right, box.bottom],
            outline=color,
            width=line_width,
        )

    return Image.alpha_composite(img, layer).convert("RGB")
