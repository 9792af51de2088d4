"""Alpha-channel helpers shared by export cropping and upload analysis."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from PIL import Image

# Minimum alpha value for a pixel to count as visible.
ALPHA_THRESHOLD = 5


def alpha_bbox(
    alpha: NDArray[np.uint8], threshold: int = ALPHA_THRESHOLD
) -> tuple[int, int, int, int] | None:
    """Inclusive-exclusive (left, top, right, bottom) of pixels with alpha > threshold.

    Returns None when nothing is visible.
    """
    visible = alpha > threshold
    rows = np.flatnonzero(visible.any(axis=1))
    cols = np.flatnonzero(visible.any(axis=0))
    if rows.size == 0 or cols.size == 0:
        return None
    return (int(cols[0]), int(rows[0]), int(cols[-1]) + 1, int(rows[-1]) + 1)


def image_alpha_bbox(image: Image.Image, threshold: int = ALPHA_THRESHOLD) -> tuple[int, int, int, int] | None:
    return alpha_bbox(np.asarray(image.convert("RGBA").getchannel("A")), threshold)


def crop_transparent(image: Image.Image, threshold: int = ALPHA_THRESHOLD) -> Image.Image:
    """Crop to the visible pixels. Fully transparent images come back unchanged."""
    box = image_alpha_bbox(image, threshold)
    if box is None or box == (0, 0, image.width, image.height):
        return image
    return image.crop(box)
