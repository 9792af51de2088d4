"""Whitespace-crop analyzer for uploaded images.

Raster uploads with notable transparent padding get a crop suggestion the
user can accept or decline. SVG uploads bypass the analysis so they stay
vector.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Literal

import numpy as np

from emblemic.assets.images import decode_data_uri, is_svg_data_uri, open_raster, to_data_uri
from emblemic.config import settings
from emblemic.constants import WHITESPACE_MIN_MARGIN_PX, WHITESPACE_MIN_RATIO
from emblemic.utils.alpha import alpha_bbox

logger = logging.getLogger(__name__)

CropDecision = Literal["accept-crop", "keep-original"]


@dataclass(frozen=True)
class CropSuggestion:
    original_src: str
    cropped_src: str
    whitespace_ratio: float
    box: tuple[int, int, int, int]  # (left, top, right, bottom) in source pixels
    file_name: str | None = None


def has_meaningful_whitespace(width: int, height: int, box: tuple[int, int, int, int]) -> tuple[bool, float]:
    """(suggest?, whitespace ratio) for content ``box`` inside width×height."""
    left, top, right, bottom = box
    content_w, content_h = right - left, bottom - top
    total = width * height
    ratio = (total - content_w * content_h) / total
    margin = width - content_w > WHITESPACE_MIN_MARGIN_PX or height - content_h > WHITESPACE_MIN_MARGIN_PX
    return ratio > WHITESPACE_MIN_RATIO and margin, ratio


def analyze_upload(data_uri: str, file_name: str | None = None) -> CropSuggestion | None:
    """Crop suggestion for a raster upload, or None when none applies.

    Raises:
        AssetDecodeError: the upload cannot be decoded.
    """
    if is_svg_data_uri(data_uri):
        logger.debug("SVG upload, whitespace analysis skipped")
        return None

    asset = decode_data_uri(data_uri)
    image = open_raster(asset.data)
    box = alpha_bbox(np.asarray(image.getchannel("A")), settings.alpha_threshold)
    if box is None:
        logger.info("Upload has no visible pixels")
        return None

    suggest, ratio = has_meaningful_whitespace(image.width, image.height, box)
    if not suggest:
        logger.debug("Upload whitespace %.1f%% below threshold", ratio * 100)
        return None

    buf = io.BytesIO()
    image.crop(box).save(buf, format="PNG")
    logger.info("Suggesting crop to %s (%.0f%% whitespace)", box, ratio * 100)
    return CropSuggestion(
        original_src=data_uri,
        cropped_src=to_data_uri(buf.getvalue(), "image/png"),
        whitespace_ratio=ratio,
        box=box,
        file_name=file_name,
    )


def resolve_crop(suggestion: CropSuggestion, decision: CropDecision) -> str:
    """Image source to apply for the user's choice."""
    if decision == "accept-crop":
        return suggestion.cropped_src
    if decision == "keep-original":
        return suggestion.original_src
    raise ValueError(f"Unknown crop decision: {decision}")
