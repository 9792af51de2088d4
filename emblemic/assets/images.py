"""Uploaded image assets: data-URI decoding and rasterisation.

Raster assets decode with Pillow; SVG assets rasterise with cairosvg.
Any decode failure raises AssetDecodeError.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import re
from dataclasses import dataclass
from urllib.parse import unquote_to_bytes

import cairosvg
from PIL import Image, ImageColor, UnidentifiedImageError

from emblemic.errors import AssetDecodeError
from emblemic.svg.parser import intrinsic_size

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(?:;[^,;]*)*?),(?P<data>.*)$", re.DOTALL)

SVG_MIME = "image/svg+xml"


@dataclass(frozen=True)
class ImageAsset:
    mime: str
    data: bytes
    width: float
    height: float

    @property
    def is_vector(self) -> bool:
        return self.mime == SVG_MIME

    @property
    def svg_text(self) -> str:
        return self.data.decode("utf-8", errors="replace")


def is_svg_data_uri(src: str) -> bool:
    return src.startswith("data:image/svg")


def to_data_uri(data: bytes, mime: str) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_uri(src: str) -> ImageAsset:
    """Decode a ``data:`` URI into an ImageAsset with its natural size."""
    match = _DATA_URI_RE.match(src.strip())
    if not match:
        raise AssetDecodeError("Image source is not a data URI")
    mime = (match.group("mime") or "text/plain").lower()
    params = match.group("params") or ""
    payload = match.group("data")
    try:
        if ";base64" in params.lower():
            data = base64.b64decode(payload, validate=False)
        else:
            data = unquote_to_bytes(payload)
    except (binascii.Error, ValueError) as e:
        raise AssetDecodeError(f"Image data could not be decoded: {e}") from e

    if mime == SVG_MIME:
        width, height = intrinsic_size(data.decode("utf-8", errors="replace"))
        return ImageAsset(mime=mime, data=data, width=width, height=height)

    image = open_raster(data)
    return ImageAsset(mime=mime, data=data, width=float(image.width), height=float(image.height))


def open_raster(data: bytes) -> Image.Image:
    """Decode raster bytes into an RGBA image."""
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise AssetDecodeError(f"Raster image could not be decoded: {e}") from e
    if image.width == 0 or image.height == 0:
        raise AssetDecodeError("Raster image has no pixels")
    return image.convert("RGBA")


def rasterize_svg(svg_text: str, width: int, height: int) -> Image.Image:
    """Render SVG markup to an RGBA image of exactly width×height."""
    width = max(1, int(width))
    height = max(1, int(height))
    try:
        png_data = cairosvg.svg2png(
            bytestring=svg_text.encode("utf-8"),
            output_width=width,
            output_height=height,
        )
    except Exception as e:
        raise AssetDecodeError(f"SVG could not be rasterised: {e}") from e
    image = Image.open(io.BytesIO(png_data)).convert("RGBA")
    if image.size != (width, height):
        image = image.resize((width, height), Image.Resampling.LANCZOS)
    return image


def render_asset(asset: ImageAsset, width: int, height: int) -> Image.Image:
    if asset.is_vector:
        return rasterize_svg(asset.svg_text, width, height)
    image = open_raster(asset.data)
    return image.resize((max(1, int(width)), max(1, int(height))), Image.Resampling.LANCZOS)


def tint(image: Image.Image, color: str) -> Image.Image:
    """Mask-and-fill: keep the alpha channel, replace every colour."""
    rgb = ImageColor.getrgb(color)[:3]
    filled = Image.new("RGBA", image.size, rgb + (255,))
    filled.putalpha(image.getchannel("A"))
    return filled
