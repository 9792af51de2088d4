"""Raster export pipeline: scene → RGBA pixel buffer → PNG/JPEG/WEBP.

Steps:
  1. Allocate an S×S transparent buffer
  2. Full scope: background fill, noise, glare inside the rounded clip
  3. Content drawn at scale S/512 on a supersampled layer, downsampled,
     composited over the background
  4. Content scope: crop to the bbox of visible pixels (uncropped when
     nothing is visible)
  5. Encode

A content step that fails (missing glyph, undecodable asset, bad colour) is
skipped with a warning; the export still completes.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Literal

from PIL import Image, ImageColor, ImageDraw

from emblemic.assets.fonts import load_font
from emblemic.assets.glyphs import GlyphProvider, default_glyph_provider, glyph_svg
from emblemic.assets.images import rasterize_svg, render_asset, tint
from emblemic.config import settings
from emblemic.constants import DESIGN_SIZE, clamp_export_size
from emblemic.engine.background import composite_background
from emblemic.engine.renderers import build_scene
from emblemic.engine.scene import CellItem, GlyphItem, ImageItem, Scene, SceneItem, TextItem
from emblemic.errors import AssetDecodeError, UnsupportedFormatError
from emblemic.models.document import Document
from emblemic.utils.alpha import image_alpha_bbox

logger = logging.getLogger(__name__)

ExportScope = Literal["full", "content"]

# Upper bound on the supersampled layer side, keeps memory bounded for
# large exports (4096px renders without supersampling).
_MAX_SUPERSAMPLED_SIDE = 4096

_PIL_FORMATS = {"png": "PNG", "jpg": "JPEG", "jpeg": "JPEG", "webp": "WEBP"}


@dataclass
class RasterResult:
    image: Image.Image
    warnings: list[str] = field(default_factory=list)
    crop_box: tuple[int, int, int, int] | None = None


def render_raster(
    doc: Document,
    size: int | None = None,
    scope: ExportScope = "full",
    glyphs: GlyphProvider | None = None,
    seed: int | None = None,
    **options,
) -> RasterResult:
    """Render ``doc`` to an RGBA image, ``size`` defaulting to its export size.

    ``content`` scope leaves the background out and crops to what is drawn.
    """
    size = clamp_export_size(doc.export_size if size is None else size)
    glyphs = glyphs or default_glyph_provider(settings.glyph_dir)
    scene = build_scene(doc, glyphs, with_background=scope == "full")
    return rasterize_scene(scene, size, scope=scope, seed=seed, **options)


def rasterize_scene(
    scene: Scene,
    size: int,
    scope: ExportScope = "full",
    seed: int | None = None,
    supersample: int | None = None,
    font_dirs: list[str] | None = None,
    alpha_threshold: int | None = None,
) -> RasterResult:
    """Rasterise ``scene`` at ``size``×``size`` pixels."""
    ss = supersample if supersample is not None else settings.raster_supersample
    ss = max(1, min(ss, _MAX_SUPERSAMPLED_SIDE // max(1, size)))
    seed = settings.noise_seed if seed is None else seed
    threshold = settings.alpha_threshold if alpha_threshold is None else alpha_threshold
    warnings = list(scene.warnings)

    if scope == "full" and scene.background is not None:
        canvas = composite_background(scene.background, size, seed=seed, supersample=ss)
    else:
        canvas = Image.new("RGBA", (size, size), (0, 0, 0, 0))

    if scene.items:
        layer = draw_content(scene.items, size, ss, warnings, font_dirs)
        canvas.alpha_composite(layer)

    result = RasterResult(image=canvas, warnings=warnings)
    if scope == "content":
        box = image_alpha_bbox(canvas, threshold)
        if box is not None and box != (0, 0, size, size):
            result.image = canvas.crop(box)
            result.crop_box = box

    logger.info(
        "Raster render %dpx scope=%s items=%d -> %dx%d",
        size,
        scope,
        len(scene.items),
        result.image.width,
        result.image.height,
    )
    return result


def draw_content(
    items: list[SceneItem],
    size: int,
    supersample: int,
    warnings: list[str],
    font_dirs: list[str] | None = None,
) -> Image.Image:
    """Draw scene items on a transparent size×size layer."""
    side = size * supersample
    k = side / DESIGN_SIZE
    layer = Image.new("RGBA", (side, side), (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)

    for item in items:
        try:
            if isinstance(item, CellItem):
                _draw_cell(draw, item, k)
            elif isinstance(item, TextItem):
                _draw_text(draw, item, k, font_dirs or settings.font_dirs)
            elif isinstance(item, GlyphItem):
                _draw_glyph(layer, item, k)
            elif isinstance(item, ImageItem):
                _draw_image(layer, item, k)
        except (AssetDecodeError, ValueError, OSError) as e:
            logger.warning("Skipped %s: %s", type(item).__name__, e)
            warnings.append(f"{type(item).__name__} skipped: {e}")

    if supersample == 1:
        return layer
    return layer.resize((size, size), Image.Resampling.BOX)


def _draw_cell(draw: ImageDraw.ImageDraw, item: CellItem, k: float) -> None:
    # Snap edges to whole pixels; neighbours share identical edge values
    # so they meet without gaps.
    x0, y0 = round(item.x * k), round(item.y * k)
    x1, y1 = round(item.right * k), round(item.bottom * k)
    if x1 <= x0 or y1 <= y0:
        return
    fill = ImageColor.getrgb(item.color)
    box = (x0, y0, x1 - 1, y1 - 1)
    if item.rounded:
        c = item.corners
        draw.rounded_rectangle(
            box,
            radius=item.radius * k,
            fill=fill,
            corners=(c.top_left, c.top_right, c.bottom_right, c.bottom_left),
        )
    else:
        draw.rectangle(box, fill=fill)


def _draw_text(draw: ImageDraw.ImageDraw, item: TextItem, k: float, font_dirs: list[str]) -> None:
    font = load_font(item.family, item.weight, item.size * k, font_dirs)
    # "mm": centre alignment, vertical-middle baseline, as in the SVG text
    draw.text(
        (item.x * k, item.y * k),
        item.text,
        font=font,
        fill=ImageColor.getrgb(item.color),
        anchor="mm",
        align="center",
    )


def _draw_glyph(layer: Image.Image, item: GlyphItem, k: float) -> None:
    px = max(1, round(item.size * k))
    bitmap = rasterize_svg(glyph_svg(item.glyph, item.color, px), px, px)
    _blit(layer, bitmap, round(item.x * k), round(item.y * k))


def _draw_image(layer: Image.Image, item: ImageItem, k: float) -> None:
    w = max(1, round(item.width * k))
    h = max(1, round(item.height * k))
    bitmap = render_asset(item.asset, w, h)
    if item.tint:
        bitmap = tint(bitmap, item.tint)
    _blit(layer, bitmap, round(item.x * k), round(item.y * k))


def _blit(layer: Image.Image, bitmap: Image.Image, x: int, y: int) -> None:
    """alpha_composite that tolerates partially off-canvas positions."""
    left, top = max(0, -x), max(0, -y)
    right = min(bitmap.width, layer.width - x)
    bottom = min(bitmap.height, layer.height - y)
    if right <= left or bottom <= top:
        return
    layer.alpha_composite(bitmap, dest=(x + left, y + top), source=(left, top, right, bottom))


def encode_raster(
    image: Image.Image,
    fmt: str,
    quality: int | None = None,
    has_background: bool = True,
) -> tuple[bytes, list[str]]:
    """Encode to ``fmt``. PNG is lossless; JPEG/WEBP use ``quality``.

    JPEG has no alpha channel: transparent pixels are flattened onto black
    and, when there is no background, a warning is returned.
    """
    pil_format = _PIL_FORMATS.get(fmt.lower())
    if pil_format is None:
        raise UnsupportedFormatError(f"Unsupported raster format: {fmt}")
    quality = settings.lossy_quality if quality is None else quality
    warnings: list[str] = []

    buf = io.BytesIO()
    if pil_format == "PNG":
        image.save(buf, format="PNG")
    elif pil_format == "JPEG":
        if not has_background:
            warnings.append("JPEG has no alpha channel; transparency was flattened to black")
        flat = Image.new("RGB", image.size, (0, 0, 0))
        flat.paste(image, mask=image.getchannel("A"))
        flat.save(buf, format="JPEG", quality=quality)
    else:
        image.save(buf, format="WEBP", quality=quality)
    return buf.getvalue(), warnings
