"""Background compositor: fill, noise and glare inside the clip region.

``background_layer`` turns the Document's background parameters into a
scene layer; the remaining functions rasterise that layer with numpy.
The vector pipeline expresses the same layer as SVG paint servers.
"""

from __future__ import annotations

import logging
import math

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageColor, ImageDraw

from emblemic.constants import DESIGN_SIZE, GLARE_RADIUS_RATIO, SQUIRCLE_RADIUS_RATIO
from emblemic.engine.scene import BackgroundLayer, LinearPaint, Paint, RadialPaint, SolidPaint
from emblemic.models.document import Background

logger = logging.getLogger(__name__)


def background_layer(bg: Background) -> BackgroundLayer:
    paint: Paint
    if bg.kind == "solid":
        paint = SolidPaint(bg.solid_color)
    elif bg.kind == "linear":
        paint = LinearPaint(bg.gradient_start, bg.gradient_end, bg.gradient_angle)
    else:
        paint = RadialPaint(bg.gradient_start, bg.gradient_end)
    return BackgroundLayer(
        paint=paint,
        noise_opacity=bg.noise_opacity,
        glare_opacity=bg.glare_opacity,
        clip_radius=DESIGN_SIZE * SQUIRCLE_RADIUS_RATIO if bg.squircle else 0.0,
    )


def _rgb(color: str) -> NDArray[np.float64]:
    return np.array(ImageColor.getrgb(color)[:3], dtype=np.float64)


def _pixel_centres(size: int) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    coords = (np.arange(size, dtype=np.float64) + 0.5) / size
    return np.meshgrid(coords, coords)  # xs, ys in [0, 1]


def gradient_t(paint: LinearPaint | RadialPaint, size: int) -> NDArray[np.float64]:
    """Gradient parameter per pixel, clamped to [0, 1] (pad spread).

    Linear: projection onto (cos θ, sin θ) through the centre, spanning one
    side length. Radial: distance from the centre over half a side.
    """
    xs, ys = _pixel_centres(size)
    if isinstance(paint, LinearPaint):
        theta = math.radians(paint.angle)
        t = 0.5 + (xs - 0.5) * math.cos(theta) + (ys - 0.5) * math.sin(theta)
    else:
        t = np.hypot(xs - 0.5, ys - 0.5) / 0.5
    return np.clip(t, 0.0, 1.0)


def fill_array(paint: Paint, size: int) -> NDArray[np.float64]:
    """size×size×3 float RGB of the fill."""
    if isinstance(paint, SolidPaint):
        return np.broadcast_to(_rgb(paint.color), (size, size, 3)).copy()
    t = gradient_t(paint, size)[..., None]
    return _rgb(paint.start) * (1.0 - t) + _rgb(paint.end) * t


def apply_noise(rgb: NDArray[np.float64], opacity: float, rng: np.random.Generator) -> NDArray[np.float64]:
    """Per-pixel, per-channel independent jitter in ±opacity·255/2, clamped."""
    factor = opacity * 255.0
    jitter = (rng.random(rgb.shape) - 0.5) * factor
    return np.clip(rgb + jitter, 0.0, 255.0)


def glare_alpha(size: int, opacity: float) -> NDArray[np.float64]:
    """White radial highlight at top-centre fading to 0 at 0.8·size."""
    xs, ys = _pixel_centres(size)
    t = np.clip(np.hypot(xs - 0.5, ys) / GLARE_RADIUS_RATIO, 0.0, 1.0)
    return opacity * (1.0 - t)


def clip_mask(size: int, radius: float, supersample: int = 4) -> Image.Image:
    """Anti-aliased rounded-square mask (mode "L"). ``radius`` in output px."""
    if radius <= 0:
        return Image.new("L", (size, size), 255)
    ss = max(1, supersample)
    big = Image.new("L", (size * ss, size * ss), 0)
    ImageDraw.Draw(big).rounded_rectangle(
        (0, 0, size * ss - 1, size * ss - 1), radius=radius * ss, fill=255
    )
    if ss == 1:
        return big
    return big.resize((size, size), Image.Resampling.BOX)


def composite_background(
    layer: BackgroundLayer,
    size: int,
    seed: int | None = 0,
    supersample: int = 4,
) -> Image.Image:
    """Rasterise ``layer`` into a size×size RGBA image."""
    rgb = fill_array(layer.paint, size)

    if layer.has_noise:
        rgb = apply_noise(rgb, layer.noise_opacity, np.random.default_rng(seed))

    if layer.has_glare:
        alpha = glare_alpha(size, layer.glare_opacity)[..., None]
        rgb = rgb * (1.0 - alpha) + 255.0 * alpha

    image = Image.fromarray(np.round(rgb).astype(np.uint8), "RGB").convert("RGBA")
    radius_px = layer.clip_radius * size / DESIGN_SIZE
    image.putalpha(clip_mask(size, radius_px, supersample))
    logger.debug(
        "Background %s at %dpx (noise=%.2f glare=%.2f)",
        type(layer.paint).__name__,
        size,
        layer.noise_opacity,
        layer.glare_opacity,
    )
    return image
