"""Vector export pipeline: scene to standalone SVG markup.

Mirrors the raster pipeline without rasterising. The viewBox is the 512
design space, so scene items are emitted with their coordinates unchanged
and ``width``/``height`` carry the output size.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from emblemic.assets.glyphs import GlyphProvider, default_glyph_provider, glyph_svg
from emblemic.config import settings
from emblemic.constants import DESIGN_CENTER, DESIGN_SIZE, GLARE_RADIUS_RATIO, clamp_export_size, primary_family
from emblemic.engine.renderers import build_scene
from emblemic.engine.scene import (
    BackgroundLayer,
    CellItem,
    GlyphItem,
    ImageItem,
    LinearPaint,
    Scene,
    SceneItem,
    SolidPaint,
    TextItem,
)
from emblemic.export.raster import ExportScope
from emblemic.models.document import Document
from emblemic.svg.serializer import element, fmt, serialize_svg, text_node

logger = logging.getLogger(__name__)

CLIP_ID = "emblemic-clip"
FILL_ID = "emblemic-fill"
GLARE_ID = "emblemic-glare"
NOISE_ID = "emblemic-noise"
TINT_ID = "emblemic-tint"

ViewBox = tuple[float, float, float, float]


@dataclass
class VectorResult:
    markup: str
    width: float
    height: float
    view_box: ViewBox = (0.0, 0.0, float(DESIGN_SIZE), float(DESIGN_SIZE))
    warnings: list[str] = field(default_factory=list)


def render_svg(
    doc: Document,
    size: int | None = None,
    scope: ExportScope = "full",
    glyphs: GlyphProvider | None = None,
) -> VectorResult:
    size = clamp_export_size(doc.export_size if size is None else size)
    glyphs = glyphs or default_glyph_provider(settings.glyph_dir)
    scene = build_scene(doc, glyphs, with_background=scope == "full")
    return scene_to_svg(scene, size, scope)


def scene_to_svg(scene: Scene, size: int, scope: ExportScope = "full") -> VectorResult:
    defs: list[str] = []
    elements: list[str] = []

    if scope == "full" and scene.background is not None:
        bg_defs, bg_elements = background_markup(scene.background)
        defs.extend(bg_defs)
        elements.extend(bg_elements)

    content_defs, content_elements = content_markup(scene.items)
    defs.extend(content_defs)
    elements.extend(content_elements)

    view_box: ViewBox = (0.0, 0.0, float(DESIGN_SIZE), float(DESIGN_SIZE))
    width = height = float(size)
    if scope == "content":
        bounds = scene.content_bounds()
        if bounds is not None:
            view_box, width, height = fit_view_box(bounds, size)

    markup = serialize_svg(elements, width, height, view_box, defs)
    logger.info(
        "Vector render %dpx scope=%s items=%d -> %sx%s",
        size,
        scope,
        len(scene.items),
        fmt(width),
        fmt(height),
    )
    return VectorResult(markup, width, height, view_box, list(scene.warnings))


def fit_view_box(bounds: tuple[float, float, float, float], size: int) -> tuple[ViewBox, float, float]:
    """viewBox for ``bounds`` and output dimensions fitting ``size``.

    The longer side gets ``size``; the shorter one is reduced in proportion.
    """
    x0, y0, x1, y1 = bounds
    w = max(x1 - x0, 1e-6)
    h = max(y1 - y0, 1e-6)
    if w >= h:
        width, height = float(size), size * h / w
    else:
        width, height = size * w / h, float(size)
    return (x0, y0, w, h), round(width, 3), round(height, 3)


# Background


def _stops(start: str, end: str) -> str:
    return element("stop", {"offset": "0", "stop-color": start}) + element(
        "stop", {"offset": "1", "stop-color": end}
    )


def gradient_endpoints(angle: float) -> tuple[float, float, float, float]:
    """x1, y1, x2, y2 of a linear gradient through the centre spanning one side."""
    theta = math.radians(angle)
    dx = math.cos(theta) * DESIGN_SIZE / 2
    dy = math.sin(theta) * DESIGN_SIZE / 2
    return (DESIGN_CENTER - dx, DESIGN_CENTER - dy, DESIGN_CENTER + dx, DESIGN_CENTER + dy)


def paint_markup(layer: BackgroundLayer) -> tuple[list[str], str]:
    """(defs, fill value) for the background paint."""
    paint = layer.paint
    if isinstance(paint, SolidPaint):
        return [], paint.color
    if isinstance(paint, LinearPaint):
        x1, y1, x2, y2 = gradient_endpoints(paint.angle)
        gradient = element(
            "linearGradient",
            {"id": FILL_ID, "gradientUnits": "userSpaceOnUse", "x1": x1, "y1": y1, "x2": x2, "y2": y2},
            _stops(paint.start, paint.end),
        )
    else:
        gradient = element(
            "radialGradient",
            {
                "id": FILL_ID,
                "gradientUnits": "userSpaceOnUse",
                "cx": float(DESIGN_CENTER),
                "cy": float(DESIGN_CENTER),
                "r": DESIGN_SIZE / 2,
            },
            _stops(paint.start, paint.end),
        )
    return [gradient], f"url(#{FILL_ID})"


def _full_rect(**attrs) -> dict:
    return {"x": "0", "y": "0", "width": str(DESIGN_SIZE), "height": str(DESIGN_SIZE), **attrs}


def background_markup(layer: BackgroundLayer) -> tuple[list[str], list[str]]:
    defs, fill = paint_markup(layer)
    layers = [element("rect", _full_rect(fill=fill))]

    if layer.has_noise:
        noise = element(
            "filter",
            {"id": NOISE_ID, "x": "0", "y": "0", "width": "100%", "height": "100%"},
            element(
                "feTurbulence",
                {"type": "fractalNoise", "baseFrequency": "0.8", "numOctaves": "3", "stitchTiles": "stitch"},
            ),
        )
        defs.append(noise)
        layers.append(
            element(
                "rect",
                _full_rect(
                    filter=f"url(#{NOISE_ID})",
                    opacity=fmt(layer.noise_opacity),
                    style="mix-blend-mode: overlay",
                ),
            )
        )

    if layer.has_glare:
        glare = element(
            "radialGradient",
            {
                "id": GLARE_ID,
                "gradientUnits": "userSpaceOnUse",
                "cx": float(DESIGN_CENTER),
                "cy": "0",
                "r": DESIGN_SIZE * GLARE_RADIUS_RATIO,
            },
            element("stop", {"offset": "0", "stop-color": "#ffffff", "stop-opacity": fmt(layer.glare_opacity)})
            + element("stop", {"offset": "1", "stop-color": "#ffffff", "stop-opacity": "0"}),
        )
        defs.append(glare)
        layers.append(element("rect", _full_rect(fill=f"url(#{GLARE_ID})")))

    if layer.clip_radius <= 0:
        return defs, layers

    clip = element(
        "clipPath",
        {"id": CLIP_ID},
        element("rect", _full_rect(rx=layer.clip_radius, ry=layer.clip_radius)),
    )
    defs.append(clip)
    return defs, [element("g", {"clip-path": f"url(#{CLIP_ID})"}, "".join(layers))]


# Content


def cell_path(item: CellItem) -> str:
    """Path data for a cell with quarter-circle arcs at its rounded corners."""
    x0, y0, x1, y1 = item.x, item.y, item.right, item.bottom
    r = min(item.radius, (x1 - x0) / 2, (y1 - y0) / 2)
    tl, tr, bl, br = (r if flag else 0.0 for flag in item.corners)
    arc = f"A {fmt(r)} {fmt(r)} 0 0 1"

    parts = [f"M {fmt(x0 + tl)} {fmt(y0)}", f"H {fmt(x1 - tr)}"]
    if tr:
        parts.append(f"{arc} {fmt(x1)} {fmt(y0 + tr)}")
    parts.append(f"V {fmt(y1 - br)}")
    if br:
        parts.append(f"{arc} {fmt(x1 - br)} {fmt(y1)}")
    parts.append(f"H {fmt(x0 + bl)}")
    if bl:
        parts.append(f"{arc} {fmt(x0)} {fmt(y1 - bl)}")
    parts.append(f"V {fmt(y0 + tl)}")
    if tl:
        parts.append(f"{arc} {fmt(x0 + tl)} {fmt(y0)}")
    parts.append("Z")
    return " ".join(parts)


def cell_markup(item: CellItem) -> str:
    if item.rounded:
        return element("path", {"d": cell_path(item), "fill": item.color})
    return element(
        "rect",
        {"x": item.x, "y": item.y, "width": item.right - item.x, "height": item.bottom - item.y, "fill": item.color},
    )


def text_markup(item: TextItem) -> str:
    return element(
        "text",
        {
            "x": item.x,
            "y": item.y,
            "text-anchor": "middle",
            "dominant-baseline": "central",
            "font-family": primary_family(item.family),
            "font-weight": item.weight,
            "font-size": item.size,
            "fill": item.color,
        },
        text_node(item.text),
    )


def image_markup(item: ImageItem) -> str:
    attrs = {
        "href": item.src,
        "x": item.x,
        "y": item.y,
        "width": item.width,
        "height": item.height,
        "preserveAspectRatio": "none",
    }
    if item.tint:
        attrs["filter"] = f"url(#{TINT_ID})"
    return element("image", attrs)


def tint_filter(color: str) -> str:
    return element(
        "filter",
        {"id": TINT_ID},
        element("feFlood", {"flood-color": color, "result": "flood"})
        + element("feComposite", {"in": "flood", "in2": "SourceAlpha", "operator": "in"}),
    )


def content_markup(items: list[SceneItem]) -> tuple[list[str], list[str]]:
    defs: list[str] = []
    elements: list[str] = []
    # Plain rects are pixel-aligned; rounded paths keep anti-aliased arcs
    sharp_cells: list[str] = []
    rounded_cells: list[str] = []

    for item in items:
        if isinstance(item, CellItem):
            (rounded_cells if item.rounded else sharp_cells).append(cell_markup(item))
        elif isinstance(item, TextItem):
            elements.append(text_markup(item))
        elif isinstance(item, GlyphItem):
            elements.append(glyph_svg(item.glyph, item.color, item.size, x=item.x, y=item.y))
        elif isinstance(item, ImageItem):
            if item.tint:
                defs.append(tint_filter(item.tint))
            elements.append(image_markup(item))

    if sharp_cells:
        elements.append(element("g", {"shape-rendering": "crispEdges"}, "".join(sharp_cells)))
    elements.extend(rounded_cells)
    return defs, elements
