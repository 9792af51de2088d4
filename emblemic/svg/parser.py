"""SVG parsing for glyphs and uploaded vector assets, a facade over
ElementTree + svgpathtools.

Extracts the viewBox, root presentation attributes, inner markup and the
geometric bounds of the drawn shapes (used for content-only cropping).
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from svgpathtools import parse_path

from emblemic.errors import AssetDecodeError

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"

_VIEWBOX_RE = re.compile(r'viewBox\s*=\s*"([^"]+)"')
_WIDTH_RE = re.compile(r'<svg[^>]*?\swidth\s*=\s*"([^"]*?)"', re.IGNORECASE)
_HEIGHT_RE = re.compile(r'<svg[^>]*?\sheight\s*=\s*"([^"]*?)"', re.IGNORECASE)
_ROOT_OPEN_RE = re.compile(r"<svg\b[^>]*>", re.IGNORECASE)
_ROOT_CLOSE_RE = re.compile(r"</svg\s*>\s*$", re.IGNORECASE)
_NUMBER_RE = re.compile(r"-?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

SHAPE_TAGS = {"path", "circle", "ellipse", "rect", "line", "polyline", "polygon"}

# Root attributes that describe painting, carried onto re-emitted glyphs.
PAINT_ATTRS = (
    "fill",
    "stroke",
    "stroke-width",
    "stroke-linecap",
    "stroke-linejoin",
    "fill-rule",
)

Bounds = tuple[float, float, float, float]  # (xmin, ymin, xmax, ymax)


@dataclass(frozen=True)
class Glyph:
    """A named vector drawable: native markup plus its coordinate system."""

    name: str
    view_box: tuple[float, float, float, float]
    body: str
    attributes: dict[str, str] = field(default_factory=dict)
    # Shape bounds in viewBox units, including half the stroke width.
    bounds: Bounds | None = None


def strip_ns(tag: str) -> str:
    """Remove namespace from tag name."""
    return tag.split("}")[-1] if "}" in tag else tag


def _to_float(value: str | None, default: float = 0.0) -> float:
    if value is None:
        return default
    match = _NUMBER_RE.search(value)
    return float(match.group(0)) if match else default


def parse_viewbox(svg_text: str) -> tuple[float, float, float, float] | None:
    vb_match = _VIEWBOX_RE.search(svg_text)
    if vb_match:
        parts = vb_match.group(1).replace(",", " ").split()
        if len(parts) >= 4:
            try:
                return tuple(float(p) for p in parts[:4])  # type: ignore[return-value]
            except ValueError:
                pass
    return None


def intrinsic_size(svg_text: str) -> tuple[float, float]:
    """Natural size of an SVG asset: width/height attributes, else viewBox."""
    width = height = 0.0
    w_match = _WIDTH_RE.search(svg_text)
    h_match = _HEIGHT_RE.search(svg_text)
    if w_match and not w_match.group(1).strip().endswith("%"):
        width = _to_float(w_match.group(1))
    if h_match and not h_match.group(1).strip().endswith("%"):
        height = _to_float(h_match.group(1))
    if width > 0 and height > 0:
        return width, height

    vb = parse_viewbox(svg_text)
    if vb and vb[2] > 0 and vb[3] > 0:
        return vb[2], vb[3]
    # Browser default replaced-element size
    return 300.0, 150.0


def parse_glyph(name: str, svg_text: str) -> Glyph:
    """Parse a standalone SVG document into a Glyph."""
    try:
        root = ET.fromstring(svg_text.strip())
    except ET.ParseError as e:
        raise AssetDecodeError(f"Glyph {name!r} is not valid SVG: {e}") from e
    if strip_ns(root.tag) != "svg":
        raise AssetDecodeError(f"Glyph {name!r} root element is <{strip_ns(root.tag)}>")

    text = svg_text.strip()
    open_match = _ROOT_OPEN_RE.search(text)
    close_match = _ROOT_CLOSE_RE.search(text)
    body = ""
    if open_match and close_match and not open_match.group(0).endswith("/>"):
        body = text[open_match.end():close_match.start()].strip()

    view_box = parse_viewbox(text)
    if view_box is None:
        w, h = intrinsic_size(text)
        view_box = (0.0, 0.0, w, h)

    attributes = {k: v for k, v in root.attrib.items() if k in PAINT_ATTRS}
    return Glyph(
        name=name,
        view_box=view_box,
        body=body,
        attributes=attributes,
        bounds=shape_bounds(root),
    )


def shape_bounds(root: ET.Element) -> Bounds | None:
    """Union bounding box of every shape under ``root``.

    Stroked shapes are grown by half their stroke width. Transforms are
    not resolved.
    """
    boxes: list[Bounds] = []
    root_stroke = root.get("stroke", "none")
    root_width = _to_float(root.get("stroke-width"), 1.0)
    _collect(root, root_stroke, root_width, boxes)
    if not boxes:
        return None
    return (
        min(b[0] for b in boxes),
        min(b[1] for b in boxes),
        max(b[2] for b in boxes),
        max(b[3] for b in boxes),
    )


def _collect(node: ET.Element, stroke: str, stroke_width: float, out: list[Bounds]) -> None:
    stroke = node.get("stroke", stroke)
    stroke_width = _to_float(node.get("stroke-width"), stroke_width)
    tag = strip_ns(node.tag)

    if tag in SHAPE_TAGS:
        box = _element_bounds(tag, node)
        if box is not None:
            pad = stroke_width / 2 if stroke.lower() != "none" else 0.0
            out.append((box[0] - pad, box[1] - pad, box[2] + pad, box[3] + pad))

    for child in node:
        if strip_ns(child.tag) in {"defs", "clipPath", "mask", "title", "desc"}:
            continue
        _collect(child, stroke, stroke_width, out)


def _element_bounds(tag: str, node: ET.Element) -> Bounds | None:
    try:
        if tag == "path":
            d = node.get("d")
            if not d:
                return None
            path = parse_path(d)
            if len(path) == 0:
                return None
            xmin, xmax, ymin, ymax = path.bbox()
            return (xmin, ymin, xmax, ymax)
        if tag == "circle":
            cx, cy, r = (_to_float(node.get(a)) for a in ("cx", "cy", "r"))
            return (cx - r, cy - r, cx + r, cy + r)
        if tag == "ellipse":
            cx, cy, rx, ry = (_to_float(node.get(a)) for a in ("cx", "cy", "rx", "ry"))
            return (cx - rx, cy - ry, cx + rx, cy + ry)
        if tag == "rect":
            x, y, w, h = (_to_float(node.get(a)) for a in ("x", "y", "width", "height"))
            return (x, y, x + w, y + h)
        if tag == "line":
            x1, y1, x2, y2 = (_to_float(node.get(a)) for a in ("x1", "y1", "x2", "y2"))
            return (min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2))
        if tag in ("polyline", "polygon"):
            nums = [float(n) for n in _NUMBER_RE.findall(node.get("points", ""))]
            xs, ys = nums[0::2], nums[1::2]
            if not xs or not ys:
                return None
            return (min(xs), min(ys), max(xs), max(ys))
    except Exception as e:
        logger.warning("Failed to measure <%s>: %s", tag, e)
    return None
