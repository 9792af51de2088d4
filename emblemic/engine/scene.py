"""Shared scene description consumed by both export pipelines.

Items are positioned in the 512×512 design space. The raster pipeline
scales them by ``size / 512``; the vector pipeline emits them verbatim
under a 512 viewBox. Keeping geometry here is what keeps the two outputs
in agreement.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from emblemic.assets.images import ImageAsset
from emblemic.constants import DESIGN_SIZE, TEXT_HEIGHT_RATIO, TEXT_WIDTH_RATIO
from emblemic.engine.adjacency import SHARP, CornerFlags
from emblemic.svg.parser import Bounds, Glyph


@dataclass(frozen=True)
class SolidPaint:
    color: str


@dataclass(frozen=True)
class LinearPaint:
    start: str
    end: str
    angle: float  # degrees; 0 = left→right, 90 = top→bottom


@dataclass(frozen=True)
class RadialPaint:
    start: str  # centre
    end: str  # edge


Paint = Union[SolidPaint, LinearPaint, RadialPaint]


@dataclass(frozen=True)
class BackgroundLayer:
    paint: Paint
    noise_opacity: float = 0.0
    glare_opacity: float = 0.0
    clip_radius: float = 0.0  # design units, 0 = square corners

    @property
    def has_noise(self) -> bool:
        return self.noise_opacity > 0

    @property
    def has_glare(self) -> bool:
        return self.glare_opacity > 0


@dataclass(frozen=True)
class CellItem:
    # Edges, not origin + size: a cell's right edge is computed with the
    # same expression as its neighbour's left edge, so they are identical.
    x: float
    y: float
    right: float
    bottom: float
    color: str
    corners: CornerFlags = SHARP
    radius: float = 0.0

    @property
    def size(self) -> float:
        return self.right - self.x

    @property
    def rounded(self) -> bool:
        return self.radius > 0 and self.corners.any

    @property
    def bounds(self) -> Bounds:
        return (self.x, self.y, self.right, self.bottom)


@dataclass(frozen=True)
class TextItem:
    x: float  # anchor: horizontal centre
    y: float  # anchor: vertical middle
    text: str
    family: str
    weight: str
    size: float
    color: str

    @property
    def bounds(self) -> Bounds:
        """Estimated box; text metrics are not measured."""
        lines = self.text.split("\n") or [""]
        width = self.size * max(len(line) for line in lines) * TEXT_WIDTH_RATIO
        height = self.size * TEXT_HEIGHT_RATIO * len(lines)
        x = self.x - width / 2
        y = self.y - height / 2
        return (
            max(0.0, x),
            max(0.0, y),
            min(float(DESIGN_SIZE), x + width),
            min(float(DESIGN_SIZE), y + height),
        )


@dataclass(frozen=True)
class GlyphItem:
    x: float
    y: float
    size: float
    glyph: Glyph
    color: str

    def _viewport_transform(self) -> tuple[float, float, float]:
        """(scale, tx, ty) for viewBox → design space, xMidYMid meet."""
        vx, vy, vw, vh = self.glyph.view_box
        scale = min(self.size / vw, self.size / vh) if vw > 0 and vh > 0 else 1.0
        tx = self.x + (self.size - vw * scale) / 2 - vx * scale
        ty = self.y + (self.size - vh * scale) / 2 - vy * scale
        return scale, tx, ty

    @property
    def bounds(self) -> Bounds:
        if self.glyph.bounds is None:
            return (self.x, self.y, self.x + self.size, self.y + self.size)
        scale, tx, ty = self._viewport_transform()
        xmin, ymin, xmax, ymax = self.glyph.bounds
        return (tx + xmin * scale, ty + ymin * scale, tx + xmax * scale, ty + ymax * scale)


@dataclass(frozen=True)
class ImageItem:
    x: float
    y: float
    width: float
    height: float
    asset: ImageAsset
    src: str
    tint: str | None = None  # only set for vector assets

    @property
    def bounds(self) -> Bounds:
        return (self.x, self.y, self.x + self.width, self.y + self.height)


SceneItem = Union[CellItem, TextItem, GlyphItem, ImageItem]


@dataclass
class Scene:
    background: BackgroundLayer | None = None
    items: list[SceneItem] = field(default_factory=list)
    # Non-fatal problems met while building (missing glyph, bad asset, …)
    warnings: list[str] = field(default_factory=list)

    def content_bounds(self) -> Bounds | None:
        """Box of all content clipped to the design square.

        None when there is no content or all of it lies off the canvas.
        """
        if not self.items:
            return None
        boxes = [item.bounds for item in self.items]
        x0 = max(0.0, min(b[0] for b in boxes))
        y0 = max(0.0, min(b[1] for b in boxes))
        x1 = min(float(DESIGN_SIZE), max(b[2] for b in boxes))
        y1 = min(float(DESIGN_SIZE), max(b[3] for b in boxes))
        if x1 <= x0 or y1 <= y0:
            return None
        return (x0, y0, x1, y1)
