"""Design Document model: the immutable value describing one icon design.

Every field is authored in the 512×512 design space. Mode-specific fields
live on a tagged union keyed by ``mode`` so a text design cannot carry a
stray pixel grid. Out-of-range numbers are clamped on validation, never
rejected.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, TypeVar, Union

from PIL import ImageColor
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from emblemic.constants import (
    DEFAULT_EXPORT_SIZE,
    DEFAULT_GRID_SIZE,
    MAX_GRID_SIZE,
    MIN_GRID_SIZE,
    clamp_export_size,
)


def _clamp(lo: float, hi: float):
    def _inner(value: float) -> float:
        return min(hi, max(lo, value))

    return _inner


Opacity = Annotated[float, AfterValidator(_clamp(0.0, 1.0))]
Angle = Annotated[float, AfterValidator(_clamp(0.0, 360.0))]
OffsetY = Annotated[float, AfterValidator(_clamp(-512.0, 512.0))]
GlyphSize = Annotated[float, AfterValidator(_clamp(16.0, 1024.0))]
BoxSize = Annotated[float, AfterValidator(_clamp(32.0, 1024.0))]
RoundingPercent = Annotated[float, AfterValidator(_clamp(0.0, 50.0))]


def _color_or_default(model: type[BaseModel], value: str, info: ValidationInfo) -> str:
    """Colours Pillow cannot parse fall back to the field default."""
    try:
        ImageColor.getrgb(value)
    except ValueError:
        return model.model_fields[info.field_name].default
    return value


BackgroundKind = Literal["solid", "linear", "radial"]
ContentMode = Literal["glyph", "text", "pixel", "image"]

_FROZEN = ConfigDict(frozen=True, extra="ignore")

M = TypeVar("M", bound=BaseModel)


def evolve(model: M, **changes: Any) -> M:
    """Return a re-validated copy of ``model`` with ``changes`` applied.

    Unlike ``model_copy(update=...)`` this runs validators, so clamping
    applies to every mutation.
    """
    data = model.model_dump()
    data.update(changes)
    return type(model).model_validate(data)


class PixelGrid(BaseModel):
    """Square grid of cell colours, row-major. ``""`` means transparent."""

    model_config = _FROZEN

    size: int = DEFAULT_GRID_SIZE
    cells: tuple[str, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        # Legacy shape: {"rows", "cols", "data"}
        if "size" not in data and ("cols" in data or "rows" in data):
            data["size"] = data.get("cols", data.get("rows"))
        if "cells" not in data and "data" in data:
            data["cells"] = data["data"]

        size = int(round(float(data.get("size", DEFAULT_GRID_SIZE))))
        size = max(MIN_GRID_SIZE, min(MAX_GRID_SIZE, size))
        cells = [c or "" for c in (data.get("cells") or ())]
        total = size * size
        if len(cells) < total:
            cells.extend([""] * (total - len(cells)))
        data["size"] = size
        data["cells"] = tuple(cells[:total])
        return data

    @property
    def rows(self) -> int:
        return self.size

    @property
    def cols(self) -> int:
        return self.size

    def is_filled(self, row: int, col: int) -> bool:
        """Out-of-grid positions count as empty."""
        if row < 0 or col < 0 or row >= self.size or col >= self.size:
            return False
        return bool(self.cells[row * self.size + col])

    def filled_indices(self) -> list[int]:
        return [i for i, c in enumerate(self.cells) if c]

    @property
    def is_empty(self) -> bool:
        return not any(self.cells)

    def painted(self, index: int, color: str) -> PixelGrid:
        if not 0 <= index < len(self.cells):
            return self
        cells = list(self.cells)
        cells[index] = color
        return PixelGrid(size=self.size, cells=tuple(cells))

    def erased(self, index: int) -> PixelGrid:
        return self.painted(index, "")

    def cleared(self) -> PixelGrid:
        return PixelGrid(size=self.size)

    def resized(self, size: int | float) -> PixelGrid:
        """Resize, keeping the top-left overlap and clearing everything else."""
        new_size = max(MIN_GRID_SIZE, min(MAX_GRID_SIZE, int(round(size))))
        if new_size == self.size:
            return self
        keep = min(self.size, new_size)
        cells = [""] * (new_size * new_size)
        for r in range(keep):
            for c in range(keep):
                cells[r * new_size + c] = self.cells[r * self.size + c]
        return PixelGrid(size=new_size, cells=tuple(cells))


class Background(BaseModel):
    model_config = _FROZEN

    kind: BackgroundKind = "linear"
    solid_color: str = "#000000"
    gradient_start: str = "#8E2DE2"
    gradient_end: str = "#4A00E0"
    gradient_angle: Angle = 135.0
    noise_opacity: Opacity = 0.0
    glare_opacity: Opacity = 0.0
    squircle: bool = True

    @field_validator("solid_color", "gradient_start", "gradient_end")
    @classmethod
    def _valid_color(cls, value: str, info: ValidationInfo) -> str:
        return _color_or_default(cls, value, info)


class GlyphContent(BaseModel):
    model_config = _FROZEN

    mode: Literal["glyph"] = "glyph"
    name: str = "Plane"
    color: str = "#ffffff"
    size: GlyphSize = 256.0
    offset_y: OffsetY = 0.0

    @field_validator("color")
    @classmethod
    def _valid_color(cls, value: str, info: ValidationInfo) -> str:
        return _color_or_default(cls, value, info)


class TextContent(BaseModel):
    model_config = _FROZEN

    mode: Literal["text"] = "text"
    text: str = "Aa"
    font_family: str = "Inter"
    font_weight: str = "700"
    color: str = "#ffffff"
    size: GlyphSize = 256.0
    offset_y: OffsetY = 0.0

    @field_validator("color")
    @classmethod
    def _valid_color(cls, value: str, info: ValidationInfo) -> str:
        return _color_or_default(cls, value, info)

    @field_validator("font_weight", mode="before")
    @classmethod
    def _normalize_weight(cls, value: Any) -> str:
        named = {"normal": 400, "bold": 700}
        text = str(value).strip().lower()
        if text in named:
            weight = named[text]
        else:
            try:
                weight = int(float(text))
            except ValueError:
                weight = 400
        weight = max(100, min(900, int(round(weight / 100.0)) * 100))
        return str(weight)


class PixelContent(BaseModel):
    model_config = _FROZEN

    mode: Literal["pixel"] = "pixel"
    grid: PixelGrid = Field(default_factory=PixelGrid)
    stroke_color: str = "#ffffff"
    size: BoxSize = 256.0
    rounding: bool = False
    rounding_percent: RoundingPercent = 25.0

    @field_validator("stroke_color")
    @classmethod
    def _valid_color(cls, value: str, info: ValidationInfo) -> str:
        return _color_or_default(cls, value, info)


class ImageContent(BaseModel):
    model_config = _FROZEN

    mode: Literal["image"] = "image"
    src: str | None = None
    tint: str = "#ffffff"
    size: BoxSize = 256.0
    offset_y: OffsetY = 0.0

    @field_validator("tint")
    @classmethod
    def _valid_color(cls, value: str, info: ValidationInfo) -> str:
        return _color_or_default(cls, value, info)


Content = Annotated[
    Union[GlyphContent, TextContent, PixelContent, ImageContent],
    Field(discriminator="mode"),
]

CONTENT_TYPES: dict[str, type[BaseModel]] = {
    "glyph": GlyphContent,
    "text": TextContent,
    "pixel": PixelContent,
    "image": ImageContent,
}


class Document(BaseModel):
    """Complete, serializable description of one icon design."""

    model_config = _FROZEN

    background: Background = Field(default_factory=Background)
    content: Content = Field(default_factory=GlyphContent)
    export_size: int = DEFAULT_EXPORT_SIZE

    @field_validator("export_size", mode="before")
    @classmethod
    def _clamp_export_size(cls, value: Any) -> int:
        return clamp_export_size(value)

    @property
    def mode(self) -> ContentMode:
        return self.content.mode

    @classmethod
    def from_legacy(cls, config: dict[str, Any]) -> Document:
        """Migrate the legacy flat configuration shape into a Document.

        Missing keys fall back to defaults, matching how stored files were
        upgraded when loaded. ``withBackground`` only toggled the editor
        preview, so it is ignored and migrated designs keep the rounded clip.
        """
        background = _pick(config, {
            "backgroundType": "kind",
            "solidColor": "solid_color",
            "gradientStart": "gradient_start",
            "gradientEnd": "gradient_end",
            "gradientAngle": "gradient_angle",
            "noiseOpacity": "noise_opacity",
            "radialGlareOpacity": "glare_opacity",
        })

        mode = {"icon": "glyph", "pixel": "pixel", "text": "text", "image": "image"}.get(
            config.get("mode", "icon"), "glyph"
        )
        if mode == "glyph":
            content = _pick(config, {
                "selectedIconName": "name",
                "iconColor": "color",
                "iconSize": "size",
                "iconOffsetY": "offset_y",
            })
        elif mode == "text":
            content = _pick(config, {
                "textContent": "text",
                "fontFamily": "font_family",
                "fontWeight": "font_weight",
                "textColor": "color",
                "textSize": "size",
                "textOffsetY": "offset_y",
            })
        elif mode == "pixel":
            content = _pick(config, {
                "pixelGrid": "grid",
                "pixelColor": "stroke_color",
                "pixelSize": "size",
                "pixelRounding": "rounding",
            })
            style = config.get("pixelRoundingStyle")
            if style:
                content["rounding_percent"] = float(str(style).rstrip("%"))
        else:
            content = _pick(config, {
                "imageSrc": "src",
                "imageColor": "tint",
                "imageSize": "size",
                "imageOffsetY": "offset_y",
            })
        content["mode"] = mode

        data: dict[str, Any] = {"background": background, "content": content}
        if config.get("exportSize") is not None:
            data["export_size"] = config["exportSize"]
        return cls.model_validate(data)


def _pick(config: dict[str, Any], mapping: dict[str, str]) -> dict[str, Any]:
    return {new: config[old] for old, new in mapping.items() if config.get(old) is not None}
