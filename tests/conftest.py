"""Shared test fixtures."""

from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from emblemic.assets.glyphs import BuiltinGlyphProvider
from emblemic.models.document import (
    Background,
    Document,
    GlyphContent,
    ImageContent,
    PixelContent,
    PixelGrid,
    TextContent,
)

RED = "#ff0000"

SQUARE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="40" height="20" viewBox="0 0 40 20">
  <rect x="0" y="0" width="40" height="20" fill="#000000"/>
</svg>'''

STROKED_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2">
  <circle cx="12" cy="12" r="8"/>
  <line x1="2" y1="2" x2="6" y2="4" stroke-width="4"/>
</svg>'''


def png_data_uri(width: int, height: int, box: tuple[int, int, int, int] | None = None, color=(255, 0, 0, 255)) -> str:
    """PNG data URI: transparent canvas with ``box`` (l, t, r, b) filled."""
    image = Image.new("RGBA", (width, height), (0, 0, 0, 0) if box else color)
    if box and box[2] > box[0] and box[3] > box[1]:
        image.paste(color, box)
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


def svg_data_uri(svg: str = SQUARE_SVG) -> str:
    return "data:image/svg+xml;base64," + base64.b64encode(svg.encode("utf-8")).decode("ascii")


def grid_with(size: int, filled: dict[tuple[int, int], str]) -> PixelGrid:
    cells = [""] * (size * size)
    for (row, col), color in filled.items():
        cells[row * size + col] = color
    return PixelGrid(size=size, cells=tuple(cells))


def pixel_doc(grid: PixelGrid, **kwargs) -> Document:
    return Document(content=PixelContent(grid=grid, **kwargs))


@pytest.fixture
def glyphs() -> BuiltinGlyphProvider:
    return BuiltinGlyphProvider()


@pytest.fixture
def centre_cell_doc() -> Document:
    """12×12 grid with one red centre cell, rounded at 25%."""
    grid = grid_with(12, {(6, 6): RED})
    return pixel_doc(grid, size=256, rounding=True, rounding_percent=25)


@pytest.fixture
def sample_documents() -> dict[str, Document]:
    """One document per content mode, all without background overlays."""
    blob = grid_with(8, {(1, 1): RED, (1, 2): RED, (2, 1): "#00ff00", (6, 5): "#0000ff"})
    return {
        "glyph": Document(content=GlyphContent(name="Square", color="#ffffff", size=256)),
        "text": Document(content=TextContent(text="Hi", size=128)),
        "pixel": pixel_doc(blob, size=320, rounding=True),
        "image": Document(content=ImageContent(src=png_data_uri(40, 20), size=256, offset_y=40)),
        "vector-image": Document(content=ImageContent(src=svg_data_uri(), tint="#00ff00", size=200)),
    }


@pytest.fixture
def gradient_background() -> Background:
    return Background(kind="linear", gradient_start="#000000", gradient_end="#ffffff", gradient_angle=0)
