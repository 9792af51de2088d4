"""Tests for the Document model."""

import pytest
from pydantic import ValidationError

from tests.conftest import RED, grid_with

from emblemic.models.document import (
    Background,
    Document,
    GlyphContent,
    ImageContent,
    PixelContent,
    PixelGrid,
    TextContent,
    evolve,
)


def test_json_round_trip_for_every_mode(sample_documents):
    for doc in sample_documents.values():
        restored = Document.model_validate_json(doc.model_dump_json())
        assert restored == doc


def test_content_is_tagged_by_mode():
    doc = Document.model_validate({"content": {"mode": "text", "text": "Hi", "grid": {"size": 8}}})
    assert isinstance(doc.content, TextContent)
    assert not hasattr(doc.content, "grid")


def test_unknown_mode_is_rejected():
    with pytest.raises(ValidationError):
        Document.model_validate({"content": {"mode": "video"}})


def test_documents_are_immutable():
    doc = Document()
    with pytest.raises(ValidationError):
        doc.export_size = 64


def test_evolve_revalidates():
    content = evolve(GlyphContent(), size=5000)
    assert content.size == 1024


def test_font_weight_normalised():
    assert TextContent(font_weight="bold").font_weight == "700"
    assert TextContent(font_weight=650).font_weight == "600"
    assert TextContent(font_weight="heavy").font_weight == "400"
    assert TextContent(font_weight=1200).font_weight == "900"


def test_pixel_grid_pads_and_clamps():
    grid = PixelGrid(size=2, cells=(RED,))
    assert grid.size == 4
    assert len(grid.cells) == 16
    assert grid.cells[0] == RED and grid.cells[1] == ""
    assert PixelGrid(size=99).size == 64


def test_pixel_grid_reads_legacy_shape():
    grid = PixelGrid.model_validate({"rows": 4, "cols": 4, "data": [None, RED] + [None] * 14})
    assert grid.size == 4
    assert grid.filled_indices() == [1]


def test_is_filled_outside_grid():
    grid = grid_with(4, {(0, 0): RED})
    assert grid.is_filled(0, 0)
    assert not grid.is_filled(-1, 0)
    assert not grid.is_filled(0, 4)


def test_legacy_icon_config():
    doc = Document.from_legacy({
        "mode": "icon",
        "backgroundType": "radial",
        "gradientStart": "#0ea5e9",
        "gradientEnd": "#1e3a8a",
        "noiseOpacity": 0.2,
        "radialGlareOpacity": 0.4,
        "selectedIconName": "Heart",
        "iconColor": "#000000",
        "iconSize": 300,
        "iconOffsetY": -10,
        "exportSize": 512,
        "withBackground": False,
    })
    assert doc.background.kind == "radial"
    assert doc.background.squircle
    assert doc.background.noise_opacity == 0.2
    assert doc.background.glare_opacity == 0.4
    assert doc.content == GlyphContent(name="Heart", color="#000000", size=300, offset_y=-10)
    assert doc.export_size == 512


def test_legacy_pixel_config():
    doc = Document.from_legacy({
        "mode": "pixel",
        "pixelGrid": {"rows": 4, "cols": 4, "data": [RED] + [None] * 15},
        "pixelColor": "#00ff00",
        "pixelRounding": True,
        "pixelRoundingStyle": "50%",
    })
    assert isinstance(doc.content, PixelContent)
    assert doc.content.grid.cells[0] == RED
    assert doc.content.rounding
    assert doc.content.rounding_percent == 50


def test_legacy_config_missing_keys_uses_defaults():
    doc = Document.from_legacy({})
    assert doc == Document()


def test_unparseable_colours_fall_back_to_defaults():
    background = Background(kind="solid", solid_color="not-a-colour", gradient_end="#12")
    assert background.solid_color == "#000000"
    assert background.gradient_end == "#4A00E0"
    assert GlyphContent(color="").color == "#ffffff"
    assert PixelContent(stroke_color="rgb(1, 2)").stroke_color == "#ffffff"
    assert ImageContent(tint="nope").tint == "#ffffff"


def test_named_and_functional_colours_are_kept():
    assert TextContent(color="orange").color == "orange"
    assert Background(solid_color="rgb(10, 20, 30)").solid_color == "rgb(10, 20, 30)"
