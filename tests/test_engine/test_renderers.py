"""Tests for content renderers and the shared scene."""

import pytest

from tests.conftest import RED, grid_with, pixel_doc, png_data_uri, svg_data_uri

from emblemic.engine.adjacency import SHARP
from emblemic.engine.renderers import build_scene, render_pixels
from emblemic.engine.scene import CellItem, GlyphItem, ImageItem, LinearPaint, TextItem
from emblemic.models.document import Background, Document, GlyphContent, ImageContent, TextContent


def test_glyph_item_is_centred(glyphs):
    doc = Document(content=GlyphContent(name="Square", size=256, offset_y=20))
    scene = build_scene(doc, glyphs)
    (item,) = scene.items
    assert isinstance(item, GlyphItem)
    assert (item.x, item.y, item.size) == (128, 148, 256)


def test_glyph_bounds_use_shape_geometry(glyphs):
    doc = Document(content=GlyphContent(name="Square", size=240))
    (item,) = build_scene(doc, glyphs).items
    # rect 3..21 plus half of the 1.5 stroke, scaled by 240/24
    assert item.bounds == pytest.approx((136 + 22.5, 136 + 22.5, 136 + 217.5, 136 + 217.5))


def test_missing_glyph_renders_nothing(glyphs):
    scene = build_scene(Document(content=GlyphContent(name="DoesNotExist")), glyphs)
    assert scene.items == []
    assert any("DoesNotExist" in w for w in scene.warnings)


def test_text_anchor_and_empty_text(glyphs):
    (item,) = build_scene(Document(content=TextContent(text="Go", offset_y=-30)), glyphs).items
    assert isinstance(item, TextItem)
    assert (item.x, item.y) == (256, 226)
    assert build_scene(Document(content=TextContent(text="  ")), glyphs).items == []


def test_text_bounds_are_estimated_and_clamped():
    item = TextItem(x=256, y=256, text="WWWWWWWW", family="Inter", weight="700", size=200, color="#fff")
    assert item.bounds == (0.0, 136.0, 512.0, 376.0)


def test_pixel_cells_share_edges():
    grid = grid_with(12, {(r, c): RED for r in range(12) for c in range(12)})
    items = render_pixels(pixel_doc(grid, size=256).content)
    assert len(items) == 144
    by_pos = {(round(i.y, 6), round(i.x, 6)): i for i in items}
    for item in items:
        right_neighbour = by_pos.get((round(item.y, 6), round(item.right, 6)))
        if right_neighbour is not None:
            assert right_neighbour.x == item.right


def test_pixel_cell_geometry_and_corners():
    grid = grid_with(8, {(1, 1): RED, (1, 2): RED})
    items = render_pixels(pixel_doc(grid, size=320, rounding=True, rounding_percent=50).content)
    first, second = items
    assert isinstance(first, CellItem)
    assert first.bounds == (136, 136, 176, 176)
    assert first.radius == 20
    assert first.corners.top_left and not first.corners.top_right
    assert second.corners.top_right and not second.corners.top_left


def test_pixel_rounding_off_gives_sharp_cells():
    grid = grid_with(4, {(0, 0): RED})
    (item,) = render_pixels(pixel_doc(grid).content)
    assert item.corners == SHARP
    assert not item.rounded


def test_empty_grid_renders_nothing(glyphs):
    scene = build_scene(pixel_doc(grid_with(12, {})), glyphs)
    assert scene.items == []
    assert scene.content_bounds() is None


def test_image_fits_preserving_aspect(glyphs):
    doc = Document(content=ImageContent(src=png_data_uri(40, 20), size=256, offset_y=40))
    (item,) = build_scene(doc, glyphs).items
    assert isinstance(item, ImageItem)
    assert item.bounds == (128, 232, 384, 360)
    assert item.tint is None


def test_vector_image_carries_tint(glyphs):
    doc = Document(content=ImageContent(src=svg_data_uri(), tint="#00ff00", size=200))
    (item,) = build_scene(doc, glyphs).items
    assert item.tint == "#00ff00"
    assert (item.width, item.height) == (200, 100)


def test_undecodable_image_is_skipped_with_warning(glyphs):
    scene = build_scene(Document(content=ImageContent(src="data:image/png;base64,AAAA")), glyphs)
    assert scene.items == []
    assert scene.warnings


def test_background_layer_is_optional(glyphs):
    doc = Document(background=Background(kind="linear", gradient_angle=90))
    assert isinstance(build_scene(doc, glyphs).background.paint, LinearPaint)
    assert build_scene(doc, glyphs, with_background=False).background is None
