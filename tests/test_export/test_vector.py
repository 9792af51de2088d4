"""Tests for the vector export pipeline."""

import xml.etree.ElementTree as ET

import pytest

from tests.conftest import RED, grid_with, pixel_doc, png_data_uri

from emblemic.constants import DESIGN_SIZE, SQUIRCLE_RADIUS_RATIO
from emblemic.engine.adjacency import CornerFlags
from emblemic.engine.scene import CellItem
from emblemic.export.vector import cell_path, fit_view_box, gradient_endpoints, render_svg
from emblemic.models.document import Background, Document, GlyphContent, ImageContent, TextContent
from emblemic.svg.parser import strip_ns

NS = {"svg": "http://www.w3.org/2000/svg"}


def _parse(markup: str) -> ET.Element:
    return ET.fromstring(markup.encode("utf-8"))


def _tags(root: ET.Element) -> list[str]:
    return [strip_ns(el.tag) for el in root.iter()]


def test_root_dimensions_and_view_box(glyphs):
    result = render_svg(Document(), 1024, "full", glyphs)
    root = _parse(result.markup)
    assert root.get("width") == "1024"
    assert root.get("height") == "1024"
    assert root.get("viewBox") == "0 0 512 512"


def test_squircle_clip_path(glyphs):
    root = _parse(render_svg(Document(), 256, "full", glyphs).markup)
    clip_rect = root.find("svg:defs/svg:clipPath/svg:rect", NS)
    assert clip_rect is not None
    assert float(clip_rect.get("rx")) == pytest.approx(DESIGN_SIZE * SQUIRCLE_RADIUS_RATIO)


def test_no_clip_without_squircle(glyphs):
    doc = Document(background=Background(squircle=False))
    assert "clipPath" not in _tags(_parse(render_svg(doc, 256, "full", glyphs).markup))


def test_linear_gradient_endpoints(glyphs, gradient_background):
    assert gradient_endpoints(0) == pytest.approx((0, 256, 512, 256))
    assert gradient_endpoints(90) == pytest.approx((256, 0, 256, 512))
    root = _parse(render_svg(Document(background=gradient_background), 256, "full", glyphs).markup)
    gradient = root.find("svg:defs/svg:linearGradient", NS)
    assert gradient.get("gradientUnits") == "userSpaceOnUse"
    assert (gradient.get("x1"), gradient.get("x2")) == ("0", "512")


def test_radial_background_gradient(glyphs):
    doc = Document(background=Background(kind="radial", gradient_start=RED, gradient_end="#0000ff"))
    root = _parse(render_svg(doc, 256, "full", glyphs).markup)
    gradient = root.find("svg:defs/svg:radialGradient", NS)
    assert gradient.get("id") == "emblemic-fill"
    assert (gradient.get("cx"), gradient.get("cy"), gradient.get("r")) == ("256", "256", "256")
    assert gradient.find("svg:stop", NS).get("stop-color") == RED


def test_overlays_only_when_enabled(glyphs):
    plain = _tags(_parse(render_svg(Document(), 256, "full", glyphs).markup))
    assert "feTurbulence" not in plain
    assert "radialGradient" not in plain

    doc = Document(background=Background(noise_opacity=0.3, glare_opacity=0.5))
    markup = render_svg(doc, 256, "full", glyphs).markup
    tags = _tags(_parse(markup))
    assert "feTurbulence" in tags
    assert "radialGradient" in tags
    assert "mix-blend-mode: overlay" in markup
    assert 'r="409.6"' in markup


def test_content_scope_omits_background(glyphs):
    markup = render_svg(Document(), 256, "content", glyphs).markup
    assert "clipPath" not in markup
    assert "linearGradient" not in markup


def test_glyph_is_nested_and_recoloured(glyphs):
    doc = Document(content=GlyphContent(name="Heart", color="#123456"))
    markup = render_svg(doc, 512, "full", glyphs).markup
    root = _parse(markup)
    nested = [el for el in root.iter() if strip_ns(el.tag) == "svg" and el is not root]
    assert len(nested) == 1
    assert nested[0].get("viewBox") == "0 0 24 24"
    assert "currentColor" not in markup
    assert 'stroke="#123456"' in markup


def test_text_alignment_and_escaping(glyphs):
    doc = Document(content=TextContent(text="A&B", font_family="'Roboto Mono', monospace"))
    root = _parse(render_svg(doc, 256, "full", glyphs).markup)
    text = root.find(".//svg:text", NS)
    assert text.text == "A&B"
    assert text.get("text-anchor") == "middle"
    assert text.get("dominant-baseline") == "central"
    assert text.get("font-family") == "Roboto Mono"


def test_rounded_cells_stay_anti_aliased(glyphs):
    doc = pixel_doc(grid_with(4, {(0, 0): RED, (0, 1): RED, (3, 3): RED}), size=256, rounding=True, rounding_percent=25)
    root = _parse(render_svg(doc, 256, "content", glyphs).markup)
    assert root.find(".//svg:g[@shape-rendering='crispEdges']", NS) is None
    pair_left, pair_right, single = root.findall("svg:path", NS)
    # Each cell of a pair is rounded on its two outer corners only
    assert pair_left.get("d").count("A ") == 2
    assert pair_right.get("d").count("A ") == 2
    assert single.get("d").count("A ") == 4


def test_sharp_cells_are_rects(glyphs):
    doc = pixel_doc(grid_with(4, {(0, 0): RED}), size=256)
    root = _parse(render_svg(doc, 256, "full", glyphs).markup)
    rect = root.find(".//svg:g[@shape-rendering='crispEdges']/svg:rect", NS)
    assert rect.get("x") == "128" and rect.get("width") == "64"
    assert rect.get("fill") == RED


def test_cell_path_arcs():
    cell = CellItem(0, 0, 10, 10, RED, corners=CornerFlags(True, False, False, True), radius=2)
    assert cell_path(cell) == "M 2 0 H 10 V 8 A 2 2 0 0 1 8 10 H 0 V 2 A 2 2 0 0 1 2 0 Z"


def test_vector_image_gets_tint_filter(sample_documents, glyphs):
    markup = render_svg(sample_documents["vector-image"], 256, "full", glyphs).markup
    root = _parse(markup)
    assert root.find(".//svg:filter/svg:feFlood", NS).get("flood-color") == "#00ff00"
    assert root.find(".//svg:filter/svg:feComposite", NS).get("operator") == "in"
    assert root.find(".//svg:image", NS).get("filter") == "url(#emblemic-tint)"


def test_raster_image_is_not_tinted(sample_documents, glyphs):
    markup = render_svg(sample_documents["image"], 256, "full", glyphs).markup
    assert "feFlood" not in markup
    assert "data:image/png;base64," in markup


def test_content_scope_fits_bounds(glyphs):
    doc = Document(content=ImageContent(src=png_data_uri(40, 20), size=256))
    result = render_svg(doc, 512, "content", glyphs)
    assert result.view_box == pytest.approx((128, 192, 256, 128))
    assert (result.width, result.height) == (512, 256)


def test_content_scope_without_content_is_full_square(glyphs):
    result = render_svg(pixel_doc(grid_with(12, {})), 300, "content", glyphs)
    assert result.view_box == (0, 0, 512, 512)
    assert (result.width, result.height) == (300, 300)


def test_fit_view_box_reduces_shorter_side():
    view_box, width, height = fit_view_box((0, 0, 50, 100), 400)
    assert view_box == (0, 0, 50, 100)
    assert (width, height) == (200, 400)
