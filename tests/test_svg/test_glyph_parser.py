"""Tests for glyph parsing and SVG serialization."""

import pytest

from tests.conftest import STROKED_SVG

from emblemic.errors import AssetDecodeError
from emblemic.svg.parser import intrinsic_size, parse_glyph, parse_viewbox
from emblemic.svg.serializer import element, fmt, serialize_svg


def test_parse_glyph_extracts_body_and_paint():
    glyph = parse_glyph("ring", STROKED_SVG)
    assert glyph.view_box == (0, 0, 24, 24)
    assert glyph.body.startswith("<circle")
    assert glyph.attributes["stroke"] == "currentColor"
    assert "xmlns" not in glyph.attributes


def test_bounds_include_half_stroke():
    glyph = parse_glyph("ring", STROKED_SVG)
    # circle 4..20 ±1, line (2,2)-(6,4) with its own width 4 → 0..8, 0..6
    assert glyph.bounds == pytest.approx((0, 0, 21, 21))


def test_path_bounds():
    glyph = parse_glyph("p", '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10"><path d="M1 2 L9 2 L5 8 Z"/></svg>')
    assert glyph.bounds == pytest.approx((1, 2, 9, 8))


def test_invalid_glyph_raises():
    with pytest.raises(AssetDecodeError):
        parse_glyph("bad", "<svg><path></svg>")
    with pytest.raises(AssetDecodeError):
        parse_glyph("html", "<html/>")


def test_intrinsic_size_fallbacks():
    assert intrinsic_size('<svg width="40" height="20"/>') == (40, 20)
    assert intrinsic_size('<svg width="100%" viewBox="0 0 30 10"/>') == (30, 10)
    assert intrinsic_size("<svg/>") == (300, 150)
    assert parse_viewbox('<svg viewBox="0,0,5,6"/>') == (0, 0, 5, 6)


def test_fmt_trims_numbers():
    assert fmt(1.0) == "1"
    assert fmt(2.50) == "2.5"
    assert fmt(1 / 3) == "0.333"
    assert fmt(-0.0001) == "0"


def test_serialize_svg_wraps_defs():
    markup = serialize_svg([element("rect", {"x": 1.5})], 10, 10, (0, 0, 5, 5), [element("g")])
    assert markup.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert 'viewBox="0 0 5 5"' in markup
    assert "<defs>" in markup
    assert '<rect x="1.5" />' in markup
