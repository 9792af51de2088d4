"""Tests for the raster export pipeline."""

import io

import numpy as np
import pytest
from PIL import Image

from tests.conftest import RED, grid_with, pixel_doc

from emblemic.engine.background import background_layer, composite_background, gradient_t
from emblemic.engine.scene import LinearPaint
from emblemic.errors import UnsupportedFormatError
from emblemic.export.raster import encode_raster, render_raster
from emblemic.models.document import Background, Document, GlyphContent, PixelContent


def _alpha(image: Image.Image) -> np.ndarray:
    return np.asarray(image.getchannel("A"))


def test_full_scope_is_square_at_requested_size(glyphs):
    result = render_raster(Document(), 128, "full", glyphs)
    assert result.image.size == (128, 128)
    assert result.image.mode == "RGBA"


def test_squircle_clip_leaves_corners_transparent(glyphs):
    image = render_raster(Document(), 256, "full", glyphs).image
    assert image.getpixel((0, 0))[3] == 0
    assert image.getpixel((128, 2))[3] == 255


def test_square_background_fills_corners(glyphs):
    doc = Document(background=Background(squircle=False))
    image = render_raster(doc, 64, "full", glyphs).image
    assert image.getpixel((0, 0))[3] == 255


def test_linear_gradient_runs_along_angle(gradient_background):
    image = composite_background(background_layer(gradient_background.model_copy(update={"squircle": False})), 100)
    left = image.getpixel((0, 50))[0]
    right = image.getpixel((99, 50))[0]
    assert left < 10 and right > 245
    # 0°: constant down each column
    assert image.getpixel((50, 0)) == image.getpixel((50, 99))


def test_gradient_t_is_clamped():
    t = gradient_t(LinearPaint("#000", "#fff", 45), 64)
    assert t.min() >= 0.0 and t.max() <= 1.0


def test_zero_overlays_match_byte_for_byte(glyphs):
    base = Document(background=Background(noise_opacity=0.0, glare_opacity=0.0))
    a = render_raster(base, 128, "full", glyphs, seed=1).image
    b = render_raster(Document(), 128, "full", glyphs, seed=2).image
    assert a.tobytes() == b.tobytes()
    assert encode_raster(a, "png")[0] == encode_raster(b, "png")[0]


def test_noise_is_deterministic_per_seed(glyphs):
    doc = Document(
        background=Background(kind="solid", solid_color="#808080", noise_opacity=0.5, squircle=False),
        content=PixelContent(),
    )
    a = render_raster(doc, 64, "full", glyphs, seed=7).image
    b = render_raster(doc, 64, "full", glyphs, seed=7).image
    c = render_raster(doc, 64, "full", glyphs, seed=8).image
    assert a.tobytes() == b.tobytes()
    assert a.tobytes() != c.tobytes()

    rgb = np.asarray(a.convert("RGB")).astype(int)
    # Channels jitter independently within ±0.5·255/2
    assert np.abs(rgb - 128).max() <= 64
    assert (rgb[..., 0] != rgb[..., 1]).any()


def test_glare_brightens_top_centre(glyphs):
    doc = Document(
        background=Background(kind="solid", solid_color="#000000", glare_opacity=0.8, squircle=False),
        content=PixelContent(),
    )
    image = render_raster(doc, 100, "full", glyphs).image
    assert image.getpixel((50, 0))[0] > 150
    assert image.getpixel((50, 99))[0] < image.getpixel((50, 0))[0]


def test_centre_cell_scenario(centre_cell_doc, glyphs):
    result = render_raster(centre_cell_doc, 512, "content", glyphs)
    image = result.image
    # One square of side 256/12 ≈ 21.3 px
    assert image.width in (21, 22) and image.height in (21, 22)
    assert image.getpixel((10, 10)) == (255, 0, 0, 255)
    # Rounded: the outermost corner pixels are (nearly) empty
    for corner in ((0, 0), (image.width - 1, 0), (0, image.height - 1), (image.width - 1, image.height - 1)):
        assert image.getpixel(corner)[3] < 128


def test_centre_cell_without_rounding_is_square(glyphs):
    doc = pixel_doc(grid_with(12, {(6, 6): RED}), size=256)
    image = render_raster(doc, 512, "content", glyphs).image
    assert image.getpixel((1, 1))[3] == 255


def test_adjacent_cells_tile_without_gaps(glyphs):
    grid = grid_with(12, {(r, c): RED for r in range(12) for c in range(12)})
    image = render_raster(pixel_doc(grid, size=256), 300, "content", glyphs).image
    alpha = _alpha(image)
    assert alpha[2:-2, 2:-2].min() == 255


def test_empty_grid_content_scope_is_uncropped_and_transparent(glyphs):
    result = render_raster(pixel_doc(grid_with(12, {})), 200, "content", glyphs)
    assert result.image.size == (200, 200)
    assert result.crop_box is None
    assert _alpha(result.image).max() == 0


def test_missing_glyph_still_exports(glyphs):
    result = render_raster(Document(content=GlyphContent(name="Nope")), 64, "full", glyphs)
    assert result.image.size == (64, 64)
    assert result.warnings


def test_glyph_is_drawn_in_colour(glyphs):
    doc = Document(content=GlyphContent(name="Square", color="#00ff00", size=400))
    image = render_raster(doc, 512, "content", glyphs).image
    pixels = np.asarray(image)
    opaque = pixels[pixels[..., 3] == 255]
    assert len(opaque)
    assert (opaque[:, 1] == 255).all() and (opaque[:, 0] == 0).all()


def test_encode_formats():
    image = Image.new("RGBA", (8, 8), (255, 0, 0, 255))
    for fmt, magic in (("png", b"\x89PNG"), ("jpg", b"\xff\xd8"), ("webp", b"RIFF")):
        data, warnings = encode_raster(image, fmt)
        assert data.startswith(magic)
        assert warnings == []
    with pytest.raises(UnsupportedFormatError):
        encode_raster(image, "bmp")


def test_jpeg_without_background_flattens_to_black_and_warns():
    image = Image.new("RGBA", (8, 8), (0, 0, 0, 0))
    data, warnings = encode_raster(image, "jpg", has_background=False)
    assert warnings
    decoded = Image.open(io.BytesIO(data))
    assert decoded.mode == "RGB"
    assert max(decoded.getpixel((4, 4))) < 8
