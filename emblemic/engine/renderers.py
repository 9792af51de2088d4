"""Content renderers: one per mode, Document content → scene items.

All geometry is centred on the design-space midpoint (256, 256). Missing
content (unknown glyph, empty text, empty grid, no image) yields no items;
it is never an error.
"""

from __future__ import annotations

import logging

from emblemic.assets.glyphs import GlyphProvider
from emblemic.assets.images import decode_data_uri
from emblemic.constants import DESIGN_CENTER
from emblemic.engine.adjacency import SHARP, smart_corners
from emblemic.engine.background import background_layer
from emblemic.engine.scene import CellItem, GlyphItem, ImageItem, Scene, SceneItem, TextItem
from emblemic.errors import AssetDecodeError
from emblemic.models.document import (
    Document,
    GlyphContent,
    ImageContent,
    PixelContent,
    TextContent,
)

logger = logging.getLogger(__name__)


def render_glyph(content: GlyphContent, glyphs: GlyphProvider, scene: Scene) -> list[SceneItem]:
    glyph = glyphs.lookup(content.name)
    if glyph is None:
        logger.warning("Glyph %r not found, rendering nothing", content.name)
        scene.warnings.append(f"glyph '{content.name}' not found")
        return []
    half = content.size / 2
    return [
        GlyphItem(
            x=DESIGN_CENTER - half,
            y=DESIGN_CENTER - half + content.offset_y,
            size=content.size,
            glyph=glyph,
            color=content.color,
        )
    ]


def render_text(content: TextContent) -> list[SceneItem]:
    if not content.text.strip():
        return []
    return [
        TextItem(
            x=DESIGN_CENTER,
            y=DESIGN_CENTER + content.offset_y,
            text=content.text,
            family=content.font_family,
            weight=content.font_weight,
            size=content.size,
            color=content.color,
        )
    ]


def render_pixels(content: PixelContent) -> list[SceneItem]:
    """One cell item per filled cell.

    Cell edges are derived from the grid origin so neighbours share their
    edge coordinates exactly.
    """
    grid = content.grid
    cell = content.size / grid.cols
    origin = DESIGN_CENTER - content.size / 2
    radius = cell * content.rounding_percent / 100.0 if content.rounding else 0.0

    items: list[SceneItem] = []
    for index in grid.filled_indices():
        row, col = divmod(index, grid.cols)
        items.append(
            CellItem(
                x=origin + col * cell,
                y=origin + row * cell,
                right=origin + (col + 1) * cell,
                bottom=origin + (row + 1) * cell,
                color=grid.cells[index],
                corners=smart_corners(grid, index) if radius > 0 else SHARP,
                radius=radius,
            )
        )
    return items


def render_image(content: ImageContent, scene: Scene) -> list[SceneItem]:
    if not content.src:
        return []
    try:
        asset = decode_data_uri(content.src)
    except AssetDecodeError as e:
        logger.warning("Image content skipped: %s", e)
        scene.warnings.append(f"image could not be decoded: {e}")
        return []

    # Fit inside size×size preserving aspect ratio
    aspect = asset.width / asset.height if asset.height else 1.0
    if aspect > 1:
        width, height = content.size, content.size / aspect
    else:
        width, height = content.size * aspect, content.size
    return [
        ImageItem(
            x=DESIGN_CENTER - width / 2,
            y=DESIGN_CENTER - height / 2 + content.offset_y,
            width=width,
            height=height,
            asset=asset,
            src=content.src,
            tint=content.tint if asset.is_vector else None,
        )
    ]


def render_content(doc: Document, glyphs: GlyphProvider, scene: Scene) -> list[SceneItem]:
    content = doc.content
    if isinstance(content, GlyphContent):
        return render_glyph(content, glyphs, scene)
    if isinstance(content, TextContent):
        return render_text(content)
    if isinstance(content, PixelContent):
        return render_pixels(content)
    return render_image(content, scene)


def build_scene(doc: Document, glyphs: GlyphProvider, with_background: bool = True) -> Scene:
    """Scene for ``doc``: background layer (optional) plus content items."""
    scene = Scene(background=background_layer(doc.background) if with_background else None)
    scene.items = render_content(doc, glyphs, scene)
    logger.debug("Scene for %s mode: %d items", doc.mode, len(scene.items))
    return scene
