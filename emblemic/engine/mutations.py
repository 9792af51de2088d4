"""Document mutations issued by UI collaborators.

Each function takes a Document and returns a new one; nothing is edited in
place. Pass the result to ``HistoryManager.record``. Numeric inputs are
clamped by the model validators.
"""

from __future__ import annotations

import logging
from typing import Any

from emblemic.constants import get_preset
from emblemic.models.document import (
    CONTENT_TYPES,
    ContentMode,
    Document,
    ImageContent,
    PixelContent,
    evolve,
)

logger = logging.getLogger(__name__)


def update_background(doc: Document, **changes: Any) -> Document:
    return evolve(doc, background=evolve(doc.background, **changes))


def apply_preset(doc: Document, name: str) -> Document:
    preset = get_preset(name)
    if preset is None:
        logger.warning("Unknown preset %r, document unchanged", name)
        return doc
    return update_background(
        doc,
        kind=preset.kind,
        solid_color=preset.solid_color,
        gradient_start=preset.gradient_start,
        gradient_end=preset.gradient_end,
        gradient_angle=preset.gradient_angle,
    )


def switch_mode(doc: Document, mode: ContentMode) -> Document:
    """Select a content mode; a different mode starts from its defaults."""
    if doc.mode == mode:
        return doc
    return evolve(doc, content=CONTENT_TYPES[mode]())


def update_content(doc: Document, **changes: Any) -> Document:
    changes.pop("mode", None)
    return evolve(doc, content=evolve(doc.content, **changes))


def set_export_size(doc: Document, size: float) -> Document:
    return evolve(doc, export_size=size)


def _pixel_content(doc: Document) -> PixelContent | None:
    if isinstance(doc.content, PixelContent):
        return doc.content
    logger.debug("Grid edit ignored in %s mode", doc.mode)
    return None


def paint_cell(doc: Document, index: int, color: str | None = None) -> Document:
    content = _pixel_content(doc)
    if content is None:
        return doc
    grid = content.grid.painted(index, color or content.stroke_color)
    return update_content(doc, grid=grid)


def erase_cell(doc: Document, index: int) -> Document:
    content = _pixel_content(doc)
    if content is None:
        return doc
    return update_content(doc, grid=content.grid.erased(index))


def clear_grid(doc: Document) -> Document:
    content = _pixel_content(doc)
    if content is None:
        return doc
    return update_content(doc, grid=content.grid.cleared())


def resize_grid(doc: Document, size: float) -> Document:
    content = _pixel_content(doc)
    if content is None:
        return doc
    grid = content.grid.resized(size)
    if grid is content.grid:
        return doc
    return update_content(doc, grid=grid)


def set_image_source(doc: Document, src: str) -> Document:
    """Switch to image mode with ``src``, keeping an existing tint."""
    if isinstance(doc.content, ImageContent):
        return update_content(doc, src=src)
    return evolve(doc, content=ImageContent(src=src))
