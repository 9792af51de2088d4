"""Export entry point: one Document in, one encoded artifact out."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from emblemic.assets.glyphs import GlyphProvider
from emblemic.constants import clamp_export_size
from emblemic.errors import UnsupportedFormatError
from emblemic.export.raster import ExportScope, encode_raster, render_raster
from emblemic.export.vector import render_svg
from emblemic.models.document import Document

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("png", "jpg", "webp", "svg")

MEDIA_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "webp": "image/webp",
    "svg": "image/svg+xml",
}

_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


@dataclass
class ExportArtifact:
    data: bytes
    filename: str
    media_type: str
    width: float
    height: float
    warnings: list[str] = field(default_factory=list)


def normalize_format(fmt: str) -> str:
    key = fmt.lower().lstrip(".")
    if key == "jpeg":
        key = "jpg"
    if key not in EXPORT_FORMATS:
        raise UnsupportedFormatError(f"Unsupported export format: {fmt}")
    return key


def export_filename(name: str, ext: str) -> str:
    stem = _UNSAFE_FILENAME_RE.sub("_", name).strip() or "icon"
    return f"{stem}.{ext}"


def export_design(
    doc: Document,
    fmt: str = "png",
    scope: ExportScope = "full",
    name: str = "icon",
    size: int | None = None,
    glyphs: GlyphProvider | None = None,
    seed: int | None = None,
) -> ExportArtifact:
    """Render and encode ``doc``. Never fails on missing content.

    Raises:
        UnsupportedFormatError: ``fmt`` is not png, jpg, webp or svg.
    """
    ext = normalize_format(fmt)
    size = clamp_export_size(doc.export_size if size is None else size)
    filename = export_filename(name, ext)

    if ext == "svg":
        result = render_svg(doc, size, scope, glyphs)
        artifact = ExportArtifact(
            data=result.markup.encode("utf-8"),
            filename=filename,
            media_type=MEDIA_TYPES[ext],
            width=result.width,
            height=result.height,
            warnings=result.warnings,
        )
    else:
        raster = render_raster(doc, size, scope, glyphs, seed)
        data, encode_warnings = encode_raster(raster.image, ext, has_background=scope == "full")
        artifact = ExportArtifact(
            data=data,
            filename=filename,
            media_type=MEDIA_TYPES[ext],
            width=raster.image.width,
            height=raster.image.height,
            warnings=raster.warnings + encode_warnings,
        )

    for warning in artifact.warnings:
        logger.warning("Export %s: %s", filename, warning)
    logger.info("Exported %s (%d bytes)", filename, len(artifact.data))
    return artifact
