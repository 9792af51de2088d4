"""POST /api/export: render a design to an encoded file."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from emblemic.assets.glyphs import GlyphProvider
from emblemic.dependencies import get_glyph_provider
from emblemic.errors import UnsupportedFormatError
from emblemic.export.service import export_design
from emblemic.models.requests import ExportRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def _header_safe(text: str) -> str:
    # Header values must be latin-1
    return text.encode("ascii", "replace").decode("ascii")


@router.post("/export")
def export(req: ExportRequest, glyphs: GlyphProvider = Depends(get_glyph_provider)) -> Response:
    try:
        artifact = export_design(
            req.document,
            fmt=req.format,
            scope=req.scope,
            name=req.name,
            size=req.size,
            glyphs=glyphs,
            seed=req.seed,
        )
    except UnsupportedFormatError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    headers = {
        "Content-Disposition": f'attachment; filename="{_header_safe(artifact.filename)}"',
        "X-Emblemic-Width": str(artifact.width),
        "X-Emblemic-Height": str(artifact.height),
    }
    if artifact.warnings:
        headers["X-Emblemic-Warnings"] = _header_safe(" | ".join(artifact.warnings))
    return Response(content=artifact.data, media_type=artifact.media_type, headers=headers)
