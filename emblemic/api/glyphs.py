"""GET /api/glyphs: glyph name search and markup."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from emblemic.assets.glyphs import GlyphProvider, glyph_svg, search_glyphs
from emblemic.dependencies import get_glyph_provider
from emblemic.models.responses import GlyphSearchResponse

router = APIRouter(prefix="/glyphs")


@router.get("", response_model=GlyphSearchResponse)
async def list_glyphs(q: str = "", glyphs: GlyphProvider = Depends(get_glyph_provider)) -> GlyphSearchResponse:
    return GlyphSearchResponse(query=q, names=search_glyphs(glyphs, q))


@router.get("/{name}")
async def get_glyph(
    name: str,
    color: str = "#ffffff",
    size: int = 24,
    glyphs: GlyphProvider = Depends(get_glyph_provider),
) -> Response:
    glyph = glyphs.lookup(name)
    if glyph is None:
        raise HTTPException(status_code=404, detail=f"Glyph {name!r} not found")
    return Response(content=glyph_svg(glyph, color, size), media_type="image/svg+xml")
