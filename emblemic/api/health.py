"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from emblemic import __version__
from emblemic.assets.glyphs import GlyphProvider
from emblemic.dependencies import get_glyph_provider
from emblemic.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(glyphs: GlyphProvider = Depends(get_glyph_provider)) -> HealthResponse:
    return HealthResponse(status="ok", version=__version__, glyphs_available=len(glyphs.names()))
