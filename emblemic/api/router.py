"""Master API router: mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from emblemic.api import designs, export, glyphs, health, presets, upload

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(export.router)
api_router.include_router(upload.router)
api_router.include_router(glyphs.router)
api_router.include_router(presets.router)
api_router.include_router(designs.router)
