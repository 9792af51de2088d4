"""Background presets and font options."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from emblemic.constants import FONTS, PRESETS, get_preset
from emblemic.engine.mutations import apply_preset
from emblemic.models.document import Document
from emblemic.models.requests import PresetApplyRequest
from emblemic.models.responses import FontResponse, PresetResponse

router = APIRouter()


@router.get("/presets", response_model=list[PresetResponse])
async def list_presets() -> list[PresetResponse]:
    return [
        PresetResponse(
            name=p.name,
            kind=p.kind,
            solid_color=p.solid_color,
            gradient_start=p.gradient_start,
            gradient_end=p.gradient_end,
            gradient_angle=p.gradient_angle,
        )
        for p in PRESETS
    ]


@router.post("/presets/apply", response_model=Document)
async def apply(req: PresetApplyRequest) -> Document:
    if get_preset(req.preset) is None:
        raise HTTPException(status_code=404, detail=f"Unknown preset {req.preset!r}")
    return apply_preset(req.document, req.preset)


@router.get("/fonts", response_model=list[FontResponse])
async def list_fonts() -> list[FontResponse]:
    return [FontResponse(name=f.name, family=f.family) for f in FONTS]
