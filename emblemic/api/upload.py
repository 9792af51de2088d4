"""POST /api/upload/*: whitespace analysis for uploaded images."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from emblemic.engine.whitespace import analyze_upload
from emblemic.errors import AssetDecodeError
from emblemic.models.requests import UploadAnalyzeRequest
from emblemic.models.responses import CropSuggestionResponse

router = APIRouter(prefix="/upload")


@router.post("/analyze", response_model=CropSuggestionResponse)
def analyze(req: UploadAnalyzeRequest) -> CropSuggestionResponse:
    try:
        suggestion = analyze_upload(req.src, req.file_name)
    except AssetDecodeError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    if suggestion is None:
        return CropSuggestionResponse(suggested=False, original_src=req.src)
    return CropSuggestionResponse(
        suggested=True,
        original_src=suggestion.original_src,
        cropped_src=suggestion.cropped_src,
        whitespace_ratio=round(suggestion.whitespace_ratio, 4),
        box=suggestion.box,
    )
