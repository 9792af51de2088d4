"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from emblemic.models.document import Document


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    glyphs_available: int = 0


class CropSuggestionResponse(BaseModel):
    suggested: bool
    original_src: str
    cropped_src: str | None = None
    whitespace_ratio: float = 0.0
    box: tuple[int, int, int, int] | None = None


class GlyphSearchResponse(BaseModel):
    query: str = ""
    names: list[str] = Field(default_factory=list)


class PresetResponse(BaseModel):
    name: str
    kind: str
    solid_color: str
    gradient_start: str
    gradient_end: str
    gradient_angle: float


class FontResponse(BaseModel):
    name: str
    family: str


class DesignSummary(BaseModel):
    id: str
    name: str
    last_modified: float


class HistoryStateResponse(BaseModel):
    design_id: str
    document: Document
    can_undo: bool = False
    can_redo: bool = False
