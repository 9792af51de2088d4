"""API request models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from emblemic.models.document import Document


class ExportRequest(BaseModel):
    document: Document = Field(default_factory=Document, description="Design to render")
    format: str = Field(default="png", description="png, jpg, webp or svg")
    scope: Literal["full", "content"] = Field(
        default="full",
        description="full: background + content; content: content only, cropped",
    )
    name: str = Field(default="icon", description="Filename stem")
    size: int | None = Field(default=None, description="Output pixels; defaults to document.export_size")
    seed: int | None = Field(default=None, description="Noise seed override")


class UploadAnalyzeRequest(BaseModel):
    src: str = Field(..., description="Uploaded image as a data URI")
    file_name: str | None = None


class PresetApplyRequest(BaseModel):
    document: Document = Field(default_factory=Document)
    preset: str = Field(..., description="Preset name, case-insensitive")


class LegacyImportRequest(BaseModel):
    config: dict = Field(..., description="Flat legacy configuration object")


class DesignSaveRequest(BaseModel):
    name: str | None = None
    document: Document | None = None


class DocumentCommitRequest(BaseModel):
    document: Document
