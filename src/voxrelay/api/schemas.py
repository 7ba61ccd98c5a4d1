"""Request and response schemas for the voxrelay API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    status: str
    version: str


class PDFTextResponse(BaseModel):
    text: str


class AskRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str = Field(..., min_length=1, description="Question about the document")
    pdf_text: str = Field(
        ..., min_length=1, alias="pdfText", description="Extracted document text"
    )


class AskResponse(BaseModel):
    answer: str


class TranscriptResponse(BaseModel):
    text: str


class ErrorResponse(BaseModel):
    error: str
    details: dict[str, Any] | None = None
