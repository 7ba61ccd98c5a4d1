"""PDF upload endpoint."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from voxrelay.api.schemas import PDFTextResponse
from voxrelay.config import Settings, get_settings
from voxrelay.services.pdf import extract_pdf_text, is_pdf

router = APIRouter(tags=["documents"])


@router.post("/upload-pdf", response_model=PDFTextResponse)
async def upload_pdf(
    pdf_file: UploadFile | None = File(None, alias="pdfFile"),
    settings: Settings = Depends(get_settings),
) -> PDFTextResponse:
    if pdf_file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    data = await pdf_file.read(settings.max_pdf_bytes + 1)
    if len(data) > settings.max_pdf_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"PDF exceeds the {settings.max_pdf_bytes} byte limit",
        )
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded PDF is empty")
    if not is_pdf(data):
        raise HTTPException(status_code=415, detail="Uploaded file is not a PDF")

    # pypdf is CPU-bound
    text = await asyncio.to_thread(extract_pdf_text, data)
    return PDFTextResponse(text=text)
