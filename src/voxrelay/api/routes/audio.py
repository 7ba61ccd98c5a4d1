"""Audio transcription endpoint."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from voxrelay.api.deps import get_transcription_client, get_transcription_options
from voxrelay.api.schemas import TranscriptResponse
from voxrelay.config import Settings, get_settings
from voxrelay.models.transcription import AUDIO_EXTENSIONS, TranscriptionOptions
from voxrelay.services.transcription import TranscriptionJobClient

router = APIRouter(tags=["audio"])

_GENERIC_CONTENT_TYPES = {"", "application/octet-stream"}


def resolve_content_type(upload: UploadFile) -> str | None:
    """Declared content type, or one guessed from the filename suffix."""
    declared = (upload.content_type or "").split(";", 1)[0].strip().lower()
    if declared not in _GENERIC_CONTENT_TYPES:
        return declared

    suffix = Path(upload.filename or "").suffix.lower()
    guessed = AUDIO_EXTENSIONS.get(suffix)
    return guessed.value if guessed else upload.content_type


@router.post("/upload-audio", response_model=TranscriptResponse)
async def upload_audio(
    audio_file: UploadFile | None = File(None, alias="audioFile"),
    settings: Settings = Depends(get_settings),
    options: TranscriptionOptions = Depends(get_transcription_options),
    client: TranscriptionJobClient = Depends(get_transcription_client),
) -> TranscriptResponse:
    if audio_file is None:
        raise HTTPException(status_code=400, detail="No audio file uploaded")

    data = await audio_file.read(settings.max_audio_bytes + 1)
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded audio file is empty")
    if len(data) > settings.max_audio_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Audio exceeds the {settings.max_audio_bytes} byte limit",
        )

    result = await client.transcribe(data, resolve_content_type(audio_file), options)
    return TranscriptResponse(text=result.text)
