"""FastAPI dependencies."""

from __future__ import annotations

from fastapi import Depends

from voxrelay.config import Settings, get_settings
from voxrelay.models.transcription import TranscriptionOptions
from voxrelay.services.completion import CompletionService
from voxrelay.services.transcription import TranscriptionJobClient, build_backend


def get_transcription_client(
    settings: Settings = Depends(get_settings),
) -> TranscriptionJobClient:
    """Client for the configured transcription backend.

    Raises ConfigurationError when the backend's API key is missing.
    """
    return TranscriptionJobClient(
        build_backend(settings), timeout=settings.request_timeout
    )


def get_transcription_options(
    settings: Settings = Depends(get_settings),
) -> TranscriptionOptions:
    return TranscriptionOptions(
        max_wait_ms=settings.max_wait_ms,
        poll_interval_ms=settings.poll_interval_ms,
        language_detection=settings.language_detection,
    )


def get_completion_service(
    settings: Settings = Depends(get_settings),
) -> CompletionService:
    return CompletionService.from_settings(settings)
