"""Transcription backends."""

from voxrelay.config import Settings
from voxrelay.errors import ConfigurationError
from voxrelay.services.transcription.base import TranscriptionBackend
from voxrelay.services.transcription.providers.assemblyai import AssemblyAIBackend
from voxrelay.services.transcription.providers.huggingface import (
    HuggingFaceWhisperBackend,
)

__all__ = ["AssemblyAIBackend", "HuggingFaceWhisperBackend", "build_backend"]


def build_backend(settings: Settings) -> TranscriptionBackend:
    """Create the backend selected by ``settings.transcription_backend``.

    Raises:
        ConfigurationError: If the selected backend has no API key.
    """
    if settings.transcription_backend == "huggingface":
        if not settings.huggingface_api_key:
            raise ConfigurationError(
                "HUGGINGFACE_API_KEY is not set; it is required for the "
                "huggingface transcription backend"
            )
        return HuggingFaceWhisperBackend(
            api_key=settings.huggingface_api_key,
            model=settings.whisper_model,
            base_url=settings.huggingface_base_url,
        )

    if not settings.assemblyai_api_key:
        raise ConfigurationError(
            "ASSEMBLYAI_API_KEY is not set; it is required for the "
            "assemblyai transcription backend"
        )
    return AssemblyAIBackend(
        api_key=settings.assemblyai_api_key,
        base_url=settings.assemblyai_base_url,
    )
