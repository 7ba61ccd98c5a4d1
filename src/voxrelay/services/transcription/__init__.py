"""Transcription services."""

from voxrelay.services.transcription.base import (
    DEFAULT_STRATEGIES,
    IJobTranscriptionBackend,
    ISyncTranscriptionBackend,
    extract_transcript,
)
from voxrelay.services.transcription.providers import (
    AssemblyAIBackend,
    HuggingFaceWhisperBackend,
    build_backend,
)
from voxrelay.services.transcription.service import TranscriptionJobClient

__all__ = [
    "AssemblyAIBackend",
    "DEFAULT_STRATEGIES",
    "HuggingFaceWhisperBackend",
    "IJobTranscriptionBackend",
    "ISyncTranscriptionBackend",
    "TranscriptionJobClient",
    "build_backend",
    "extract_transcript",
]
