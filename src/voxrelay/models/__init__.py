"""Data models for voxrelay."""

from voxrelay.models.completion import (
    CompletionCandidate,
    CompletionProvider,
    CompletionResult,
)
from voxrelay.models.transcription import (
    AudioContentType,
    JobState,
    JobStatusReport,
    SourceAudio,
    TranscriptionJob,
    TranscriptionOptions,
    TranscriptionResult,
)

__all__ = [
    # Transcription
    "AudioContentType",
    "JobState",
    "JobStatusReport",
    "SourceAudio",
    "TranscriptionJob",
    "TranscriptionOptions",
    "TranscriptionResult",
    # Completion
    "CompletionCandidate",
    "CompletionProvider",
    "CompletionResult",
]
