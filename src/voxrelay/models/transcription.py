"""Transcription job domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from voxrelay.errors import UnsupportedMediaType

DEFAULT_MAX_WAIT_MS = 180_000
DEFAULT_POLL_INTERVAL_MS = 1_000


class AudioContentType(str, Enum):
    """Audio media types accepted by the transcription backends."""

    MPEG = "audio/mpeg"
    WAV = "audio/wav"
    OGG = "audio/ogg"

    @classmethod
    def parse(cls, value: str | None) -> AudioContentType:
        """Normalize a MIME string to a supported type.

        Parameters (``; codecs=...``) and case are ignored, and the aliases
        browsers commonly send are folded onto the canonical names.

        Raises:
            UnsupportedMediaType: If the value names no supported type.
        """
        if value is None:
            raise UnsupportedMediaType(value)
        mime = value.split(";", 1)[0].strip().lower()
        mime = _CONTENT_TYPE_ALIASES.get(mime, mime)
        try:
            return cls(mime)
        except ValueError:
            raise UnsupportedMediaType(value) from None


_CONTENT_TYPE_ALIASES: dict[str, str] = {
    "audio/mp3": "audio/mpeg",
    "audio/mpeg3": "audio/mpeg",
    "audio/x-mpeg-3": "audio/mpeg",
    "audio/x-wav": "audio/wav",
    "audio/wave": "audio/wav",
    "audio/vnd.wave": "audio/wav",
    "audio/x-ogg": "audio/ogg",
}

# Filename suffix → content type, for uploads sent as application/octet-stream
AUDIO_EXTENSIONS: dict[str, AudioContentType] = {
    ".mp3": AudioContentType.MPEG,
    ".wav": AudioContentType.WAV,
    ".ogg": AudioContentType.OGG,
}


class JobState(str, Enum):
    """State of a transcription job.

    QUEUED is entered once the remote service has assigned a job id.
    """

    CREATED = "created"
    UPLOADING = "uploading"
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset({JobState.COMPLETED, JobState.FAILED, JobState.TIMED_OUT})

_TRANSITIONS: dict[JobState, frozenset[JobState]] = {
    JobState.CREATED: frozenset({JobState.UPLOADING, JobState.FAILED}),
    # Synchronous backends complete straight from the upload
    JobState.UPLOADING: frozenset(
        {JobState.QUEUED, JobState.COMPLETED, JobState.FAILED}
    ),
    JobState.QUEUED: frozenset(
        {
            JobState.QUEUED,
            JobState.PROCESSING,
            JobState.COMPLETED,
            JobState.FAILED,
            JobState.TIMED_OUT,
        }
    ),
    JobState.PROCESSING: frozenset(
        {JobState.PROCESSING, JobState.COMPLETED, JobState.FAILED, JobState.TIMED_OUT}
    ),
    JobState.COMPLETED: frozenset(),
    JobState.FAILED: frozenset(),
    JobState.TIMED_OUT: frozenset(),
}


class TranscriptionOptions(BaseModel):
    """Per-call transcription options."""

    max_wait_ms: int = Field(default=DEFAULT_MAX_WAIT_MS, gt=0)
    poll_interval_ms: int = Field(default=DEFAULT_POLL_INTERVAL_MS, gt=0)
    language_detection: bool = False


class TranscriptionResult(BaseModel):
    """Final transcript of one ``transcribe`` call."""

    text: str = Field(..., description="Transcript text")
    backend: str = Field(..., description="Backend that produced the transcript")
    job_id: str | None = Field(default=None, description="Remote job id, if any")
    poll_count: int = Field(default=0, description="Status checks performed")
    elapsed_ms: int = Field(default=0)


@dataclass(frozen=True)
class SourceAudio:
    """Audio bytes submitted for transcription."""

    data: bytes
    content_type: AudioContentType

    def __post_init__(self) -> None:
        if not self.data:
            raise ValueError("audio data must not be empty")

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class JobStatusReport:
    """Backend-neutral view of one status poll."""

    state: JobState
    payload: Any = None
    error: str | None = None
    raw_status: str | None = None


@dataclass
class TranscriptionJob:
    """One remote transcription request, owned by a single ``transcribe`` call."""

    source_audio: SourceAudio
    max_wait_ms: int = DEFAULT_MAX_WAIT_MS
    id: str | None = None
    state: JobState = JobState.CREATED
    result_text: str | None = None
    error_detail: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    queued_at: datetime | None = None

    @property
    def deadline(self) -> datetime | None:
        """Wall-clock end of the wait window, which opens once the job is queued."""
        if self.queued_at is None:
            return None
        return self.queued_at + timedelta(milliseconds=self.max_wait_ms)

    def advance(self, new_state: JobState) -> None:
        """Move to ``new_state``.

        Raises:
            ValueError: If the transition is not allowed (e.g. leaving a
                terminal state).
        """
        if new_state not in _TRANSITIONS[self.state]:
            raise ValueError(
                f"Illegal job state transition: {self.state.value} -> {new_state.value}"
            )
        self.state = new_state
        if new_state is JobState.QUEUED and self.queued_at is None:
            self.queued_at = datetime.now(timezone.utc)

    def complete(self, text: str) -> None:
        self.advance(JobState.COMPLETED)
        self.result_text = text

    def fail(self, detail: str) -> None:
        self.advance(JobState.FAILED)
        self.error_detail = detail

    def time_out(self) -> None:
        self.advance(JobState.TIMED_OUT)
