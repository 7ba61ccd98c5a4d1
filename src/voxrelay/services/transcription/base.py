"""Base interfaces for transcription backends."""

from collections.abc import Callable, Sequence
from typing import Any, Protocol, runtime_checkable

import httpx

from voxrelay.models.transcription import JobStatusReport, SourceAudio

# A strategy looks for transcript text in one response shape
ExtractionStrategy = Callable[[Any], str | None]


def _clean(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def direct_text(payload: Any) -> str | None:
    """``{"text": "..."}``"""
    if isinstance(payload, dict):
        return _clean(payload.get("text"))
    return None


def wrapped_transcription_text(payload: Any) -> str | None:
    """``[{"transcription_text": "..."}]``"""
    if isinstance(payload, list) and payload and isinstance(payload[0], dict):
        return _clean(payload[0].get("transcription_text"))
    return None


DEFAULT_STRATEGIES: tuple[ExtractionStrategy, ...] = (
    direct_text,
    wrapped_transcription_text,
)


def extract_transcript(
    payload: Any,
    strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES,
) -> str | None:
    """Apply extraction strategies in order; the first match wins.

    Args:
        payload: Decoded JSON response body.
        strategies: Ordered strategies to try.

    Returns:
        Transcript text, or None when no strategy matched.
    """
    for strategy in strategies:
        text = strategy(payload)
        if text is not None:
            return text
    return None


@runtime_checkable
class IJobTranscriptionBackend(Protocol):
    """Backend that transcribes through a remote job (upload, create, poll).

    Each method performs exactly one remote call on the client it is given
    and raises the matching ``TranscriptionError`` subclass on failure.
    """

    @property
    def name(self) -> str:
        """Backend name identifier."""
        ...

    async def upload(self, client: httpx.AsyncClient, audio: SourceAudio) -> str:
        """Upload raw audio and return the remote audio handle.

        Raises:
            UploadFailed: On network error, non-2xx, or a missing handle.
        """
        ...

    async def create_job(
        self,
        client: httpx.AsyncClient,
        audio_handle: str,
        language_detection: bool,
    ) -> str:
        """Create a transcription job and return its id.

        Raises:
            JobCreationFailed: On network error, non-2xx, or a missing id.
        """
        ...

    async def fetch_status(
        self, client: httpx.AsyncClient, job_id: str
    ) -> JobStatusReport:
        """Fetch the current job status.

        Raises:
            PollFailed: On network error or non-2xx.
        """
        ...


@runtime_checkable
class ISyncTranscriptionBackend(Protocol):
    """Backend that answers with the transcript in a single call."""

    @property
    def name(self) -> str:
        """Backend name identifier."""
        ...

    async def recognize(self, client: httpx.AsyncClient, audio: SourceAudio) -> Any:
        """Send raw audio and return the decoded response payload.

        Raises:
            UploadFailed: On network error or non-2xx.
        """
        ...


TranscriptionBackend = IJobTranscriptionBackend | ISyncTranscriptionBackend
