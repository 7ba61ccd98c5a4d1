"""Custom exceptions for voxrelay."""

from __future__ import annotations

from typing import Any


class VoxRelayError(Exception):
    """Base exception for voxrelay."""

    pass


class ConfigurationError(VoxRelayError):
    """A required setting (usually an API key) is missing or invalid."""

    pass


class PDFExtractionError(VoxRelayError):
    """PDF text extraction failed."""

    pass


class CompletionError(VoxRelayError):
    """Every completion candidate failed.

    Attributes:
        failures: Mapping of ``provider/model`` to its last error message.
    """

    def __init__(self, message: str, failures: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.failures = dict(failures or {})


# ------------------------------------------------------------------
# Transcription
# ------------------------------------------------------------------


class TranscriptionError(VoxRelayError):
    """Transcription failed.

    Subclasses name the phase or reason. ``http_status`` is the status the
    HTTP layer answers with.
    """

    kind = "TranscriptionError"
    http_status = 502

    def __init__(self, message: str, job_id: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.job_id = job_id

    def details(self) -> dict[str, Any]:
        """Context for an error response body."""
        return {"kind": self.kind, "job_id": self.job_id}


class UnsupportedMediaType(TranscriptionError):
    """Audio content type is not one the backends accept."""

    kind = "UnsupportedMediaType"
    http_status = 415

    def __init__(self, content_type: str | None) -> None:
        super().__init__(f"Unsupported audio content type: {content_type!r}")
        self.content_type = content_type

    def details(self) -> dict[str, Any]:
        return {**super().details(), "content_type": self.content_type}


class _RemoteCallFailed(TranscriptionError):
    """A single remote call returned non-2xx or could not be made."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        job_id: str | None = None,
    ) -> None:
        super().__init__(message, job_id=job_id)
        self.status_code = status_code

    def details(self) -> dict[str, Any]:
        return {**super().details(), "status_code": self.status_code}


class UploadFailed(_RemoteCallFailed):
    """Audio upload (or synchronous recognition) failed."""

    kind = "UploadFailed"


class JobCreationFailed(_RemoteCallFailed):
    """The remote service refused to create a transcription job."""

    kind = "JobCreationFailed"


class PollFailed(_RemoteCallFailed):
    """A status check failed while waiting for the job."""

    kind = "PollFailed"

    def __init__(
        self,
        cause: str,
        status_code: int | None = None,
        job_id: str | None = None,
    ) -> None:
        super().__init__(f"Status check failed: {cause}", status_code, job_id)
        self.cause = cause


class RemoteJobFailed(TranscriptionError):
    """The remote service reported the job as failed."""

    kind = "RemoteJobFailed"

    def __init__(self, reason: str, job_id: str | None = None) -> None:
        super().__init__(f"Transcription failed: {reason}", job_id=job_id)
        self.reason = reason

    def details(self) -> dict[str, Any]:
        return {**super().details(), "reason": self.reason}


class EmptyResult(TranscriptionError):
    """The job completed but the response carried no transcript text."""

    kind = "EmptyResult"

    def __init__(self, job_id: str | None = None) -> None:
        super().__init__("No transcription returned from API", job_id=job_id)


class TimedOut(TranscriptionError):
    """The local deadline passed before the job reached a terminal state."""

    kind = "TimedOut"
    http_status = 504

    def __init__(self, elapsed_ms: int, job_id: str | None = None) -> None:
        super().__init__(
            f"Transcription timed out after {elapsed_ms}ms", job_id=job_id
        )
        self.elapsed_ms = elapsed_ms

    def details(self) -> dict[str, Any]:
        return {**super().details(), "elapsed_ms": self.elapsed_ms}
