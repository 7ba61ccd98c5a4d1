"""AssemblyAI job-based transcription backend."""

import logging
from typing import Any

import httpx

from voxrelay.config import ASSEMBLYAI_BASE_URL
from voxrelay.errors import JobCreationFailed, PollFailed, UploadFailed
from voxrelay.models.transcription import JobState, JobStatusReport, SourceAudio

logger = logging.getLogger(__name__)

# AssemblyAI status → job state
_STATUS_MAP: dict[str, JobState] = {
    "queued": JobState.QUEUED,
    "processing": JobState.PROCESSING,
    "completed": JobState.COMPLETED,
    "error": JobState.FAILED,
}


def _json_object(response: httpx.Response) -> dict[str, Any]:
    """Decoded JSON object body, or an empty dict for anything else."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _error_message(response: httpx.Response) -> str:
    """Best-effort error text from an AssemblyAI error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.text


class AssemblyAIBackend:
    """Client for the AssemblyAI upload / transcript / status endpoints."""

    def __init__(self, api_key: str, base_url: str = ASSEMBLYAI_BASE_URL) -> None:
        """Initialize the backend.

        Args:
            api_key: AssemblyAI API key, sent as the ``authorization`` header.
            base_url: API base URL.
        """
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return "assemblyai"

    @property
    def _headers(self) -> dict[str, str]:
        return {"authorization": self._api_key}

    async def upload(self, client: httpx.AsyncClient, audio: SourceAudio) -> str:
        try:
            response = await client.post(
                f"{self.base_url}/upload",
                content=audio.data,
                headers={**self._headers, "content-type": audio.content_type.value},
            )
        except httpx.RequestError as e:
            raise UploadFailed(f"Failed to connect to AssemblyAI: {e}") from e

        if not response.is_success:
            raise UploadFailed(
                f"AssemblyAI upload failed: {_error_message(response)}",
                status_code=response.status_code,
            )

        upload_url = _json_object(response).get("upload_url")
        if not upload_url:
            raise UploadFailed(
                "AssemblyAI did not return an upload_url",
                status_code=response.status_code,
            )
        return upload_url

    async def create_job(
        self,
        client: httpx.AsyncClient,
        audio_handle: str,
        language_detection: bool,
    ) -> str:
        try:
            response = await client.post(
                f"{self.base_url}/transcript",
                json={
                    "audio_url": audio_handle,
                    "language_detection": language_detection,
                },
                headers=self._headers,
            )
        except httpx.RequestError as e:
            raise JobCreationFailed(f"Failed to connect to AssemblyAI: {e}") from e

        if not response.is_success:
            raise JobCreationFailed(
                f"AssemblyAI refused the transcript request: {_error_message(response)}",
                status_code=response.status_code,
            )

        job_id = _json_object(response).get("id")
        if not job_id:
            raise JobCreationFailed(
                "AssemblyAI did not return a transcript id",
                status_code=response.status_code,
            )
        return str(job_id)

    async def fetch_status(
        self, client: httpx.AsyncClient, job_id: str
    ) -> JobStatusReport:
        try:
            response = await client.get(
                f"{self.base_url}/transcript/{job_id}",
                headers=self._headers,
            )
        except httpx.RequestError as e:
            raise PollFailed(str(e), job_id=job_id) from e

        if not response.is_success:
            raise PollFailed(
                _error_message(response),
                status_code=response.status_code,
                job_id=job_id,
            )

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            raise PollFailed(
                "status response is not a JSON object",
                status_code=response.status_code,
                job_id=job_id,
            )

        status = data.get("status")
        if not isinstance(status, str):
            raise PollFailed(
                "status response has no status field",
                status_code=response.status_code,
                job_id=job_id,
            )

        state = _STATUS_MAP.get(status)
        if state is None:
            logger.warning(
                "AssemblyAI job %s reported unknown status '%s'", job_id, status
            )
            state = JobState.PROCESSING

        return JobStatusReport(
            state=state,
            payload=data,
            error=data.get("error") if state is JobState.FAILED else None,
            raw_status=status,
        )
