"""HuggingFace Whisper inference backend."""

from typing import Any

import httpx

from voxrelay.config import HUGGINGFACE_INFERENCE_URL
from voxrelay.errors import UploadFailed
from voxrelay.models.transcription import SourceAudio


class HuggingFaceWhisperBackend:
    """Synchronous Whisper inference through the HuggingFace Inference API.

    The endpoint answers with the transcript directly, so there is no job
    to create or poll.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "openai/whisper-large-v3",
        base_url: str = HUGGINGFACE_INFERENCE_URL,
    ) -> None:
        self._api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return f"huggingface-{self.model.rsplit('/', 1)[-1]}"

    async def recognize(self, client: httpx.AsyncClient, audio: SourceAudio) -> Any:
        try:
            response = await client.post(
                f"{self.base_url}/{self.model}",
                content=audio.data,
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": audio.content_type.value,
                },
            )
        except httpx.RequestError as e:
            raise UploadFailed(f"Failed to connect to HuggingFace: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.is_success:
            message = response.text
            # HF reports e.g. {"error": "Model ... is currently loading"}
            if isinstance(payload, dict) and payload.get("error"):
                message = str(payload["error"])
            raise UploadFailed(
                f"HuggingFace inference failed: {message}",
                status_code=response.status_code,
            )

        return payload
