"""Transcription job client."""

import asyncio
import logging

import httpx

from voxrelay.errors import EmptyResult, RemoteJobFailed, TimedOut, TranscriptionError
from voxrelay.models.transcription import (
    AudioContentType,
    JobState,
    SourceAudio,
    TranscriptionJob,
    TranscriptionOptions,
    TranscriptionResult,
)
from voxrelay.services.transcription.base import (
    IJobTranscriptionBackend,
    TranscriptionBackend,
    extract_transcript,
)

logger = logging.getLogger(__name__)


class TranscriptionJobClient:
    """Drives one remote transcription to a transcript or a definitive failure.

    Job-based backends go through upload, job creation and a serial poll
    loop; synchronous backends answer in a single call. Every call opens its
    own HTTP client, so concurrent calls share no state.
    """

    def __init__(
        self,
        backend: TranscriptionBackend,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            backend: Remote transcription backend.
            timeout: Per-request HTTP timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.backend = backend
        self.timeout = timeout
        self._transport = transport

    async def transcribe(
        self,
        audio_bytes: bytes,
        content_type: str | None,
        options: TranscriptionOptions | None = None,
    ) -> TranscriptionResult:
        """Transcribe raw audio.

        Args:
            audio_bytes: Non-empty audio data.
            content_type: Audio MIME type (mpeg, wav or ogg).
            options: Wait and polling options; defaults when omitted.

        Returns:
            TranscriptionResult with the transcript text.

        Raises:
            UnsupportedMediaType: Before any network call, for other types.
            ValueError: If ``audio_bytes`` is empty.
            TranscriptionError: The subclass naming the failed phase.
        """
        media_type = AudioContentType.parse(content_type)
        options = options or TranscriptionOptions()
        job = TranscriptionJob(
            source_audio=SourceAudio(data=audio_bytes, content_type=media_type),
            max_wait_ms=options.max_wait_ms,
        )

        loop = asyncio.get_running_loop()
        started = loop.time()

        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport
        ) as client:
            try:
                if isinstance(self.backend, IJobTranscriptionBackend):
                    polls = await self._run_job(client, job, options)
                else:
                    polls = await self._run_sync(client, job)
            except TranscriptionError as e:
                if not job.state.is_terminal:
                    job.fail(e.message)
                logger.warning(
                    "Transcription via '%s' failed (%s): %s",
                    self.backend.name,
                    e.kind,
                    e.message,
                )
                raise

        return TranscriptionResult(
            text=job.result_text or "",
            backend=self.backend.name,
            job_id=job.id,
            poll_count=polls,
            elapsed_ms=int((loop.time() - started) * 1000),
        )

    async def _run_sync(self, client: httpx.AsyncClient, job: TranscriptionJob) -> int:
        job.advance(JobState.UPLOADING)
        logger.info(
            "Sending %d bytes (%s) to '%s'",
            job.source_audio.size,
            job.source_audio.content_type.value,
            self.backend.name,
        )
        payload = await self.backend.recognize(client, job.source_audio)

        text = extract_transcript(payload)
        if text is None:
            raise EmptyResult()
        job.complete(text)
        return 0

    async def _run_job(
        self,
        client: httpx.AsyncClient,
        job: TranscriptionJob,
        options: TranscriptionOptions,
    ) -> int:
        backend = self.backend

        job.advance(JobState.UPLOADING)
        audio_handle = await backend.upload(client, job.source_audio)
        logger.info(
            "Uploaded %d bytes (%s) to '%s'",
            job.source_audio.size,
            job.source_audio.content_type.value,
            backend.name,
        )

        job.id = await backend.create_job(
            client, audio_handle, options.language_detection
        )
        job.advance(JobState.QUEUED)
        logger.info("Created transcription job %s on '%s'", job.id, backend.name)

        return await self._poll_until_complete(client, job, options)

    async def _poll_until_complete(
        self,
        client: httpx.AsyncClient,
        job: TranscriptionJob,
        options: TranscriptionOptions,
    ) -> int:
        """Poll the job until it reaches a terminal state.

        Returns:
            Number of status checks performed.
        """
        loop = asyncio.get_running_loop()
        start_time = loop.time()
        max_wait = options.max_wait_ms / 1000
        interval = options.poll_interval_ms / 1000
        polls = 0

        while True:
            elapsed = loop.time() - start_time
            if elapsed >= max_wait:
                job.time_out()
                raise TimedOut(int(elapsed * 1000), job_id=job.id)

            await asyncio.sleep(min(interval, max_wait - elapsed))

            report = await self.backend.fetch_status(client, job.id)
            polls += 1
            logger.debug(
                "Job %s poll #%d: %s", job.id, polls, report.raw_status or report.state.value
            )

            if report.state is JobState.COMPLETED:
                text = extract_transcript(report.payload)
                if text is None:
                    raise EmptyResult(job_id=job.id)
                job.complete(text)
                logger.info("Job %s completed after %d poll(s)", job.id, polls)
                return polls

            if report.state is JobState.FAILED:
                raise RemoteJobFailed(report.error or "Unknown error", job_id=job.id)

            if report.state is JobState.PROCESSING:
                job.advance(JobState.PROCESSING)
