"""Tests for the HTTP routes."""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from voxrelay import __version__
from voxrelay.api.deps import get_completion_service, get_transcription_client
from voxrelay.config import Settings, get_settings
from voxrelay.main import create_app
from voxrelay.models.completion import CompletionCandidate, CompletionProvider
from voxrelay.services.completion import CompletionService
from voxrelay.services.transcription import (
    AssemblyAIBackend,
    HuggingFaceWhisperBackend,
    TranscriptionJobClient,
)

ASSEMBLYAI_URL = "https://assemblyai.test/v2"


def _settings(**overrides) -> Settings:
    values = {
        "assemblyai_api_key": "aai",
        "huggingface_api_key": None,
        "groq_api_key": None,
        "max_audio_bytes": 1024,
        "max_pdf_bytes": 4096,
        "max_wait_ms": 5_000,
        "poll_interval_ms": 10,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def app_factory():
    """Build an app with overridden settings and service dependencies."""

    def _make(settings: Settings | None = None, client=None, completion=None) -> TestClient:
        app = create_app(settings or _settings())
        app.dependency_overrides[get_settings] = lambda: settings or _settings()
        if client is not None:
            app.dependency_overrides[get_transcription_client] = lambda: client
        if completion is not None:
            app.dependency_overrides[get_completion_service] = lambda: completion
        return TestClient(app)

    return _make


def _whisper_client(handler) -> TranscriptionJobClient:
    backend = HuggingFaceWhisperBackend(api_key="hf", base_url="https://hf.test/models")
    return TranscriptionJobClient(backend, transport=httpx.MockTransport(handler))


class TestHealth:
    def test_health(self, app_factory) -> None:
        response = app_factory().get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": __version__}


class TestUploadAudio:
    def test_transcribes_upload(self, app_factory) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"text": "hello world"})

        client = app_factory(client=_whisper_client(handler))
        response = client.post(
            "/upload-audio",
            files={"audioFile": ("clip.wav", b"RIFFdata", "audio/wav")},
        )

        assert response.status_code == 200
        assert response.json() == {"text": "hello world"}
        assert seen[0].content == b"RIFFdata"

    def test_octet_stream_guessed_from_extension(self, app_factory) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"transcription_text": "guessed"}])

        client = app_factory(client=_whisper_client(handler))
        response = client.post(
            "/upload-audio",
            files={"audioFile": ("voice.mp3", b"ID3data", "application/octet-stream")},
        )

        assert response.status_code == 200
        assert seen[0].headers["content-type"] == "audio/mpeg"

    def test_missing_file(self, app_factory) -> None:
        client = app_factory(client=_whisper_client(lambda r: httpx.Response(500)))
        response = client.post(
            "/upload-audio", files={"other": ("a.txt", b"x", "text/plain")}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "No audio file uploaded"

    def test_too_large(self, app_factory) -> None:
        client = app_factory(client=_whisper_client(lambda r: httpx.Response(500)))
        response = client.post(
            "/upload-audio",
            files={"audioFile": ("big.wav", b"x" * 2048, "audio/wav")},
        )

        assert response.status_code == 413

    def test_unsupported_media_type(self, app_factory) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"text": "never"})

        client = app_factory(client=_whisper_client(handler))
        response = client.post(
            "/upload-audio",
            files={"audioFile": ("movie.mp4", b"data", "video/mp4")},
        )

        assert response.status_code == 415
        assert response.json()["details"]["kind"] == "UnsupportedMediaType"
        assert seen == []

    def test_remote_failure_is_bad_gateway(self, app_factory, assemblyai_api) -> None:
        fake = assemblyai_api([{"status": "error", "error": "corrupt audio"}])
        backend = AssemblyAIBackend(api_key="aai", base_url=ASSEMBLYAI_URL)
        client = app_factory(
            client=TranscriptionJobClient(backend, transport=fake.transport)
        )

        response = client.post(
            "/upload-audio",
            files={"audioFile": ("clip.ogg", b"OggS", "audio/ogg")},
        )

        assert response.status_code == 502
        body = response.json()
        assert body["details"]["kind"] == "RemoteJobFailed"
        assert body["details"]["reason"] == "corrupt audio"
        assert body["details"]["job_id"] == "job-1"

    def test_empty_result_is_bad_gateway(self, app_factory) -> None:
        client = app_factory(client=_whisper_client(lambda r: httpx.Response(200, json={})))
        response = client.post(
            "/upload-audio",
            files={"audioFile": ("clip.wav", b"RIFF", "audio/wav")},
        )

        assert response.status_code == 502
        assert response.json()["details"]["kind"] == "EmptyResult"

    def test_timeout_is_gateway_timeout(self, app_factory, assemblyai_api) -> None:
        fake = assemblyai_api([{"status": "processing"}])
        backend = AssemblyAIBackend(api_key="aai", base_url=ASSEMBLYAI_URL)
        settings = _settings(max_wait_ms=100, poll_interval_ms=20)
        client = app_factory(
            settings=settings,
            client=TranscriptionJobClient(backend, transport=fake.transport),
        )

        response = client.post(
            "/upload-audio",
            files={"audioFile": ("clip.wav", b"RIFF", "audio/wav")},
        )

        assert response.status_code == 504
        assert response.json()["details"]["kind"] == "TimedOut"

    def test_backend_not_configured(self, app_factory) -> None:
        client = app_factory(settings=_settings(assemblyai_api_key=None))
        response = client.post(
            "/upload-audio",
            files={"audioFile": ("clip.wav", b"RIFF", "audio/wav")},
        )

        assert response.status_code == 503
        assert "ASSEMBLYAI_API_KEY" in response.json()["error"]


class TestAskAI:
    @staticmethod
    def _completion(handler) -> CompletionService:
        candidate = CompletionCandidate(
            provider=CompletionProvider.GROQ,
            model="llama",
            endpoint="https://groq.test/chat/completions",
        )
        return CompletionService(
            candidates=[candidate],
            api_keys={CompletionProvider.GROQ: "g"},
            max_attempts=1,
            backoff_base_ms=0,
            transport=httpx.MockTransport(handler),
        )

    def test_answers_question(self, app_factory) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"choices": [{"message": {"content": "Paris"}}]})

        client = app_factory(completion=self._completion(handler))
        response = client.post(
            "/ask-ai",
            json={"question": "Capital of France?", "pdfText": "France's capital is Paris."},
        )

        assert response.status_code == 200
        assert response.json() == {"answer": "Paris"}

    def test_missing_fields(self, app_factory) -> None:
        client = app_factory(completion=self._completion(lambda r: httpx.Response(500)))
        response = client.post("/ask-ai", json={"question": "Why?"})

        assert response.status_code == 422

    def test_empty_question(self, app_factory) -> None:
        client = app_factory(completion=self._completion(lambda r: httpx.Response(500)))
        response = client.post("/ask-ai", json={"question": "", "pdfText": "text"})

        assert response.status_code == 422

    def test_all_candidates_failed(self, app_factory) -> None:
        client = app_factory(completion=self._completion(lambda r: httpx.Response(500)))
        response = client.post("/ask-ai", json={"question": "q", "pdfText": "t"})

        assert response.status_code == 502
        body = response.json()
        assert body["error"] == "Failed to process AI request"
        assert "groq/llama" in body["details"]["failures"]

    def test_no_provider_configured(self, app_factory) -> None:
        client = app_factory()
        response = client.post("/ask-ai", json={"question": "q", "pdfText": "t"})

        assert response.status_code == 503


class TestUploadPdf:
    def test_extracts_text(self, app_factory, make_pdf) -> None:
        response = app_factory().post(
            "/upload-pdf",
            files={"pdfFile": ("doc.pdf", make_pdf("Quarterly report"), "application/pdf")},
        )

        assert response.status_code == 200
        assert "Quarterly report" in response.json()["text"]

    def test_missing_file(self, app_factory) -> None:
        response = app_factory().post(
            "/upload-pdf", files={"other": ("a.txt", b"x", "text/plain")}
        )
        assert response.status_code == 400

    def test_empty_file(self, app_factory) -> None:
        response = app_factory().post(
            "/upload-pdf", files={"pdfFile": ("doc.pdf", b"", "application/pdf")}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Uploaded PDF is empty"

    def test_not_a_pdf(self, app_factory) -> None:
        response = app_factory().post(
            "/upload-pdf", files={"pdfFile": ("doc.pdf", b"hello", "application/pdf")}
        )
        assert response.status_code == 415

    def test_too_large(self, app_factory) -> None:
        response = app_factory().post(
            "/upload-pdf",
            files={"pdfFile": ("doc.pdf", b"%PDF-" + b"x" * 5000, "application/pdf")},
        )
        assert response.status_code == 413

    def test_unreadable(self, app_factory) -> None:
        response = app_factory().post(
            "/upload-pdf",
            files={"pdfFile": ("doc.pdf", b"%PDF-1.4\nbroken", "application/pdf")},
        )
        assert response.status_code == 422
        assert "Failed to read PDF" in response.json()["error"]
