"""Configuration management for voxrelay."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from voxrelay.models.completion import CompletionCandidate, CompletionProvider

GROQ_CHAT_URL = "https://api.groq.com/openai/v1/chat/completions"
HUGGINGFACE_INFERENCE_URL = "https://api-inference.huggingface.co/models"
ASSEMBLYAI_BASE_URL = "https://api.assemblyai.com/v2"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5000"]
    )

    # Upload ceilings
    max_audio_bytes: int = 10 * 1024 * 1024
    max_pdf_bytes: int = 10 * 1024 * 1024

    # Credentials
    groq_api_key: str | None = None
    huggingface_api_key: str | None = None
    assemblyai_api_key: str | None = None

    # Transcription
    transcription_backend: Literal["assemblyai", "huggingface"] = "assemblyai"
    assemblyai_base_url: str = ASSEMBLYAI_BASE_URL
    huggingface_base_url: str = HUGGINGFACE_INFERENCE_URL
    whisper_model: str = "openai/whisper-large-v3"
    max_wait_ms: int = Field(default=180_000, gt=0)
    poll_interval_ms: int = Field(default=1_000, gt=0)
    language_detection: bool = False
    request_timeout: float = 30.0

    # Completion
    groq_models: list[str] = Field(
        default_factory=lambda: ["llama-3.3-70b-versatile", "llama-3.1-8b-instant"]
    )
    huggingface_models: list[str] = Field(
        default_factory=lambda: ["mistralai/Mixtral-8x7B-Instruct-v0.1"]
    )
    completion_max_attempts: int = Field(default=3, gt=0)
    completion_backoff_base_ms: int = Field(default=1_000, ge=0)

    def completion_candidates(self) -> list[CompletionCandidate]:
        """Ordered completion candidates: Groq models first, then HuggingFace."""
        candidates = [
            CompletionCandidate(
                provider=CompletionProvider.GROQ,
                model=model,
                endpoint=GROQ_CHAT_URL,
            )
            for model in self.groq_models
        ]
        candidates.extend(
            CompletionCandidate(
                provider=CompletionProvider.HUGGINGFACE,
                model=model,
                endpoint=f"{self.huggingface_base_url.rstrip('/')}/{model}",
            )
            for model in self.huggingface_models
        )
        return candidates

    def api_key_for(self, provider: CompletionProvider) -> str | None:
        """Credential for a completion provider."""
        if provider is CompletionProvider.GROQ:
            return self.groq_api_key
        return self.huggingface_api_key


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Dependency that provides the global Settings instance."""
    return settings
