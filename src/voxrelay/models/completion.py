"""Text completion models."""

from enum import Enum

from pydantic import BaseModel, Field


class CompletionProvider(str, Enum):
    """Remote text completion APIs."""

    GROQ = "groq"
    HUGGINGFACE = "huggingface"


class CompletionCandidate(BaseModel):
    """One ``(endpoint, model)`` pair to try for a completion."""

    provider: CompletionProvider
    model: str
    endpoint: str

    @property
    def label(self) -> str:
        return f"{self.provider.value}/{self.model}"


class CompletionResult(BaseModel):
    """Answer produced by a completion candidate."""

    text: str = Field(..., description="Generated answer")
    provider: CompletionProvider
    model: str
    attempts: int = Field(default=1, description="Attempts made on the winning candidate")
