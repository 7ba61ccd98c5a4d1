"""Question answering over PDF text through remote completion APIs."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from voxrelay.config import Settings
from voxrelay.errors import CompletionError, ConfigurationError
from voxrelay.models.completion import (
    CompletionCandidate,
    CompletionProvider,
    CompletionResult,
)

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = frozenset({408, 429})


def build_prompt(question: str, context: str) -> str:
    """Combine the document text and the question into a single prompt."""
    return f"Based on this context: {context}\n\nAnswer this question: {question}"


class _CandidateFailed(Exception):
    def __init__(self, message: str, retryable: bool) -> None:
        super().__init__(message)
        self.retryable = retryable


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, _CandidateFailed) and exc.retryable


class CompletionService:
    """Tries an ordered list of ``(endpoint, model)`` candidates.

    Each candidate gets up to ``max_attempts`` attempts. Network errors,
    408/429 and 5xx responses are retried with exponential backoff; any other
    failure moves on to the next candidate. Candidates without an API key
    are skipped.
    """

    def __init__(
        self,
        candidates: list[CompletionCandidate],
        api_keys: dict[CompletionProvider, str | None],
        max_attempts: int = 3,
        backoff_base_ms: int = 1_000,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._candidates = list(candidates)
        self._api_keys = dict(api_keys)
        self.max_attempts = max_attempts
        self.backoff_base_ms = backoff_base_ms
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> CompletionService:
        return cls(
            candidates=settings.completion_candidates(),
            api_keys={p: settings.api_key_for(p) for p in CompletionProvider},
            max_attempts=settings.completion_max_attempts,
            backoff_base_ms=settings.completion_backoff_base_ms,
            timeout=settings.request_timeout,
            transport=transport,
        )

    @property
    def usable_candidates(self) -> list[CompletionCandidate]:
        return [c for c in self._candidates if self._api_keys.get(c.provider)]

    async def answer(self, question: str, context: str) -> CompletionResult:
        """Answer ``question`` using ``context`` as the source document.

        Raises:
            ConfigurationError: If no candidate has an API key.
            CompletionError: If every candidate failed.
        """
        candidates = self.usable_candidates
        if not candidates:
            raise ConfigurationError(
                "No completion provider configured "
                "(set GROQ_API_KEY or HUGGINGFACE_API_KEY)."
            )

        prompt = build_prompt(question, context)
        failures: dict[str, str] = {}

        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport
        ) as client:
            for candidate in candidates:
                api_key = self._api_keys[candidate.provider]
                try:
                    async for attempt in self._retrying(candidate):
                        with attempt:
                            text = await self._complete(
                                client, candidate, api_key, prompt
                            )
                except _CandidateFailed as e:
                    failures[candidate.label] = str(e)
                    logger.warning(
                        "Completion candidate '%s' failed: %s", candidate.label, e
                    )
                    continue

                logger.info("Answered with '%s'", candidate.label)
                return CompletionResult(
                    text=text,
                    provider=candidate.provider,
                    model=candidate.model,
                    attempts=attempt.retry_state.attempt_number,
                )

        details = "; ".join(f"{label}: {msg}" for label, msg in failures.items())
        raise CompletionError(
            f"All completion candidates failed. Details: {details}",
            failures=failures,
        )

    def _retrying(self, candidate: CompletionCandidate) -> AsyncRetrying:
        """Exponential backoff for one candidate: base, 2x base, 4x base, ..."""

        def log_retry(retry_state: RetryCallState) -> None:
            logger.info(
                "Retrying '%s' in %.2fs (attempt %d/%d): %s",
                candidate.label,
                retry_state.next_action.sleep,
                retry_state.attempt_number + 1,
                self.max_attempts,
                retry_state.outcome.exception(),
            )

        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_base_ms / 1000),
            retry=retry_if_exception(_is_retryable),
            before_sleep=log_retry,
            reraise=True,
        )

    async def _complete(
        self,
        client: httpx.AsyncClient,
        candidate: CompletionCandidate,
        api_key: str,
        prompt: str,
    ) -> str:
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        if candidate.provider is CompletionProvider.GROQ:
            body: dict[str, Any] = {
                "model": candidate.model,
                "messages": [{"role": "user", "content": prompt}],
            }
        else:
            body = {"inputs": prompt}

        try:
            response = await client.post(candidate.endpoint, json=body, headers=headers)
        except httpx.RequestError as e:
            raise _CandidateFailed(f"request error: {e}", retryable=True) from e

        if not response.is_success:
            retryable = (
                response.status_code in _RETRYABLE_STATUS
                or response.status_code >= 500
            )
            raise _CandidateFailed(
                f"HTTP {response.status_code}: {response.text[:200]}",
                retryable=retryable,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise _CandidateFailed("response is not JSON", retryable=False) from e

        text = _extract_answer(candidate.provider, payload)
        if not text:
            raise _CandidateFailed("no answer generated", retryable=False)
        return text


def _extract_answer(provider: CompletionProvider, payload: Any) -> str | None:
    """Pull the generated text out of a provider response."""
    if provider is CompletionProvider.GROQ:
        try:
            content = payload["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return None
    else:
        if not (isinstance(payload, list) and payload and isinstance(payload[0], dict)):
            return None
        content = payload[0].get("generated_text")

    if isinstance(content, str) and content.strip():
        return content.strip()
    return None
