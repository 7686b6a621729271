"""InsightGenerator — natural-language stack report from an Ollama-style endpoint."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

import httpx
import structlog

from stackscan.core.config import Settings
from stackscan.engines.dependency_scanner.models import DependencyFinding
from stackscan.engines.insight_generator.prompts import build_insight_prompt

log = structlog.get_logger("stackscan.engine")

NO_FINDINGS_MESSAGE = "No findings were detected for this project."
EMPTY_RESPONSE_MESSAGE = "LLM returned an empty response."
UNAVAILABLE_MESSAGE = "LLM analysis is currently unavailable. Please try again later."
DEGRADED_INSIGHT_MESSAGE = (
    "AI insights generation failed. The scan completed successfully, "
    "but LLM analysis is currently unavailable.\n\n"
    "This may be due to:\n"
    "- Ollama not running or not accessible\n"
    "- Model not downloaded (run: `ollama pull llama3.2`)\n"
    "- Network connectivity issues\n\n"
    "You can re-run the scan to try again once Ollama is ready."
)

_MAX_ATTEMPTS = 3
_RETRY_BASE_DELAY = 1.0  # seconds
_MIN_PREDICT_TOKENS = 128


class InsightGenerator:
    """Async client for ``POST {host}/api/generate`` with bounded retries.

    ``analyze()`` never raises for network trouble: after the last failed
    attempt it returns :data:`UNAVAILABLE_MESSAGE`. Task cancellation is not
    intercepted and aborts the call immediately.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = settings or Settings()
        self._model = settings.insight_model
        self._max_tokens = settings.insight_max_tokens
        self._endpoint = f"{settings.insight_host.rstrip('/')}/api/generate"
        self._timeout = settings.insight_timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=settings.insight_timeout)

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> InsightGenerator:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def analyze(
        self,
        project_name: str,
        project_path: str,
        findings: Sequence[DependencyFinding],
    ) -> str:
        """Return a markdown report for *findings*, or a fixed fallback message."""
        if not findings:
            return NO_FINDINGS_MESSAGE

        payload = self.build_payload(build_insight_prompt(project_name, project_path, findings))

        for attempt in range(1, _MAX_ATTEMPTS + 1):
            try:
                resp = await self._client.post(self._endpoint, json=payload, timeout=self._timeout)
                if resp.is_success:
                    body = resp.json()
                    text = body.get("response") if isinstance(body, dict) else None
                    content = text.strip() if isinstance(text, str) else ""
                    log.info(
                        "insight.generated",
                        project=project_name,
                        attempt=attempt,
                        chars=len(content),
                    )
                    return content or EMPTY_RESPONSE_MESSAGE

                log.warning(
                    "insight.attempt_failed",
                    project=project_name,
                    status=resp.status_code,
                    attempt=attempt,
                    max_attempts=_MAX_ATTEMPTS,
                )
            except (httpx.HTTPError, ValueError) as exc:
                log.warning(
                    "insight.attempt_failed",
                    project=project_name,
                    error=str(exc) or type(exc).__name__,
                    attempt=attempt,
                    max_attempts=_MAX_ATTEMPTS,
                )

            if attempt < _MAX_ATTEMPTS:
                await asyncio.sleep(_RETRY_BASE_DELAY * (2 ** (attempt - 1)))

        log.error("insight.unavailable", project=project_name, attempts=_MAX_ATTEMPTS)
        return UNAVAILABLE_MESSAGE

    def build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self._model,
            "prompt": prompt,
            "stream": False,
            "options": {"num_predict": max(_MIN_PREDICT_TOKENS, self._max_tokens)},
        }
