"""Tests for the insight generator — prompt rendering and retrying client."""

from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from stackscan.core.config import Settings
from stackscan.engines.insight_generator.generator import (
    EMPTY_RESPONSE_MESSAGE,
    NO_FINDINGS_MESSAGE,
    UNAVAILABLE_MESSAGE,
    InsightGenerator,
)
from stackscan.engines.insight_generator.prompts import build_insight_prompt


def _generator(handler, settings: Settings | None = None) -> InsightGenerator:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return InsightGenerator(settings or Settings(insight_host="http://ollama.test"), client)


class TestPrompt:
    def test_one_line_per_finding(self, make_finding):
        findings = [
            make_finding("react", version="18.2.0", latest_version="19.0.0"),
            make_finding("flask", version=None, source_file="api/requirements.txt", detector="pip"),
        ]
        prompt = build_insight_prompt("shop", "/srv/shop", findings)

        assert "Project: shop" in prompt
        assert "Path: /srv/shop" in prompt
        lines = [line[2:] for line in prompt.splitlines() if line.startswith("- {")]
        assert [json.loads(line) for line in lines] == [
            {
                "name": "react",
                "version": "18.2.0",
                "detector": "npm",
                "source": "package.json",
                "latest": "19.0.0",
            },
            {
                "name": "flask",
                "version": "unknown",
                "detector": "pip",
                "source": "api/requirements.txt",
            },
        ]

    def test_requests_all_report_sections(self, make_finding):
        prompt = build_insight_prompt("shop", "/srv/shop", [make_finding()])
        for section in (
            "Outdated dependencies",
            "Security concerns",
            "Compatibility issues",
            "upgrade paths",
            "health score",
        ):
            assert section in prompt


class TestInsightGenerator:
    @pytest.mark.asyncio
    async def test_success_first_attempt(self, make_finding):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"response": "  ## Report\nAll good.  \n"})

        async with _generator(handler) as gen:
            text = await gen.analyze("shop", "/srv/shop", [make_finding()])

        assert text == "## Report\nAll good."
        assert len(seen) == 1
        assert str(seen[0].url) == "http://ollama.test/api/generate"
        body = json.loads(seen[0].content)
        assert body["model"] == "llama3.2"
        assert body["stream"] is False
        assert body["options"] == {"num_predict": 1000}
        assert "react" in body["prompt"]

    @pytest.mark.asyncio
    async def test_success_on_second_attempt(self, make_finding):
        responses = iter([httpx.Response(500), httpx.Response(200, json={"response": "ok"})])

        with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            async with _generator(lambda request: next(responses)) as gen:
                text = await gen.analyze("shop", "/srv/shop", [make_finding()])

        assert text == "ok"
        mock_sleep.assert_awaited_once_with(1.0)

    @pytest.mark.asyncio
    async def test_exhausted_attempts_return_fallback(self, make_finding):
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            raise httpx.ConnectError("connection refused", request=request)

        with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            async with _generator(handler) as gen:
                text = await gen.analyze("shop", "/srv/shop", [make_finding()])

        assert text == UNAVAILABLE_MESSAGE
        assert calls == 3
        assert [c.args[0] for c in mock_sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_timeouts_are_retried(self, make_finding):
        responses = iter([
            httpx.ReadTimeout("slow"),
            httpx.ReadTimeout("slow"),
            httpx.Response(200, json={"response": "late but fine"}),
        ])

        def handler(request: httpx.Request) -> httpx.Response:
            item = next(responses)
            if isinstance(item, Exception):
                raise item
            return item

        with patch("asyncio.sleep", new_callable=AsyncMock):
            async with _generator(handler) as gen:
                text = await gen.analyze("shop", "/srv/shop", [make_finding()])

        assert text == "late but fine"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [{"response": ""}, {"response": "   \n"}, {"done": True}, ["unexpected"]],
    )
    async def test_empty_response(self, make_finding, body):
        async with _generator(lambda request: httpx.Response(200, json=body)) as gen:
            text = await gen.analyze("shop", "/srv/shop", [make_finding()])

        assert text == EMPTY_RESPONSE_MESSAGE

    @pytest.mark.asyncio
    async def test_no_findings_skips_network(self):
        def handler(request: httpx.Request) -> httpx.Response:
            pytest.fail("no request expected")

        async with _generator(handler) as gen:
            assert await gen.analyze("shop", "/srv/shop", []) == NO_FINDINGS_MESSAGE

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, make_finding):
        calls = 0
        started = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            started.set()
            await asyncio.Event().wait()
            return httpx.Response(200, json={"response": "never"})

        gen = _generator(handler)
        task = asyncio.create_task(gen.analyze("shop", "/srv/shop", [make_finding()]))
        await asyncio.wait_for(started.wait(), timeout=1.0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert calls == 1
        await gen.close()

    def test_num_predict_floor(self):
        gen = InsightGenerator(Settings(insight_max_tokens=50))
        assert gen.build_payload("p")["options"]["num_predict"] == 128
