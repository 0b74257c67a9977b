"""
Tests for the Ollama client and entry enrichment.
"""

import json

import httpx
import pytest

from syslog_analyzer.llm.analyzer import EnrichmentClient
from syslog_analyzer.llm.client import OllamaClient, EnrichmentError
from syslog_analyzer.llm.prompts import PromptTemplates
from syslog_analyzer.models.log_entry import Category, Severity
from syslog_analyzer.parsers.classifier import classify_line

from conftest import FAILED_SSH_LINE


GOOD_REPLY = (
    "Category: security\n"
    "Severity: critical\n"
    "Analysis: Brute force login attempt against root from a public address.\n"
)


def create_client(handler) -> OllamaClient:
    """Helper to build a client backed by a mock transport."""
    return OllamaClient(http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def reply_with(text: str):
    """Handler returning a successful Ollama reply."""
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"model": "llama3.2", "response": text, "done": True})
    return handler


class TestPromptTemplates:
    """Tests for the enrichment prompt."""

    def test_message_is_embedded(self):
        prompt = PromptTemplates.format_entry_prompt(FAILED_SSH_LINE)
        assert f"Log: {FAILED_SSH_LINE}" in prompt
        assert "Category: [security/system-failure/network/other]" in prompt

    def test_braces_in_message(self):
        prompt = PromptTemplates.format_entry_prompt('payload {"user": "root"}')
        assert '{"user": "root"}' in prompt


class TestOllamaClient:
    """Tests for OllamaClient."""

    @pytest.mark.asyncio
    async def test_generate_request_shape(self, config):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"response": "ok"})

        client = create_client(handler)
        text = await client.generate("hello", config)

        assert text == "ok"
        assert seen["method"] == "POST"
        assert seen["url"] == "http://ollama.test:11434/api/generate"
        assert seen["body"] == {"model": "llama3.2", "prompt": "hello", "stream": False}

    @pytest.mark.asyncio
    async def test_non_success_status(self, config):
        client = create_client(lambda request: httpx.Response(404))

        with pytest.raises(EnrichmentError, match="404"):
            await client.generate("hello", config)

    @pytest.mark.asyncio
    async def test_connection_error(self, config):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = create_client(handler)

        with pytest.raises(EnrichmentError, match="Failed to reach Ollama"):
            await client.generate("hello", config)

    @pytest.mark.asyncio
    async def test_missing_response_field(self, config):
        client = create_client(lambda request: httpx.Response(200, json={"error": "model not found"}))

        with pytest.raises(EnrichmentError):
            await client.generate("hello", config)

    @pytest.mark.asyncio
    async def test_invalid_json(self, config):
        client = create_client(lambda request: httpx.Response(200, text="<html>proxy</html>"))

        with pytest.raises(EnrichmentError, match="JSON"):
            await client.generate("hello", config)

    @pytest.mark.asyncio
    async def test_health_check(self, config):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/tags"
            return httpx.Response(200, json={"models": []})

        assert await create_client(handler).health_check(config) is True

    @pytest.mark.asyncio
    async def test_health_check_unreachable(self, config):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        assert await create_client(handler).health_check(config) is False


class TestEnrichmentClient:
    """Tests for EnrichmentClient.analyze."""

    def setup_method(self):
        self.entry = classify_line(FAILED_SSH_LINE)

    @pytest.mark.asyncio
    async def test_parses_labeled_fields(self, config):
        analyzer = EnrichmentClient(create_client(reply_with(GOOD_REPLY)))

        result = await analyzer.analyze(self.entry, config)

        assert result.id == self.entry.id
        assert result.category == Category.SECURITY
        assert result.severity == Severity.CRITICAL
        assert result.ai_analysis == "Brute force login attempt against root from a public address."

    @pytest.mark.asyncio
    async def test_fields_are_case_insensitive(self, config):
        reply = "CATEGORY: System-Failure\nseverity: WARNING\nanalysis: Disk is filling up"
        analyzer = EnrichmentClient(create_client(reply_with(reply)))

        result = await analyzer.analyze(self.entry, config)

        assert result.category == Category.SYSTEM_FAILURE
        assert result.severity == Severity.WARNING
        assert result.ai_analysis == "Disk is filling up"

    @pytest.mark.asyncio
    async def test_bracketed_values(self, config):
        reply = "Category: [network]\nSeverity: [info]\nAnalysis: Client roamed"
        analyzer = EnrichmentClient(create_client(reply_with(reply)))

        result = await analyzer.analyze(self.entry, config)

        assert result.category == Category.NETWORK
        assert result.severity == Severity.INFO

    @pytest.mark.asyncio
    async def test_unlabeled_reply_falls_back_to_raw_text(self, config):
        reply = "This looks like someone guessing passwords. " * 10
        analyzer = EnrichmentClient(create_client(reply_with(reply)))

        result = await analyzer.analyze(self.entry, config)

        assert result.category is None
        assert result.severity == Severity.CRITICAL
        assert result.ai_analysis == reply[:200]

    @pytest.mark.asyncio
    async def test_unknown_values_keep_prior(self, config):
        reply = "Category: banana\nSeverity: high\nAnalysis: Odd answer"
        entry = self.entry.model_copy(update={"category": Category.OTHER})
        analyzer = EnrichmentClient(create_client(reply_with(reply)))

        result = await analyzer.analyze(entry, config)

        assert result.category == Category.OTHER
        assert result.severity == Severity.CRITICAL
        assert result.ai_analysis == "Odd answer"

    @pytest.mark.asyncio
    async def test_transport_failure_is_annotated(self, config):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        analyzer = EnrichmentClient(create_client(handler))

        result = await analyzer.analyze(self.entry, config)

        assert result.ai_analysis.startswith("Error:")
        assert result.severity == self.entry.severity
        assert result.category == self.entry.category

    @pytest.mark.asyncio
    async def test_server_error_is_annotated(self, config):
        analyzer = EnrichmentClient(create_client(lambda request: httpx.Response(500)))

        result = await analyzer.analyze(self.entry, config)

        assert result.ai_analysis == "Error: Ollama API error: 500 Internal Server Error"

    @pytest.mark.asyncio
    async def test_unexpected_failure_never_escapes(self, config):
        class ExplodingClient:
            async def generate(self, prompt, config):
                raise RuntimeError("kaboom")

        analyzer = EnrichmentClient(ExplodingClient())

        result = await analyzer.analyze(self.entry, config)

        assert result.ai_analysis == "Error: kaboom"
