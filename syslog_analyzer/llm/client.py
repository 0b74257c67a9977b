"""
Ollama API client wrapper.
"""

import logging
from typing import Optional

import httpx

from syslog_analyzer.config import get_settings
from syslog_analyzer.models.enrichment import EnrichmentConfig


logger = logging.getLogger(__name__)


class EnrichmentError(Exception):
    """The enrichment endpoint could not produce a usable reply."""


class OllamaClient:
    """
    Async client for the Ollama text generation API.

    Features:
    - Non-streaming `/api/generate` requests
    - Endpoint and model supplied per call, so configuration can change
      between requests
    - Transport, status and payload failures surfaced as EnrichmentError
    """

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        self.settings = get_settings()
        self.client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(
                self.settings.ollama_timeout_seconds,
                connect=self.settings.ollama_connect_timeout_seconds,
            ),
        )

    async def generate(self, prompt: str, config: EnrichmentConfig) -> str:
        """
        Send a prompt and return the model's reply text.

        Args:
            prompt: Full prompt text
            config: Endpoint and model to use

        Returns:
            The `response` field of the Ollama reply

        Raises:
            EnrichmentError: On connection failure, non-success status,
                or a reply without a text `response` field
        """
        url = f"{config.endpoint}/api/generate"
        payload = {
            "model": config.model,
            "prompt": prompt,
            "stream": False,
        }

        try:
            response = await self.client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise EnrichmentError(f"Failed to reach Ollama at {config.endpoint}: {e}") from e

        if not response.is_success:
            raise EnrichmentError(
                f"Ollama API error: {response.status_code} {response.reason_phrase}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise EnrichmentError(f"Failed to parse Ollama response as JSON: {e}") from e

        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise EnrichmentError("Ollama response has no 'response' text")

        return text

    async def health_check(self, config: EnrichmentConfig) -> bool:
        """Check if the Ollama server is reachable."""
        try:
            response = await self.client.get(f"{config.endpoint}/api/tags")
            return response.is_success
        except httpx.HTTPError as e:
            logger.debug("Ollama health check failed: %s", e)
            return False

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self.client.aclose()
