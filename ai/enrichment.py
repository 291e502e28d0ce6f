"""Query enrichment through a hosted text-generation model.

Sparse queries ("x", "help") are expanded into descriptive text, from
which keywords are extracted again. A single attempt is made per call;
any failure surfaces as ``EnrichmentError``.
"""
from __future__ import annotations

import logging
from typing import Protocol

import httpx

from mentorsearch.config import EnrichmentSettings, settings

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    'Based on the search query "{query}", extract relevant keywords that '
    "represent key skills and characteristics a mentor should have."
)


class EnrichmentError(Exception):
    """Raised when the enrichment service cannot produce text."""
    pass


class KeywordEnricher(Protocol):
    """Anything that turns a query into descriptive text."""

    async def enrich(self, query: str) -> str:
        ...


def build_prompt(query: str) -> str:
    """Embed the query in the generation instruction."""
    return PROMPT_TEMPLATE.format(query=query)


def parse_generated_text(data: object) -> str:
    """Pull the generated text out of an inference API response body.

    The body is expected to be a list whose first item carries a
    non-empty ``generated_text`` string.

    Raises:
        EnrichmentError: If the body has any other shape
    """
    if not isinstance(data, list) or not data:
        raise EnrichmentError("Invalid enrichment response: expected a non-empty list")

    first = data[0]
    text = first.get("generated_text") if isinstance(first, dict) else None
    if not isinstance(text, str) or not text.strip():
        raise EnrichmentError("Invalid enrichment response: missing generated_text")

    return text


class HuggingFaceEnrichmentClient:
    """Client for the Hugging Face inference API.

    Sends the query wrapped in an instruction and returns the generated
    continuation. No retries, no caching.
    """

    def __init__(
        self,
        config: EnrichmentSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Enrichment settings (uses global settings if None)
            client: Optional shared HTTP client, mainly for tests
        """
        self.config = config or settings.enrichment
        self._client = client

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

    def _payload(self, query: str) -> dict:
        return {
            "inputs": build_prompt(query),
            "parameters": {
                "max_length": self.config.max_length,
                "num_return_sequences": self.config.num_return_sequences,
            },
        }

    async def _post(self, client: httpx.AsyncClient, query: str) -> httpx.Response:
        return await client.post(
            self.config.api_url,
            headers=self._headers(),
            json=self._payload(query),
            timeout=self.config.timeout_seconds,
        )

    async def enrich(self, query: str) -> str:
        """Generate descriptive text for a query.

        Args:
            query: Normalized user query

        Returns:
            Generated text

        Raises:
            EnrichmentError: On missing credential, network failure,
                non-2xx status, or a malformed/empty body
        """
        if not self.config.api_key:
            raise EnrichmentError("Enrichment API key is not configured")

        try:
            if self._client is not None:
                response = await self._post(self._client, query)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, query)
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as e:
            # UnicodeError: a credential or URL that cannot be encoded into the request
            raise EnrichmentError(f"Enrichment request failed: {e}") from e

        if not response.is_success:
            raise EnrichmentError(f"Enrichment API responded with status: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise EnrichmentError("Enrichment response is not valid JSON") from e

        text = parse_generated_text(data)
        logger.debug(f"Enrichment produced {len(text)} characters for query {query!r}")
        return text


_enrichment_client: HuggingFaceEnrichmentClient | None = None


def get_enrichment_client() -> HuggingFaceEnrichmentClient:
    """Get or create the shared enrichment client."""
    global _enrichment_client
    if _enrichment_client is None:
        _enrichment_client = HuggingFaceEnrichmentClient()
    return _enrichment_client
