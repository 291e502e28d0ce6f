"""Search pipeline: free-text query → keyword set → mentors.

Implements the keyword resolution state machine:
1. Local extraction on the normalized query
2. Enrichment when fewer than ``min_keywords`` were found
   (heuristic fallback if enrichment fails)
3. Lookup, top N by rating
4. Heuristic fallback lookup when the first lookup is empty
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ai.enrichment import EnrichmentError, KeywordEnricher
from ai.keywords import KeywordExtractor, get_extractor
from mentorsearch.config import settings
from mentorsearch.domains import DomainTable
from mentorsearch.pipelines.normalization import normalize_query
from mentorsearch.repository import MentorLookup, MentorSummary

logger = logging.getLogger(__name__)


class KeywordSource(str, Enum):
    """Where the final keyword set came from."""
    LOCAL = "local"
    ENRICHED = "enriched"
    HEURISTIC = "heuristic"


@dataclass
class KeywordResolution:
    """Keyword set chosen for the first lookup."""
    keywords: list[str]
    source: KeywordSource


@dataclass
class SearchOutcome:
    """Complete result of one search request."""
    mentors: list[MentorSummary]
    keywords: list[str]
    used_fallback: bool = False
    keyword_source: KeywordSource = KeywordSource.LOCAL
    query: str = ""
    lookups: int = 1


class MentorSearchService:
    """Orchestrates extraction, enrichment, heuristics and lookup.

    Holds no per-request state; one instance can serve concurrent
    requests as long as its collaborators can.
    """

    def __init__(
        self,
        lookup: MentorLookup,
        enricher: KeywordEnricher,
        domain_table: DomainTable,
        *,
        extractor: KeywordExtractor | None = None,
        min_keywords: int | None = None,
        result_limit: int | None = None,
    ) -> None:
        self.lookup = lookup
        self.enricher = enricher
        self.domain_table = domain_table
        self.extractor = extractor or get_extractor()
        self.min_keywords = min_keywords or settings.search.min_keywords
        self.result_limit = result_limit or settings.search.result_limit

    def needs_enrichment(self, keywords: list[str]) -> bool:
        """Too few keywords to search with on their own."""
        return len(keywords) < self.min_keywords

    async def resolve_keywords(self, query: str) -> KeywordResolution:
        """Pick the keyword set for the first lookup.

        Args:
            query: Normalized (trimmed, lowercase) query

        Returns:
            KeywordResolution with the keywords and their source
        """
        keywords = self.extractor.extract(query)
        if not self.needs_enrichment(keywords):
            return KeywordResolution(keywords, KeywordSource.LOCAL)

        logger.info(f"Sparse query ({len(keywords)} keywords), enriching: {query!r}")
        try:
            generated = await self.enricher.enrich(query)
        except EnrichmentError as e:
            logger.warning(f"Enrichment failed, using domain fallback: {e}")
            return KeywordResolution(self.domain_table.fallback_for(query), KeywordSource.HEURISTIC)

        # No second round: sparse or empty output is used as is
        return KeywordResolution(self.extractor.extract(generated), KeywordSource.ENRICHED)

    async def _lookup(self, keywords: list[str]) -> list[MentorSummary]:
        mentors = await self.lookup.search(keywords)
        return list(mentors)[: self.result_limit]

    async def search(self, raw_query: object) -> SearchOutcome:
        """Run the full search for a raw query.

        Raises:
            ValidationError: If the query is missing or blank
            PersistenceError: If a lookup fails
        """
        query = normalize_query(raw_query)

        resolution = await self.resolve_keywords(query)
        mentors = await self._lookup(resolution.keywords)

        if mentors:
            logger.info(
                f"Query {query!r}: {len(mentors)} mentors via "
                f"{resolution.source.value} keywords {resolution.keywords}"
            )
            return SearchOutcome(
                mentors=mentors,
                keywords=resolution.keywords,
                used_fallback=False,
                keyword_source=resolution.source,
                query=query,
            )

        fallback_keywords = self.domain_table.fallback_for(query)
        fallback_mentors = await self._lookup(fallback_keywords)
        logger.info(
            f"Query {query!r}: no mentors for {resolution.keywords}, "
            f"fallback {fallback_keywords} found {len(fallback_mentors)}"
        )
        return SearchOutcome(
            mentors=fallback_mentors,
            keywords=fallback_keywords,
            used_fallback=True,
            keyword_source=KeywordSource.HEURISTIC,
            query=query,
            lookups=2,
        )
