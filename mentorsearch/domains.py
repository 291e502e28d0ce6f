"""Domain heuristic table for fallback keyword generation.

Used when query extraction is too weak, enrichment fails, or a lookup
comes back empty. Matching is a plain substring test on the query.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Mapping

from config.domain_keywords import DOMAIN_KEYWORDS, GENERAL_DOMAIN

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DomainEntry:
    """A domain label and its representative keywords."""
    name: str
    keywords: tuple[str, ...]


@dataclass(frozen=True)
class DomainTable:
    """Immutable, ordered domain -> keywords mapping.

    ``entries`` keeps declaration order; ``general`` is the catch-all
    bucket and is never considered during matching.
    """
    entries: tuple[DomainEntry, ...]
    general: DomainEntry

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[Mapping],
        general_domain: str = GENERAL_DOMAIN,
    ) -> DomainTable:
        """Build a table from ``{"domain": ..., "keywords": [...]}`` dicts.

        Raises:
            ValueError: If a domain repeats, or the general domain is
                missing or has no keywords
        """
        built: list[DomainEntry] = []
        seen: set[str] = set()
        general: DomainEntry | None = None

        for raw in entries:
            name = raw["domain"].lower()
            if name in seen:
                raise ValueError(f"Duplicate domain in keyword table: {name}")
            seen.add(name)

            entry = DomainEntry(
                name=name,
                keywords=tuple(dict.fromkeys(k.lower() for k in raw["keywords"])),
            )
            if name == general_domain:
                general = entry
            else:
                built.append(entry)

        if general is None or not general.keywords:
            raise ValueError(f"Domain table needs a non-empty '{general_domain}' domain")

        logger.info(f"Loaded {len(built)} fallback domains plus '{general.name}'")
        return cls(entries=tuple(built), general=general)

    @property
    def domains(self) -> list[str]:
        """Domain names in match order, general last."""
        return [e.name for e in self.entries] + [self.general.name]

    def keywords_for(self, domain: str) -> list[str]:
        """Keywords of a domain by name.

        Raises:
            KeyError: If the domain is unknown
        """
        name = domain.lower()
        if name == self.general.name:
            return list(self.general.keywords)
        for entry in self.entries:
            if entry.name == name:
                return list(entry.keywords)
        raise KeyError(domain)

    def match(self, query: str) -> DomainEntry:
        """First domain with any keyword contained in the query, else general."""
        text = (query or "").lower()
        for entry in self.entries:
            if any(keyword in text for keyword in entry.keywords):
                return entry
        return self.general

    def fallback_for(self, query: str) -> list[str]:
        """Fallback keyword set for a query. Never empty."""
        entry = self.match(query)
        logger.debug(f"Fallback domain for {query!r}: {entry.name}")
        return list(entry.keywords)


@lru_cache(maxsize=1)
def get_domain_table() -> DomainTable:
    """Shared table built from ``config.domain_keywords``."""
    return DomainTable.from_entries(DOMAIN_KEYWORDS)
