"""Query normalization and validation."""
from __future__ import annotations

import re


class ValidationError(Exception):
    """Raised when a search query is missing or blank."""
    pass


def normalize_whitespace(text: str) -> str:
    """Normalize whitespace: collapse multiple spaces, remove leading/trailing."""
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def normalize_query(raw: object) -> str:
    """Validate a raw query and fold it to lowercase.

    Args:
        raw: Query value as received from the caller

    Returns:
        Trimmed, whitespace-collapsed, lowercase query

    Raises:
        ValidationError: If the query is not a string or is blank
    """
    if not isinstance(raw, str):
        raise ValidationError("Search query is required")

    query = normalize_whitespace(raw).lower()
    if not query:
        raise ValidationError("Search query is required")

    return query
