"""Mentor lookup by keyword set.

A mentor matches when any of these hold (case-insensitive):
- first name, last name or bio contains the keyword text
- one of the mentor's domains is named after a keyword
- one of the mentor's services is named after a keyword

Results are ordered by rating, best first.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from . import models
from .config import TextMatchMode, settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MentorSummary:
    """Projection of a mentor record as returned to callers."""
    id: int
    user_id: int
    first_name: str
    last_name: str | None
    profile_picture: str | None
    bio: str | None


class PersistenceError(Exception):
    """Raised when the mentor lookup fails."""
    pass


class MentorLookup(Protocol):
    """Anything that can find mentors for a keyword set."""

    async def search(self, keywords: Sequence[str]) -> list[MentorSummary]:
        ...


def _text_patterns(keywords: Sequence[str], mode: TextMatchMode) -> list[str]:
    """Substrings to look for in name and bio columns.

    In phrase mode the keywords are joined into a single phrase, so a
    row only matches when they appear contiguously and in order.
    """
    if mode == TextMatchMode.PHRASE:
        return [" ".join(keywords)]
    return list(keywords)


class MentorRepository:
    """SQLAlchemy-backed mentor lookup."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        limit: int | None = None,
        text_match_mode: TextMatchMode | None = None,
    ) -> None:
        self.session = session
        self.limit = limit or settings.search.result_limit
        self.text_match_mode = text_match_mode or settings.search.text_match_mode

    def _conditions(self, keywords: Sequence[str]) -> list:
        lowered = [k.lower() for k in keywords]

        conditions = []
        for pattern in _text_patterns(lowered, self.text_match_mode):
            conditions.extend([
                models.User.first_name.icontains(pattern, autoescape=True),
                models.User.last_name.icontains(pattern, autoescape=True),
                models.MentorProfile.bio.icontains(pattern, autoescape=True),
            ])

        conditions.append(
            models.MentorProfile.domains.any(func.lower(models.Domain.name).in_(lowered))
        )
        conditions.append(
            models.MentorProfile.services.any(func.lower(models.Service.name).in_(lowered))
        )
        return conditions

    async def search(self, keywords: Sequence[str]) -> list[MentorSummary]:
        """Find up to ``limit`` mentors matching any keyword.

        Args:
            keywords: Lowercase keyword set

        Returns:
            Mentor summaries ordered by rating DESC (id ASC on ties).
            An empty keyword set matches nothing.

        Raises:
            PersistenceError: If the database query fails
        """
        if not keywords:
            logger.debug("Empty keyword set, skipping mentor lookup")
            return []

        query = (
            select(models.MentorProfile, models.User)
            .join(models.User, models.MentorProfile.user_id == models.User.id)
            .where(or_(*self._conditions(keywords)))
            .order_by(models.MentorProfile.rating.desc(), models.MentorProfile.id)
            .limit(self.limit)
        )

        try:
            result = await self.session.execute(query)
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error(f"Mentor lookup failed: {e}")
            raise PersistenceError(f"Failed to search mentors: {e}") from e

        mentors = [
            MentorSummary(
                id=profile.id,
                user_id=profile.user_id,
                first_name=user.first_name,
                last_name=user.last_name,
                profile_picture=profile.profile_picture,
                bio=profile.bio,
            )
            for profile, user in rows
        ]

        logger.info(f"Found {len(mentors)} mentors for {len(keywords)} keywords")
        return mentors
