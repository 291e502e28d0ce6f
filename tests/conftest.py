"""Shared test configuration: in-memory database and stub collaborators.

Every test gets a fresh SQLite database; the enrichment service is never
called over the network.
"""

import os

# Settings are read at import time; keep tests off real services
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("HUGGING_FACE_API_KEY", "hf-test-fake-key")
os.environ.setdefault("SEARCH_TEXT_MATCH_MODE", "phrase")

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ai.enrichment import EnrichmentError
from mentorsearch import models
from mentorsearch.repository import MentorSummary


class FakeEnricher:
    """Returns canned text, or raises EnrichmentError when given one."""

    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def enrich(self, query):
        self.calls.append(query)
        if self.error is not None:
            raise self.error
        if self.text is None:
            raise EnrichmentError("no canned text")
        return self.text


class FakeLookup:
    """Returns queued results per call, then empty lists."""

    def __init__(self, *responses, error=None):
        self.responses = list(responses)
        self.error = error
        self.calls = []

    async def search(self, keywords):
        self.calls.append(list(keywords))
        if self.error is not None:
            raise self.error
        if self.responses:
            return self.responses.pop(0)
        return []


def make_mentor(mentor_id, first_name="Test", last_name=None, bio=None):
    return MentorSummary(
        id=mentor_id,
        user_id=100 + mentor_id,
        first_name=first_name,
        last_name=last_name,
        profile_picture=None,
        bio=bio,
    )


@pytest.fixture
async def test_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(models.Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(models.Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def seeded_factory(session_factory):
    """Session factory over a database with four mentors.

    Ratings: Ada 4.9, Grace 4.7, Warren 4.5, Nina 3.0.
    """
    async with session_factory() as session:
        technology = models.Domain(name="Technology")
        engineering = models.Domain(name="Engineering")
        finance = models.Domain(name="Finance")
        health = models.Domain(name="Health")

        mentors = [
            (
                models.User(first_name="Ada", last_name="Lovelace", email="ada@example.com"),
                models.MentorProfile(
                    bio="Software engineering leader with 15 years of experience in coding and systems design",
                    profile_picture="https://img.example.com/ada.png",
                    rating=4.9,
                    domains=[technology],
                    services=[models.Service(name="Code Review")],
                ),
            ),
            (
                models.User(first_name="Grace", last_name="Hopper", email="grace@example.com"),
                models.MentorProfile(
                    bio="Compiler pioneer and leadership coach",
                    rating=4.7,
                    domains=[engineering],
                    services=[models.Service(name="Mentoring")],
                ),
            ),
            (
                models.User(first_name="Warren", last_name="Buffett", email="warren@example.com"),
                models.MentorProfile(
                    bio="Long-term investment and financial planning",
                    rating=4.5,
                    domains=[finance],
                    services=[models.Service(name="Budget")],
                ),
            ),
            (
                models.User(first_name="Nina", last_name=None, email="nina@example.com"),
                models.MentorProfile(
                    bio=None,
                    rating=3.0,
                    domains=[health],
                    services=[models.Service(name="Fitness")],
                ),
            ),
        ]
        for user, profile in mentors:
            profile.user = user
            session.add(profile)
        await session.commit()

    return session_factory


@pytest.fixture
async def seeded_session(seeded_factory):
    async with seeded_factory() as session:
        yield session
