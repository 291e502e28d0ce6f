import pytest
from sqlalchemy.exc import SQLAlchemyError

from mentorsearch.config import TextMatchMode
from mentorsearch.repository import MentorRepository, PersistenceError


def names(mentors):
    return [m.first_name for m in mentors]


async def test_domain_membership_is_case_insensitive(seeded_session):
    repo = MentorRepository(seeded_session)
    assert names(await repo.search(["technology"])) == ["Ada"]


async def test_service_membership(seeded_session):
    repo = MentorRepository(seeded_session)
    assert names(await repo.search(["budget"])) == ["Warren"]


async def test_last_name_substring(seeded_session):
    repo = MentorRepository(seeded_session)
    assert names(await repo.search(["hopp"])) == ["Grace"]


async def test_bio_substring(seeded_session):
    repo = MentorRepository(seeded_session)
    assert names(await repo.search(["compiler"])) == ["Grace"]


async def test_summary_fields(seeded_session):
    repo = MentorRepository(seeded_session)
    [ada] = await repo.search(["lovelace"])

    assert ada.first_name == "Ada"
    assert ada.last_name == "Lovelace"
    assert ada.profile_picture == "https://img.example.com/ada.png"
    assert ada.bio.startswith("Software engineering leader")
    assert isinstance(ada.user_id, int)


async def test_phrase_mode_requires_contiguous_keywords(seeded_session):
    repo = MentorRepository(seeded_session, text_match_mode=TextMatchMode.PHRASE)

    # Ada's bio has "coding and systems", not "coding systems"
    assert await repo.search(["coding", "systems"]) == []
    assert names(await repo.search(["systems", "design"])) == ["Ada"]


async def test_any_mode_matches_each_keyword(seeded_session):
    repo = MentorRepository(seeded_session, text_match_mode=TextMatchMode.ANY)
    assert names(await repo.search(["coding", "systems"])) == ["Ada"]


async def test_results_ordered_by_rating(seeded_session):
    repo = MentorRepository(seeded_session, text_match_mode=TextMatchMode.ANY)
    mentors = await repo.search(["fitness", "investment", "experience", "leadership"])
    assert names(mentors) == ["Ada", "Grace", "Warren", "Nina"]


async def test_results_limited(seeded_session):
    repo = MentorRepository(seeded_session, limit=2, text_match_mode=TextMatchMode.ANY)
    mentors = await repo.search(["fitness", "investment", "experience", "leadership"])
    assert names(mentors) == ["Ada", "Grace"]


async def test_general_fallback_keywords_hit_domains(seeded_session):
    repo = MentorRepository(seeded_session, text_match_mode=TextMatchMode.PHRASE)
    general = ["leadership", "coaching", "experience", "guidance", "technology", "finance"]
    assert names(await repo.search(general)) == ["Ada", "Warren"]


async def test_no_match(seeded_session):
    repo = MentorRepository(seeded_session)
    assert await repo.search(["astronomy"]) == []


async def test_empty_keyword_set_matches_nothing(seeded_session):
    repo = MentorRepository(seeded_session)
    assert await repo.search([]) == []


async def test_underscore_is_literal(seeded_session):
    repo = MentorRepository(seeded_session)
    # "_" must not act as a LIKE wildcard
    assert await repo.search(["h_pper"]) == []


class FailingSession:
    async def execute(self, query):
        raise SQLAlchemyError("connection lost")


async def test_database_failure_raises_persistence_error():
    repo = MentorRepository(FailingSession())
    with pytest.raises(PersistenceError):
        await repo.search(["python"])
