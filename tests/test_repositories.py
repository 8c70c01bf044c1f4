import pytest
from sqlalchemy.exc import IntegrityError

from meapi.models import Profile, Project, Skill, WorkExperience
from meapi.repositories import (
    ProfileRepository,
    ProjectRepository,
    SkillRepository,
    WorkExperienceRepository,
    contains_pattern,
)


def _make_profile(session, email="ada@example.com", skills=(), projects=(), work=()):
    return ProfileRepository(session).create_with_children(
        {"name": "Ada Lovelace", "email": email},
        skills=[{"skill_name": name, "proficiency_level": level} for name, level in skills],
        projects=[
            {"title": title, "description": f"{title} description", "links": []}
            for title in projects
        ],
        work_experience=[
            {"company": company, "position": "Engineer", "start_date": start}
            for company, start in work
        ],
    )


@pytest.mark.parametrize(
    "term, expected",
    [
        ("python", "%python%"),
        ("100%", "%100\\%%"),
        ("snake_case", "%snake\\_case%"),
        ("back\\slash", "%back\\\\slash%"),
    ],
)
def test_contains_pattern_escapes_wildcards(term, expected):
    assert contains_pattern(term) == expected


def test_create_with_children(session):
    profile = _make_profile(
        session,
        skills=[("Python", 4)],
        projects=["Engine"],
        work=[("Acme", "2020-01")],
    )

    assert profile.id is not None
    assert [s.skill_name for s in profile.skills] == ["Python"]
    assert profile.projects[0].links == []
    assert profile.work_experience[0].profile_id == profile.id


def test_unique_email_enforced_by_database(session):
    _make_profile(session)

    with pytest.raises(IntegrityError):
        _make_profile(session)


def test_skill_proficiency_range_enforced_by_database(session):
    profile = _make_profile(session)
    session.add(Skill(profile_id=profile.id, skill_name="Python", proficiency_level=9))

    with pytest.raises(IntegrityError):
        session.flush()


def test_deleting_profile_cascades(session):
    profile = _make_profile(session, skills=[("Python", 4)], projects=["Engine"], work=[("Acme", "2020")])

    assert ProfileRepository(session).delete(profile.id) is True
    session.expire_all()

    for model in (Skill, Project, WorkExperience):
        assert session.query(model).count() == 0


def test_delete_all_returns_count(session):
    _make_profile(session, skills=[("Python", 4)])
    _make_profile(session, email="grace@example.com")

    assert ProfileRepository(session).delete_all() == 2
    assert session.query(Skill).count() == 0


def test_replace_swaps_every_collection(session):
    repo = ProfileRepository(session)
    profile = _make_profile(session, skills=[("Python", 4)], projects=["Engine"], work=[("Acme", "2020")])

    repo.replace(
        profile,
        {"name": "Ada King", "email": "ada@example.com", "education": "Home tutored"},
        skills=[{"skill_name": "Maths", "proficiency_level": 5}],
    )
    session.expire_all()

    refreshed = repo.get_by_id(profile.id)
    assert refreshed.name == "Ada King"
    assert refreshed.github_url is None
    assert [s.skill_name for s in refreshed.skills] == ["Maths"]
    assert refreshed.projects == []
    assert refreshed.work_experience == []


def test_get_latest_prefers_newest(session):
    _make_profile(session)
    newest = _make_profile(session, email="grace@example.com")

    assert ProfileRepository(session).get_latest().id == newest.id


def test_work_experience_relationship_is_newest_first(session):
    profile = _make_profile(session, work=[("Old", "2015-01"), ("New", "2022-06"), ("Mid", "2018-03")])
    session.expire_all()

    refreshed = session.get(Profile, profile.id)
    assert [w.company for w in refreshed.work_experience] == ["New", "Mid", "Old"]


def test_top_by_frequency(session):
    _make_profile(session, skills=[("Go", 2), ("Rust", 4)])
    _make_profile(session, email="b@example.com", skills=[("Rust", 5), ("Go", 4), ("Ada", 1)])

    rows = SkillRepository(session).top_by_frequency(10)

    assert rows == [("Go", 2, 3.0), ("Rust", 2, 4.5), ("Ada", 1, 1.0)]
    assert SkillRepository(session).count_distinct_names() == 3


def test_list_by_skill(session):
    _make_profile(session, skills=[("Python", 4)], projects=["One", "Two"])
    _make_profile(session, email="b@example.com", skills=[("COBOL", 5)], projects=["Three"])
    repo = ProjectRepository(session)

    projects, total = repo.list_by_skill("pyth", limit=1, offset=0)
    assert total == 2
    assert len(projects) == 1

    projects, total = repo.list_by_skill(None, limit=10, offset=0)
    assert total == 3
    assert projects[0].title == "Three"

    assert repo.list_by_skill("_", limit=10, offset=0) == ([], 0)


def test_work_search_is_case_insensitive(session):
    _make_profile(session, work=[("Remington Rand", "1949")])

    found = WorkExperienceRepository(session).search("REMINGTON", limit=10, offset=0)

    assert [w.company for w in found] == ["Remington Rand"]


def test_count_with_filters(session):
    profile = _make_profile(session, skills=[("Python", 4), ("Go", 2)])
    repo = SkillRepository(session)

    assert repo.count() == 2
    assert repo.count(profile_id=profile.id, proficiency_level=4) == 1

    with pytest.raises(ValueError, match="Unknown filter key"):
        repo.count(typo_key=5)
