from meapi.seed import (
    SAMPLE_PROJECTS,
    SAMPLE_SKILLS,
    SAMPLE_WORK_EXPERIENCE,
    seed_database,
    table_counts,
)


def test_seed_loads_sample_profile(session):
    profile = seed_database(session)

    assert profile.email == "varunsandeshtalluru@gmail.com"
    assert table_counts(session) == {
        "profiles": 1,
        "skills": len(SAMPLE_SKILLS),
        "projects": len(SAMPLE_PROJECTS),
        "work_experience": len(SAMPLE_WORK_EXPERIENCE),
    }
    assert (len(SAMPLE_SKILLS), len(SAMPLE_PROJECTS), len(SAMPLE_WORK_EXPERIENCE)) == (14, 4, 3)


def test_seed_twice_replaces_previous_data(session):
    seed_database(session)
    second = seed_database(session)

    assert table_counts(session)["profiles"] == 1
    assert table_counts(session)["skills"] == 14
    assert [s.skill_name for s in second.skills][:2] == ["JavaScript", "Python"]
