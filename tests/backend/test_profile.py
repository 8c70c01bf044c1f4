from meapi.models import Profile, Project, Skill, WorkExperience


def _profiles(client):
    resp = client.get("/api/profile")
    assert resp.status_code == 200
    return resp.json()


def test_create_then_list_profile(authorized_client, sample_profile_payload):
    client, headers, _ = authorized_client

    resp = client.post("/api/profile", json=sample_profile_payload, headers=headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Profile created successfully"
    assert isinstance(body["profileId"], int)

    profiles = _profiles(client)
    assert len(profiles) == 1
    profile = profiles[0]
    assert profile["id"] == body["profileId"]
    assert profile["name"] == "Ada Lovelace"
    assert profile["linkedin_url"] is None
    assert len(profile["skills"]) == 3
    assert len(profile["skillsWithLevel"]) == 3
    assert len(profile["projects"]) == 2
    assert len(profile["workExperience"]) == 2
    assert profile["projects"][0]["links"] == [
        {"name": "GitHub", "url": "https://github.com/ada/engine"}
    ]


def test_string_skills_default_to_level_one(authorized_client, create_profile):
    client, _, _ = authorized_client
    create_profile()

    levels = {s["skill_name"]: s["proficiency_level"] for s in _profiles(client)[0]["skillsWithLevel"]}

    assert levels == {"Python": 1, "PostgreSQL": 4, "Docker": 1}


def test_skill_level_accepts_proficiency_alias(authorized_client, create_profile):
    client, _, _ = authorized_client
    create_profile(skills=[{"name": "Go", "proficiency_level": 3}, {"name": "Rust", "proficiency": 5}])

    levels = {s["skill_name"]: s["proficiency_level"] for s in _profiles(client)[0]["skillsWithLevel"]}

    assert levels == {"Go": 3, "Rust": 5}


def test_work_experience_is_newest_first(authorized_client, create_profile):
    client, _, _ = authorized_client
    create_profile()

    work = _profiles(client)[0]["workExperience"]

    assert [w["start_date"] for w in work] == ["1844-03", "1842-01"]
    assert work[0]["end_date"] is None


def test_email_is_stored_lowercase(authorized_client, create_profile):
    client, _, _ = authorized_client
    create_profile(email="Ada@Example.COM")

    assert _profiles(client)[0]["email"] == "ada@example.com"


def test_duplicate_email_conflicts(authorized_client, create_profile, sample_profile_payload):
    client, headers, session_factory = authorized_client
    create_profile()

    payload = {**sample_profile_payload, "email": "ADA@example.com"}
    resp = client.post("/api/profile", json=payload, headers=headers)

    assert resp.status_code == 409
    assert resp.json()["code"] == "PROFILE_EXISTS"
    with session_factory() as session:
        assert session.query(Profile).count() == 1


def test_list_profiles_empty_is_404(test_app_client):
    client, _ = test_app_client

    resp = client.get("/api/profile")

    assert resp.status_code == 404
    assert resp.json() == {"error": "No profiles found", "code": "PROFILES_NOT_FOUND"}


def test_put_replaces_children(authorized_client, create_profile, sample_profile_payload):
    client, headers, session_factory = authorized_client
    create_profile()

    payload = {
        **sample_profile_payload,
        "name": "Augusta Ada King",
        "skills": [{"name": "Mathematics", "level": 5}],
        "projects": [],
    }
    payload.pop("workExperience")
    resp = client.put("/api/profile", json=payload, headers=headers)

    assert resp.status_code == 200
    assert resp.json() == {"message": "Profile updated successfully"}

    profile = _profiles(client)[0]
    assert profile["name"] == "Augusta Ada King"
    assert profile["skillsWithLevel"] == [{"skill_name": "Mathematics", "proficiency_level": 5}]
    assert profile["projects"] == []
    assert profile["workExperience"] == []
    with session_factory() as session:
        assert session.query(Skill).count() == 1
        assert session.query(Project).count() == 0
        assert session.query(WorkExperience).count() == 0


def test_put_with_empty_skills_clears_them(authorized_client, create_profile, sample_profile_payload):
    client, headers, session_factory = authorized_client
    create_profile()

    resp = client.put("/api/profile", json={**sample_profile_payload, "skills": []}, headers=headers)

    assert resp.status_code == 200
    profile = _profiles(client)[0]
    assert profile["skills"] == []
    assert profile["skillsWithLevel"] == []
    assert len(profile["projects"]) == 2
    with session_factory() as session:
        assert session.query(Skill).count() == 0


def test_put_targets_latest_profile(authorized_client, create_profile, sample_profile_payload):
    client, headers, session_factory = authorized_client
    first_id = create_profile()
    second_id = create_profile(email="charles@example.com", name="Charles Babbage")

    payload = {**sample_profile_payload, "email": "charles@example.com", "name": "C. Babbage"}
    resp = client.put("/api/profile", json=payload, headers=headers)

    assert resp.status_code == 200
    with session_factory() as session:
        assert session.get(Profile, second_id).name == "C. Babbage"
        assert session.get(Profile, first_id).name == "Ada Lovelace"


def test_put_rejects_email_of_other_profile(authorized_client, create_profile, sample_profile_payload):
    client, headers, _ = authorized_client
    create_profile()
    create_profile(email="charles@example.com")

    resp = client.put(
        "/api/profile",
        json={**sample_profile_payload, "email": "ada@example.com"},
        headers=headers,
    )

    assert resp.status_code == 409
    assert resp.json()["code"] == "PROFILE_EXISTS"


def test_put_without_profile_is_404(authorized_client, sample_profile_payload):
    client, headers, _ = authorized_client

    resp = client.put("/api/profile", json=sample_profile_payload, headers=headers)

    assert resp.status_code == 404
    assert resp.json()["code"] == "PROFILE_NOT_FOUND"


def test_delete_removes_all_profiles_and_children(authorized_client, create_profile):
    client, headers, session_factory = authorized_client
    create_profile()
    create_profile(email="charles@example.com")

    resp = client.delete("/api/profile", headers=headers)

    assert resp.status_code == 200
    assert resp.json() == {"message": "Profile deleted successfully"}
    with session_factory() as session:
        for model in (Profile, Skill, Project, WorkExperience):
            assert session.query(model).count() == 0


def test_delete_without_profile_is_404(authorized_client):
    client, headers, _ = authorized_client

    resp = client.delete("/api/profile", headers=headers)

    assert resp.status_code == 404
    assert resp.json()["code"] == "PROFILE_NOT_FOUND"


def test_id_scoped_update_and_delete(authorized_client, create_profile, sample_profile_payload):
    client, headers, session_factory = authorized_client
    first_id = create_profile()
    second_id = create_profile(email="charles@example.com")

    resp = client.put(
        f"/api/profile/{first_id}",
        json={**sample_profile_payload, "name": "Ada King"},
        headers=headers,
    )
    assert resp.status_code == 200

    resp = client.delete(f"/api/profile/{second_id}", headers=headers)
    assert resp.status_code == 200

    with session_factory() as session:
        assert session.get(Profile, first_id).name == "Ada King"
        assert session.get(Profile, second_id) is None
        assert session.query(Skill).filter(Skill.profile_id == second_id).count() == 0

    assert client.delete(f"/api/profile/{second_id}", headers=headers).status_code == 404
    resp = client.put("/api/profile/999", json=sample_profile_payload, headers=headers)
    assert resp.status_code == 404


def test_delete_project(authorized_client, create_profile):
    client, headers, session_factory = authorized_client
    create_profile()
    project_id = _profiles(client)[0]["projects"][0]["id"]

    resp = client.delete(f"/api/profile/projects/{project_id}", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Project deleted successfully"}

    resp = client.delete(f"/api/profile/projects/{project_id}", headers=headers)
    assert resp.status_code == 404
    assert resp.json()["code"] == "PROJECT_NOT_FOUND"

    resp = client.delete("/api/profile/projects/abc", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_PROJECT_ID"

    resp = client.delete("/api/profile/projects/-1", headers=headers)
    assert resp.status_code == 404
    assert resp.json()["code"] == "PROJECT_NOT_FOUND"

    with session_factory() as session:
        assert session.query(Project).count() == 1


def test_delete_work_experience(authorized_client, create_profile):
    client, headers, _ = authorized_client
    create_profile()
    work_id = _profiles(client)[0]["workExperience"][0]["id"]

    resp = client.delete(f"/api/profile/work-experience/{work_id}", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Work experience deleted successfully"}

    resp = client.delete(f"/api/profile/work-experience/{work_id}", headers=headers)
    assert resp.status_code == 404
    assert resp.json()["code"] == "WORK_NOT_FOUND"

    resp = client.delete("/api/profile/work-experience/0", headers=headers)
    assert resp.status_code == 404
    assert resp.json()["code"] == "WORK_NOT_FOUND"

    resp = client.delete("/api/profile/work-experience/1.5", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_WORK_ID"

    assert len(_profiles(client)[0]["workExperience"]) == 1
