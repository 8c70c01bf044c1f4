"""Request validation: every failure is a 400 VALIDATION_ERROR with per-field details."""

from meapi.models import Profile


def _fields(resp):
    return {detail["field"]: detail for detail in resp.json()["details"]}


def test_invalid_body_lists_every_failing_field(authorized_client, sample_profile_payload):
    client, headers, session_factory = authorized_client
    payload = {**sample_profile_payload, "name": "A", "email": "not-an-email"}

    resp = client.post("/api/profile", json=payload, headers=headers)

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Validation failed"
    assert body["code"] == "VALIDATION_ERROR"
    fields = _fields(resp)
    assert {"name", "email"} <= set(fields)
    assert fields["name"]["location"] == "body"
    with session_factory() as session:
        assert session.query(Profile).count() == 0


def test_empty_url_is_stored_as_null(authorized_client, create_profile):
    client, _, _ = authorized_client
    create_profile(github_url="", portfolio_url="   ")

    profile = client.get("/api/profile").json()[0]

    assert profile["github_url"] is None
    assert profile["portfolio_url"] is None


def test_non_http_url_is_rejected(authorized_client, sample_profile_payload):
    client, headers, _ = authorized_client
    payload = {**sample_profile_payload, "github_url": "ftp://github.com/ada"}

    resp = client.post("/api/profile", json=payload, headers=headers)

    assert resp.status_code == 400
    assert _fields(resp)["github_url"]["message"] == "GitHub URL must be a valid URL"


def test_skill_level_out_of_range(authorized_client, sample_profile_payload):
    client, headers, _ = authorized_client
    payload = {**sample_profile_payload, "skills": [{"name": "Python", "level": 6}]}

    resp = client.post("/api/profile", json=payload, headers=headers)

    assert resp.status_code == 400
    assert "skills.0.level" in _fields(resp)


def test_project_requires_description(authorized_client, sample_profile_payload):
    client, headers, _ = authorized_client
    payload = {**sample_profile_payload, "projects": [{"title": "No description"}]}

    resp = client.post("/api/profile", json=payload, headers=headers)

    assert resp.status_code == 400
    assert "projects.0.description" in _fields(resp)


def test_work_experience_requires_start_date(authorized_client, sample_profile_payload):
    client, headers, _ = authorized_client
    payload = {
        **sample_profile_payload,
        "workExperience": [{"company": "Acme", "position": "Engineer"}],
    }

    resp = client.post("/api/profile", json=payload, headers=headers)

    assert resp.status_code == 400
    assert any(field.endswith("0.start_date") for field in _fields(resp))


def test_query_parameters_are_validated(test_app_client):
    client, _ = test_app_client

    resp = client.get("/api/projects", params={"limit": 0})
    assert resp.status_code == 400
    detail = _fields(resp)["limit"]
    assert detail["location"] == "query"

    resp = client.get("/api/search", params={"q": "python", "type": "bogus"})
    assert resp.status_code == 400
    assert _fields(resp)["type"]["location"] == "query"


def test_non_numeric_profile_id_is_rejected(authorized_client, sample_profile_payload):
    client, headers, _ = authorized_client

    resp = client.put("/api/profile/abc", json=sample_profile_payload, headers=headers)

    assert resp.status_code == 400
    assert _fields(resp)["profile_id"]["location"] == "path"
