import pytest


@pytest.fixture
def two_profiles(create_profile):
    """Ada (Python, PostgreSQL, Docker; 2 projects) and Grace (COBOL, Python; 1 project)."""
    ada_id = create_profile()
    grace_id = create_profile(
        name="Grace Hopper",
        email="grace@example.com",
        education="Yale PhD",
        skills=[{"name": "COBOL", "level": 5}, {"name": "python", "level": 3}],
        projects=[{"title": "FLOW-MATIC", "description": "English-like data processing language."}],
        workExperience=[
            {"company": "Remington Rand", "position": "Senior Mathematician", "start_date": "1949-06"}
        ],
    )
    return ada_id, grace_id


def test_list_projects_paginates(test_app_client, two_profiles):
    client, _ = test_app_client

    resp = client.get("/api/projects", params={"limit": 2})

    assert resp.status_code == 200
    body = resp.json()
    assert len(body["projects"]) == 2
    assert body["pagination"] == {"limit": 2, "offset": 0, "total": 3, "hasMore": True}
    # Newest first
    assert body["projects"][0]["title"] == "FLOW-MATIC"
    assert body["projects"][0]["profile_name"] == "Grace Hopper"

    last_page = client.get("/api/projects", params={"limit": 2, "offset": 2}).json()
    assert len(last_page["projects"]) == 1
    assert last_page["pagination"]["hasMore"] is False


def test_list_projects_filters_by_owner_skill(test_app_client, two_profiles):
    client, _ = test_app_client

    cobol = client.get("/api/projects", params={"skill": "cobol"}).json()
    assert [p["title"] for p in cobol["projects"]] == ["FLOW-MATIC"]
    assert cobol["pagination"]["total"] == 1

    python = client.get("/api/projects", params={"skill": "PYTH"}).json()
    assert python["pagination"]["total"] == 3


def test_skill_filter_treats_wildcards_literally(test_app_client, two_profiles):
    client, _ = test_app_client

    body = client.get("/api/projects", params={"skill": "%"}).json()

    assert body["projects"] == []
    assert body["pagination"]["total"] == 0


def test_top_skills_orders_by_frequency_then_name(test_app_client, create_profile):
    client, _ = test_app_client
    create_profile(skills=[{"name": "Go", "level": 2}, {"name": "Rust", "level": 4}, "Zig"])
    create_profile(
        email="second@example.com",
        skills=[{"name": "Rust", "level": 5}, {"name": "Go", "level": 4}, "Ada"],
    )

    skills = client.get("/api/skills/top").json()["skills"]

    assert [(s["name"], s["frequency"]) for s in skills] == [
        ("Go", 2),
        ("Rust", 2),
        ("Ada", 1),
        ("Zig", 1),
    ]
    assert skills[0]["averageProficiency"] == 3.0
    assert skills[1]["averageProficiency"] == 4.5

    assert len(client.get("/api/skills/top", params={"limit": 1}).json()["skills"]) == 1


@pytest.mark.parametrize("params", [{}, {"q": ""}, {"q": "   "}])
def test_search_requires_query(test_app_client, params):
    client, _ = test_app_client

    resp = client.get("/api/search", params=params)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Search query is required", "code": "SEARCH_QUERY_REQUIRED"}


def test_search_all_buckets(test_app_client, two_profiles):
    client, _ = test_app_client

    body = client.get("/api/search", params={"q": "python"}).json()

    assert body["query"] == "python"
    assert body["type"] == "all"
    assert body["pagination"] == {"limit": 20, "offset": 0}
    results = body["results"]
    assert {s["skill_name"] for s in results["skills"]} == {"Python", "python"}
    # Strongest skill first
    assert results["skills"][0]["proficiency_level"] == 3
    assert results["profiles"] == []
    assert results["workExperience"] == []


def test_search_single_bucket(test_app_client, two_profiles):
    client, _ = test_app_client

    results = client.get("/api/search", params={"q": "language", "type": "projects"}).json()["results"]

    assert [p["title"] for p in results["projects"]] == ["FLOW-MATIC"]
    assert results["profiles"] == results["skills"] == results["workExperience"] == []


def test_search_profiles_and_work(test_app_client, two_profiles):
    client, _ = test_app_client

    profiles = client.get("/api/search", params={"q": "yale", "type": "profiles"}).json()
    assert [p["name"] for p in profiles["results"]["profiles"]] == ["Grace Hopper"]

    work = client.get("/api/search", params={"q": "remington", "type": "work"}).json()
    assert [w["company"] for w in work["results"]["workExperience"]] == ["Remington Rand"]


def test_list_skills_alphabetical_and_by_profile(test_app_client, two_profiles):
    client, _ = test_app_client
    _, grace_id = two_profiles

    names = [s["name"] for s in client.get("/api/skills").json()["skills"]]
    assert names == sorted(names)
    assert len(names) == 5

    grace = client.get("/api/skills", params={"profile_id": grace_id}).json()["skills"]
    assert grace == [{"name": "COBOL", "proficiency": 5}, {"name": "python", "proficiency": 3}]


def test_stats(test_app_client, two_profiles):
    client, _ = test_app_client

    body = client.get("/api/stats").json()

    assert body["total_profiles"] == 2
    assert body["total_projects"] == 3
    assert body["total_work_experience"] == 3
    # "Python" and "python" are distinct names
    assert body["unique_skills"] == 5
    assert len(body["topSkills"]) == 5


def test_health_and_readiness(test_app_client):
    client, _ = test_app_client

    health = client.get("/api/health")
    assert health.status_code == 200
    body = health.json()
    assert body["status"] == "healthy"
    assert body["environment"] == "test"
    assert body["uptime"] >= 0

    ready = client.get("/api/health/ready")
    assert ready.status_code == 200
    assert ready.json() == {"status": "ready", "checks": {"database": True}}


def test_unknown_route_is_404(test_app_client):
    client, _ = test_app_client

    resp = client.get("/api/nope")

    assert resp.status_code == 404
    assert resp.json() == {"error": "Not found - /api/nope", "code": "NOT_FOUND"}


def test_search_rate_limit(test_app_client):
    client, _ = test_app_client
    for _ in range(30):
        assert client.get("/api/search", params={"q": "x"}).status_code == 200

    resp = client.get("/api/search", params={"q": "x"})

    assert resp.status_code == 429
    assert resp.json()["code"] == "SEARCH_RATE_LIMIT_EXCEEDED"


def test_write_rate_limit(authorized_client):
    client, headers, _ = authorized_client
    for _ in range(20):
        assert client.delete("/api/profile", headers=headers).status_code == 404

    resp = client.delete("/api/profile", headers=headers)

    assert resp.status_code == 429
    assert resp.json() == {
        "error": "Too many write requests from this IP, please try again later.",
        "code": "WRITE_RATE_LIMIT_EXCEEDED",
    }


def test_rate_limit_headers_on_success(test_app_client):
    client, _ = test_app_client

    resp = client.get("/api/health")

    assert resp.headers["X-RateLimit-Limit"] == "100"
    assert resp.headers["X-RateLimit-Remaining"] == "99"
