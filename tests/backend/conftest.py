from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from backend.app.auth.jwt import create_access_token
from backend.app.database import get_db
from backend.app.main import create_app


@pytest.fixture
def test_app_client(test_db) -> Iterator[tuple[TestClient, sessionmaker]]:
    TestingSessionLocal, _ = test_db

    app = create_app()

    def override_get_db() -> Iterator[Session]:
        db = TestingSessionLocal()
        try:
            yield db
            db.commit()  # Auto-commit on success like production
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client, TestingSessionLocal


@pytest.fixture
def auth_headers() -> dict[str, str]:
    token = create_access_token({"sub": "1", "id": 1, "username": "admin", "role": "admin"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def authorized_client(
    test_app_client, auth_headers
) -> Iterator[tuple[TestClient, dict[str, str], sessionmaker]]:
    client, TestingSessionLocal = test_app_client
    yield client, auth_headers, TestingSessionLocal


@pytest.fixture
def create_profile(authorized_client, sample_profile_payload) -> Callable[..., int]:
    """POST a profile (sample payload with overrides) and return its id."""
    client, headers, _ = authorized_client

    def _create(**overrides) -> int:
        payload = {**sample_profile_payload, **overrides}
        resp = client.post("/api/profile", json=payload, headers=headers)
        assert resp.status_code == 201, resp.text
        return resp.json()["profileId"]

    return _create
