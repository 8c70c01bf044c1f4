"""
Pytest fixtures for Me-API tests.

Every test gets a fresh in-memory SQLite database (StaticPool, foreign keys
on) and a clean rate limiter.
"""

import os
import sys

# Settings are read once and cached; pin the test environment before any app import
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-only-signing-key-0123456789-abcdefghijklmnop"
os.environ["RATE_LIMIT_BACKEND"] = "memory"
os.environ["DEBUG"] = "false"

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.append(PROJECT_ROOT)

import pytest  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from meapi import models  # noqa: E402,F401
from meapi.db import Base, create_db_engine  # noqa: E402
from meapi.security.rate_limiter import get_rate_limiter  # noqa: E402


@pytest.fixture(scope="function")
def test_db():
    """Create a fresh test database for each test."""
    engine = create_db_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(
        bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
    )

    yield TestingSessionLocal, engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session(test_db):
    """A session for repository-level tests; rolled back afterwards."""
    TestingSessionLocal, _ = test_db
    db_session = TestingSessionLocal()
    try:
        yield db_session
    finally:
        db_session.rollback()
        db_session.close()


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Rate limit counters are process-wide; start every test from zero."""
    limiter = get_rate_limiter()
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def sample_profile_payload():
    return {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "education": "Mathematics, University of London",
        "github_url": "https://github.com/ada",
        "linkedin_url": "",
        "portfolio_url": "https://ada.example.com",
        "skills": ["Python", {"name": "PostgreSQL", "level": 4}, {"name": "Docker"}],
        "projects": [
            {
                "title": "Analytical Engine",
                "description": "Programs for a general-purpose computer.",
                "links": [{"name": "GitHub", "url": "https://github.com/ada/engine"}],
            },
            {
                "title": "Bernoulli Numbers",
                "description": "The first published algorithm.",
            },
        ],
        "workExperience": [
            {
                "company": "Babbage & Co",
                "position": "Analyst",
                "start_date": "1842-01",
                "end_date": "1843-09",
                "description": "Translated and annotated Menabrea's paper.",
            },
            {
                "company": "Royal Society",
                "position": "Correspondent",
                "start_date": "1844-03",
            },
        ],
    }
