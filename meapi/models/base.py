"""
Base model class for SQLAlchemy ORM.

Re-exports the Base class from the database module for convenience.
"""

from datetime import datetime, timezone

from meapi.db import Base


def utcnow() -> datetime:
    """Timestamp default shared by every model."""
    return datetime.now(timezone.utc)


__all__ = ["Base", "utcnow"]
