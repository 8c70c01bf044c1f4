"""Base repository class with common CRUD operations."""

from typing import Generic, TypeVar

from sqlalchemy import func
from sqlalchemy.orm import Session

from meapi.db import Base

T = TypeVar("T", bound=Base)


def contains_pattern(term: str) -> str:
    """
    Build a LIKE pattern matching `term` anywhere in a column.

    LIKE wildcards in the term are escaped with a backslash so they match
    literally; pair with `escape="\\\\"` on the ilike() call.
    """
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class BaseRepository(Generic[T]):
    """
    Base repository providing common CRUD operations.

    Usage:
        class ProjectRepository(BaseRepository[Project]):
            model = Project

        repo = ProjectRepository(session)
        project = repo.get_by_id(1)
    """

    model: type[T]

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, id: int) -> T | None:
        """Get a single record by ID."""
        return self.session.get(self.model, id)

    def delete(self, id: int) -> bool:
        """Delete a record by ID."""
        instance = self.get_by_id(id)
        if instance:
            self.session.delete(instance)
            self.session.flush()
            return True
        return False

    def count(self, **filters) -> int:
        """Get count of records, optionally filtered."""
        query = self.session.query(func.count(self.model.id))  # type: ignore[attr-defined]
        for key, value in filters.items():
            if not hasattr(self.model, key):
                raise ValueError(f"Unknown filter key: {key}")
            query = query.filter(getattr(self.model, key) == value)
        return query.scalar() or 0

