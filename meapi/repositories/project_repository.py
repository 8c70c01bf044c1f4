"""Project repository."""

from sqlalchemy import func, or_
from sqlalchemy.orm import joinedload

from meapi.models import Profile, Project, Skill

from .base import BaseRepository, contains_pattern


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project operations."""

    model = Project

    def list_by_skill(
        self,
        skill: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[list[Project], int]:
        """
        Page through projects newest-first.

        When `skill` is given, only projects whose owning profile has a skill
        containing it (case-insensitive) are returned.

        Returns:
            Tuple of (projects on this page, total matching projects)
        """
        query = self.session.query(Project)
        if skill:
            query = query.filter(
                Project.profile.has(
                    Profile.skills.any(
                        Skill.skill_name.ilike(contains_pattern(skill), escape="\\")
                    )
                )
            )

        total = query.with_entities(func.count(Project.id)).scalar() or 0
        projects = (
            query.options(joinedload(Project.profile))
            .order_by(Project.created_at.desc(), Project.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return projects, total

    def search(self, term: str, limit: int, offset: int) -> list[Project]:
        """Case-insensitive substring match on title and description."""
        pattern = contains_pattern(term)
        return (
            self.session.query(Project)
            .filter(
                or_(
                    Project.title.ilike(pattern, escape="\\"),
                    Project.description.ilike(pattern, escape="\\"),
                )
            )
            .order_by(Project.created_at.desc(), Project.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
