"""Skill repository with frequency aggregates."""

from sqlalchemy import distinct, func

from meapi.models import Skill

from .base import BaseRepository, contains_pattern


class SkillRepository(BaseRepository[Skill]):
    """Repository for Skill operations."""

    model = Skill

    def list_alphabetical(self, profile_id: int | None = None) -> list[Skill]:
        """All skills ordered by name, optionally for one profile."""
        query = self.session.query(Skill)
        if profile_id is not None:
            query = query.filter(Skill.profile_id == profile_id)
        return query.order_by(Skill.skill_name.asc(), Skill.id.asc()).all()

    def top_by_frequency(self, limit: int) -> list[tuple[str, int, float | None]]:
        """
        Group skills by name, most frequent first.

        Ties are broken by name so repeated calls return the same order.

        Returns:
            List of (skill_name, frequency, average proficiency) tuples
        """
        frequency = func.count(Skill.id).label("frequency")
        rows = (
            self.session.query(
                Skill.skill_name,
                frequency,
                func.avg(Skill.proficiency_level).label("average_proficiency"),
            )
            .group_by(Skill.skill_name)
            .order_by(frequency.desc(), Skill.skill_name.asc())
            .limit(limit)
            .all()
        )
        return [
            (name, int(count), float(avg) if avg is not None else None)
            for name, count, avg in rows
        ]

    def count_distinct_names(self) -> int:
        """Number of distinct skill names across all profiles."""
        return self.session.query(func.count(distinct(Skill.skill_name))).scalar() or 0

    def search(self, term: str, limit: int, offset: int) -> list[Skill]:
        """Case-insensitive substring match on the skill name, strongest first."""
        return (
            self.session.query(Skill)
            .filter(Skill.skill_name.ilike(contains_pattern(term), escape="\\"))
            .order_by(Skill.proficiency_level.desc(), Skill.id.asc())
            .offset(offset)
            .limit(limit)
            .all()
        )
