"""Work experience repository."""

from sqlalchemy import or_

from meapi.models import WorkExperience

from .base import BaseRepository, contains_pattern


class WorkExperienceRepository(BaseRepository[WorkExperience]):
    """Repository for WorkExperience operations."""

    model = WorkExperience

    def search(self, term: str, limit: int, offset: int) -> list[WorkExperience]:
        """Case-insensitive substring match on company, position and description."""
        pattern = contains_pattern(term)
        return (
            self.session.query(WorkExperience)
            .filter(
                or_(
                    WorkExperience.company.ilike(pattern, escape="\\"),
                    WorkExperience.position.ilike(pattern, escape="\\"),
                    WorkExperience.description.ilike(pattern, escape="\\"),
                )
            )
            .order_by(WorkExperience.start_date.desc(), WorkExperience.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
