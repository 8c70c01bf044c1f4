"""Profile repository."""

from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import selectinload

from meapi.models import Profile, Project, Skill, WorkExperience

from .base import BaseRepository, contains_pattern

PROFILE_FIELDS = (
    "name",
    "email",
    "education",
    "github_url",
    "linkedin_url",
    "portfolio_url",
)


class ProfileRepository(BaseRepository[Profile]):
    """
    Repository for Profile operations.

    Child rows are passed as plain mappings:
        skills: {"skill_name", "proficiency_level"}
        projects: {"title", "description", "links"}
        work_experience: {"company", "position", "start_date", "end_date", "description"}
    """

    model = Profile

    def get_by_email(self, email: str) -> Profile | None:
        """Get profile by email."""
        return self.session.query(Profile).filter(Profile.email == email).first()

    def get_latest(self) -> Profile | None:
        """Get the most recently created profile."""
        return (
            self.session.query(Profile)
            .order_by(Profile.created_at.desc(), Profile.id.desc())
            .first()
        )

    def list_with_children(self) -> list[Profile]:
        """All profiles newest-first with skills, projects and work experience loaded."""
        return (
            self.session.query(Profile)
            .options(
                selectinload(Profile.skills),
                selectinload(Profile.projects),
                selectinload(Profile.work_experience),
            )
            .order_by(Profile.created_at.desc(), Profile.id.desc())
            .all()
        )

    def create_with_children(
        self,
        fields: Mapping[str, Any],
        skills: Iterable[Mapping[str, Any]] = (),
        projects: Iterable[Mapping[str, Any]] = (),
        work_experience: Iterable[Mapping[str, Any]] = (),
    ) -> Profile:
        """Create a profile and its children in the current transaction."""
        profile = Profile(**{key: fields.get(key) for key in PROFILE_FIELDS})
        profile.skills = [Skill(**skill) for skill in skills]
        profile.projects = [Project(**project) for project in projects]
        profile.work_experience = [WorkExperience(**work) for work in work_experience]
        self.session.add(profile)
        self.session.flush()
        return profile

    def replace(
        self,
        profile: Profile,
        fields: Mapping[str, Any],
        skills: Iterable[Mapping[str, Any]] = (),
        projects: Iterable[Mapping[str, Any]] = (),
        work_experience: Iterable[Mapping[str, Any]] = (),
    ) -> Profile:
        """
        Full-replace update.

        Scalar fields are overwritten, then every skill, project and work row
        of the profile is deleted and the supplied sets are inserted. Nothing
        is merged: an empty iterable leaves the collection empty.
        """
        for key in PROFILE_FIELDS:
            setattr(profile, key, fields.get(key))

        for child in (Skill, Project, WorkExperience):
            self.session.query(child).filter(child.profile_id == profile.id).delete(
                synchronize_session=False
            )
        self.session.expire(profile, ["skills", "projects", "work_experience"])

        self.session.add_all(
            [Skill(profile_id=profile.id, **skill) for skill in skills]
            + [Project(profile_id=profile.id, **project) for project in projects]
            + [WorkExperience(profile_id=profile.id, **work) for work in work_experience]
        )
        self.session.flush()
        return profile

    def delete_all(self) -> int:
        """Delete every profile (children cascade). Returns the number of profiles removed."""
        deleted = self.session.query(Profile).delete(synchronize_session=False)
        self.session.expire_all()
        return deleted

    def search(self, term: str, limit: int, offset: int) -> list[Profile]:
        """Case-insensitive substring match on name, email and education."""
        pattern = contains_pattern(term)
        return (
            self.session.query(Profile)
            .filter(
                or_(
                    Profile.name.ilike(pattern, escape="\\"),
                    Profile.email.ilike(pattern, escape="\\"),
                    Profile.education.ilike(pattern, escape="\\"),
                )
            )
            .order_by(Profile.created_at.desc(), Profile.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
