"""
Profile management service.

Turns validated request bodies into repository calls and ORM rows into the
public JSON contract (snake_case columns, camelCase collection keys).
"""

from typing import Any

from fastapi import status
from sqlalchemy.orm import Session

from meapi.errors import AppError, ErrorCode
from meapi.logging import get_logger
from meapi.models import Profile, Project, Skill, WorkExperience
from meapi.repositories import ProfileRepository, ProjectRepository, WorkExperienceRepository

from ..schemas import ProfileRequest

logger = get_logger("profile")


# =============================================================================
# Reshaping
# =============================================================================


def skill_level_to_dict(skill: Skill) -> dict[str, Any]:
    return {"skill_name": skill.skill_name, "proficiency_level": skill.proficiency_level}


def project_to_dict(project: Project) -> dict[str, Any]:
    return {
        "id": project.id,
        "title": project.title,
        "description": project.description,
        "links": project.links or [],
        "created_at": project.created_at,
    }


def work_to_dict(work: WorkExperience) -> dict[str, Any]:
    return {
        "id": work.id,
        "company": work.company,
        "position": work.position,
        "start_date": work.start_date,
        "end_date": work.end_date,
        "description": work.description,
    }


def profile_summary(profile: Profile) -> dict[str, Any]:
    """Scalar fields only."""
    return {
        "id": profile.id,
        "name": profile.name,
        "email": profile.email,
        "education": profile.education,
        "github_url": profile.github_url,
        "linkedin_url": profile.linkedin_url,
        "portfolio_url": profile.portfolio_url,
        "created_at": profile.created_at,
        "updated_at": profile.updated_at,
    }


def profile_to_dict(profile: Profile) -> dict[str, Any]:
    """A profile with its nested collections, work experience newest-first."""
    return {
        **profile_summary(profile),
        "skills": [skill.skill_name for skill in profile.skills],
        "skillsWithLevel": [skill_level_to_dict(skill) for skill in profile.skills],
        "projects": [project_to_dict(project) for project in profile.projects],
        "workExperience": [work_to_dict(work) for work in profile.work_experience],
    }


def parse_row_id(raw_id: str, code: str, label: str) -> int:
    """
    Parse a path id, answering 400 with `code` when it is not an integer.

    Zero and negative ids parse; the lookup then answers 404.
    """
    if not raw_id.removeprefix("-").isdecimal():
        raise AppError(
            f"Invalid {label} ID",
            status_code=status.HTTP_400_BAD_REQUEST,
            code=code,
        )
    return int(raw_id)


# =============================================================================
# Service
# =============================================================================


class ProfileService:
    """
    Profile CRUD bound to one request session.

    Write methods commit before returning, so a failed commit surfaces as an
    error response instead of after a success status has been sent.
    """

    def __init__(self, session: Session):
        self.session = session
        self.profiles = ProfileRepository(session)
        self.projects = ProjectRepository(session)
        self.work = WorkExperienceRepository(session)

    def list_profiles(self) -> list[dict[str, Any]]:
        profiles = self.profiles.list_with_children()
        if not profiles:
            raise AppError(
                "No profiles found",
                status_code=status.HTTP_404_NOT_FOUND,
                code=ErrorCode.PROFILES_NOT_FOUND,
            )
        logger.info("profiles_fetched", count=len(profiles))
        return [profile_to_dict(profile) for profile in profiles]

    def create_profile(self, payload: ProfileRequest) -> Profile:
        """Create a profile and all of its children, committed before returning."""
        if self.profiles.get_by_email(payload.email) is not None:
            raise AppError(
                "Profile with this email already exists. Use PUT to update.",
                status_code=status.HTTP_409_CONFLICT,
                code=ErrorCode.PROFILE_EXISTS,
            )

        profile = self.profiles.create_with_children(
            payload.profile_fields(),
            skills=payload.skill_rows(),
            projects=payload.project_rows(),
            work_experience=payload.work_rows(),
        )
        self.session.commit()
        logger.info(
            "profile_created",
            profile_id=profile.id,
            skills=len(payload.skills),
            projects=len(payload.projects),
            work_experience=len(payload.work_experience),
        )
        return profile

    def update_latest_profile(self, payload: ProfileRequest) -> Profile:
        """Full-replace the most recently created profile."""
        profile = self.profiles.get_latest()
        if profile is None:
            raise self._profile_not_found()
        return self._replace(profile, payload)

    def update_profile(self, profile_id: int, payload: ProfileRequest) -> Profile:
        """Full-replace one profile by id."""
        profile = self.profiles.get_by_id(profile_id)
        if profile is None:
            raise self._profile_not_found()
        return self._replace(profile, payload)

    def delete_all_profiles(self) -> int:
        deleted = self.profiles.delete_all()
        if deleted == 0:
            raise self._profile_not_found()
        self.session.commit()
        logger.info("profiles_deleted", count=deleted)
        return deleted

    def delete_profile(self, profile_id: int) -> None:
        if not self.profiles.delete(profile_id):
            raise self._profile_not_found()
        self.session.commit()
        logger.info("profile_deleted", profile_id=profile_id)

    def delete_project(self, raw_id: str) -> None:
        project_id = parse_row_id(raw_id, ErrorCode.INVALID_PROJECT_ID, "project")
        if not self.projects.delete(project_id):
            raise AppError(
                "Project not found",
                status_code=status.HTTP_404_NOT_FOUND,
                code=ErrorCode.PROJECT_NOT_FOUND,
            )
        self.session.commit()
        logger.info("project_deleted", project_id=project_id)

    def delete_work_experience(self, raw_id: str) -> None:
        work_id = parse_row_id(raw_id, ErrorCode.INVALID_WORK_ID, "work experience")
        if not self.work.delete(work_id):
            raise AppError(
                "Work experience not found",
                status_code=status.HTTP_404_NOT_FOUND,
                code=ErrorCode.WORK_NOT_FOUND,
            )
        self.session.commit()
        logger.info("work_experience_deleted", work_id=work_id)

    def _replace(self, profile: Profile, payload: ProfileRequest) -> Profile:
        holder = self.profiles.get_by_email(payload.email)
        if holder is not None and holder.id != profile.id:
            raise AppError(
                "Another profile already uses this email",
                status_code=status.HTTP_409_CONFLICT,
                code=ErrorCode.PROFILE_EXISTS,
            )

        self.profiles.replace(
            profile,
            payload.profile_fields(),
            skills=payload.skill_rows(),
            projects=payload.project_rows(),
            work_experience=payload.work_rows(),
        )
        self.session.commit()
        logger.info(
            "profile_updated",
            profile_id=profile.id,
            skills=len(payload.skills),
            projects=len(payload.projects),
            work_experience=len(payload.work_experience),
        )
        return profile

    @staticmethod
    def _profile_not_found() -> AppError:
        return AppError(
            "Profile not found",
            status_code=status.HTTP_404_NOT_FOUND,
            code=ErrorCode.PROFILE_NOT_FOUND,
        )
