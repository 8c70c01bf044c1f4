"""
Read-only queries: project listing, skill aggregates, search and stats.
"""

from typing import Any

from fastapi import status
from sqlalchemy.orm import Session

from meapi.errors import AppError, ErrorCode
from meapi.logging import get_logger
from meapi.repositories import (
    ProfileRepository,
    ProjectRepository,
    SkillRepository,
    WorkExperienceRepository,
)

from ..schemas import SearchType
from .profile_service import profile_summary, project_to_dict, skill_level_to_dict, work_to_dict

logger = get_logger("queries")

MAX_TOP_SKILLS = 50
STATS_TOP_SKILLS = 5


class QueryService:
    """Read-side queries bound to one request session."""

    def __init__(self, session: Session):
        self.session = session
        self.profiles = ProfileRepository(session)
        self.projects = ProjectRepository(session)
        self.skills = SkillRepository(session)
        self.work = WorkExperienceRepository(session)

    def list_projects(self, skill: str | None, limit: int, offset: int) -> dict[str, Any]:
        """
        Page of projects newest-first, optionally filtered by a skill of the owner.

        hasMore is true while rows remain past this page.
        """
        projects, total = self.projects.list_by_skill(skill, limit=limit, offset=offset)
        logger.info("projects_fetched", skill=skill, count=len(projects), total=total)
        return {
            "projects": [
                {
                    **project_to_dict(project),
                    "profile_id": project.profile_id,
                    "profile_name": project.profile.name if project.profile else None,
                }
                for project in projects
            ],
            "pagination": {
                "limit": limit,
                "offset": offset,
                "total": total,
                "hasMore": offset + limit < total,
            },
        }

    def top_skills(self, limit: int) -> dict[str, Any]:
        rows = self.skills.top_by_frequency(min(limit, MAX_TOP_SKILLS))
        return {
            "skills": [
                {
                    "name": name,
                    "frequency": frequency,
                    "averageProficiency": round(average, 1) if average is not None else None,
                }
                for name, frequency, average in rows
            ]
        }

    def search(self, q: str | None, search_type: SearchType, limit: int, offset: int) -> dict[str, Any]:
        """
        Substring search across the selected buckets.

        Every bucket is paginated on its own with the same limit and offset;
        buckets that were not selected come back empty.
        """
        term = (q or "").strip()
        if not term:
            raise AppError(
                "Search query is required",
                status_code=status.HTTP_400_BAD_REQUEST,
                code=ErrorCode.SEARCH_QUERY_REQUIRED,
            )

        def wanted(bucket: SearchType) -> bool:
            return search_type in (SearchType.all, bucket)

        results: dict[str, list[dict[str, Any]]] = {
            "profiles": [],
            "projects": [],
            "skills": [],
            "workExperience": [],
        }
        if wanted(SearchType.profiles):
            results["profiles"] = [
                profile_summary(profile) for profile in self.profiles.search(term, limit, offset)
            ]
        if wanted(SearchType.projects):
            results["projects"] = [
                {**project_to_dict(project), "profile_id": project.profile_id}
                for project in self.projects.search(term, limit, offset)
            ]
        if wanted(SearchType.skills):
            results["skills"] = [
                {**skill_level_to_dict(skill), "id": skill.id, "profile_id": skill.profile_id}
                for skill in self.skills.search(term, limit, offset)
            ]
        if wanted(SearchType.work):
            results["workExperience"] = [
                {**work_to_dict(work), "profile_id": work.profile_id}
                for work in self.work.search(term, limit, offset)
            ]

        logger.info(
            "search_complete",
            query=term,
            type=search_type.value,
            hits={bucket: len(items) for bucket, items in results.items()},
        )
        return {
            "query": term,
            "type": search_type.value,
            "results": results,
            "pagination": {"limit": limit, "offset": offset},
        }

    def list_skills(self, profile_id: int | None = None) -> dict[str, Any]:
        skills = self.skills.list_alphabetical(profile_id)
        return {
            "skills": [
                {"name": skill.skill_name, "proficiency": skill.proficiency_level}
                for skill in skills
            ]
        }

    def stats(self) -> dict[str, Any]:
        top = self.skills.top_by_frequency(STATS_TOP_SKILLS)
        return {
            "total_profiles": self.profiles.count(),
            "total_projects": self.projects.count(),
            "unique_skills": self.skills.count_distinct_names(),
            "total_work_experience": self.work.count(),
            "topSkills": [{"name": name, "frequency": frequency} for name, frequency, _ in top],
        }
