"""
Repository pattern implementations for data access.

Repositories wrap a SQLAlchemy session; they flush but never commit, so the
caller (one request, one session) decides the transaction boundary.

Usage:
    from meapi.repositories import ProfileRepository
    from meapi.db import db

    with db.session() as session:
        repo = ProfileRepository(session)
        profiles = repo.list_with_children()
"""

from .base import BaseRepository, contains_pattern
from .profile_repository import ProfileRepository
from .project_repository import ProjectRepository
from .skill_repository import SkillRepository
from .work_experience_repository import WorkExperienceRepository

__all__ = [
    "BaseRepository",
    "contains_pattern",
    "ProfileRepository",
    "ProjectRepository",
    "SkillRepository",
    "WorkExperienceRepository",
]
