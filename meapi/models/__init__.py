"""
SQLAlchemy models for Me-API.

Usage:
    from meapi.models import Profile, Skill, Project, WorkExperience
"""

from .base import Base
from .profile import Profile
from .project import Project
from .skill import DEFAULT_PROFICIENCY, MAX_PROFICIENCY, MIN_PROFICIENCY, Skill
from .work_experience import WorkExperience

__all__ = [
    # Base
    "Base",
    # Profile
    "Profile",
    # Children
    "Skill",
    "Project",
    "WorkExperience",
    # Constants
    "DEFAULT_PROFICIENCY",
    "MIN_PROFICIENCY",
    "MAX_PROFICIENCY",
]
