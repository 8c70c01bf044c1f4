"""
Me-API core library.

This package provides the profile store behind the HTTP API: configuration,
database management, models, repositories, rate limiting and logging.

Usage:
    # Database
    from meapi.db import db, get_db
    from meapi.models import Profile, Skill, Project, WorkExperience
    from meapi.repositories import ProfileRepository

    # Config
    from meapi.config import get_settings, Settings

    # Logging
    from meapi.logging import get_logger, configure_logging
"""

__version__ = "1.0.0"
