"""
Backend services for Me-API.
"""

from .profile_service import ProfileService
from .query_service import QueryService

__all__ = ["ProfileService", "QueryService"]
