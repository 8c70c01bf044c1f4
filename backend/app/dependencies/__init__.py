"""
FastAPI dependency injection module.

Services are built per request around the request's database session.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..services import ProfileService, QueryService


def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    """Get ProfileService bound to the request session."""
    return ProfileService(db)


def get_query_service(db: Session = Depends(get_db)) -> QueryService:
    """Get QueryService bound to the request session."""
    return QueryService(db)


__all__ = [
    "get_profile_service",
    "get_query_service",
]
