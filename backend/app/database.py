"""
Database session dependency for the HTTP layer.

Re-exports from meapi.db:
    from ..database import get_db

Database initialization is handled explicitly in main.py startup, NOT at
import time, so tests can point the app at their own engine through
app.dependency_overrides[get_db].
"""

from meapi.db import db, get_db

__all__ = ["db", "get_db"]
