"""
Application configuration for the HTTP layer.

Re-exports the unified meapi.config module so routers and middleware can
import settings relative to the app package:
    from ..config import get_settings
"""

from meapi.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
