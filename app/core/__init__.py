"""
Core Module - Configuration and dependency injection.

Service providers live in app.core.dependencies.
"""

from app.core.config import Settings, get_settings, settings

__all__ = [
    "Settings",
    "get_settings",
    "settings",
]
