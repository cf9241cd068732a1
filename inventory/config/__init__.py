"""
==============================================================================
Configuration Package
==============================================================================

Centralized configuration management using Pydantic Settings.

Usage:
------
    from inventory.config import get_settings, Settings

    settings = get_settings()
    print(settings.port)

==============================================================================
"""

from .settings import Settings, UDP_MAX_PAYLOAD, get_settings

__all__ = [
    "Settings",
    "UDP_MAX_PAYLOAD",
    "get_settings",
]
