"""
Client Configuration
====================

Usage:
    from feast_serving.config import ClientSettings, get_settings
"""

from feast_serving.config.settings import ClientSettings, get_settings

__all__ = [
    "ClientSettings",
    "get_settings",
]
