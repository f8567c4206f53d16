"""
Fragmently Configuration

Environment-driven settings for runtime defaults.
"""

from .settings import RuntimeSettings, get_settings, reset_settings

__all__ = [
    "RuntimeSettings",
    "get_settings",
    "reset_settings",
]
