"""
Fragmently Presets

Presets only pre-populate base context, components and services:

- email_preset: channel "email" + ``email`` service
- cms_preset: block registry + ``cms`` service
- htmx_preset: HTMX fragment endpoints + ``htmx`` service
"""

from .base import PresetConfig
from .cms import CMSService, cms_preset
from .email import EmailMessage, EmailService, email_preset
from .htmx import HTMXService, htmx_preset

__all__ = [
    "CMSService",
    "EmailMessage",
    "EmailService",
    "HTMXService",
    "PresetConfig",
    "cms_preset",
    "email_preset",
    "htmx_preset",
]
