"""
Configuration Settings for Fragmently.

Pydantic model for runtime defaults, populated from ``FRAGMENTLY_*``
environment variables.
"""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, Field


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class RuntimeSettings(BaseModel):
    """
    Runtime settings.

    Used for type-safe settings access. Every field has a zero-config
    default.
    """

    # Context defaults
    default_channel: str = Field("web", description="Channel used when no base context is given")
    default_locale: str | None = Field(None, description="Locale used when no base context is given")

    # Response defaults
    default_content_type: str = Field(
        "text/html; charset=utf-8", description="Content-Type for rendered responses"
    )

    # Jinja engine
    autoescape: bool = Field(True, description="HTML-escape template variables")
    template_dir: str | None = Field(None, description="Directory for file-based templates")

    # CLI output
    output_dir: str = Field("./dist", description="Base directory for rendered files")
    verbose: bool = False


@lru_cache()
def get_settings() -> RuntimeSettings:
    """
    Get runtime settings from environment.

    Uses lru_cache for singleton pattern.
    """
    return RuntimeSettings(
        default_channel=os.getenv("FRAGMENTLY_DEFAULT_CHANNEL", "web"),
        default_locale=os.getenv("FRAGMENTLY_DEFAULT_LOCALE") or None,
        default_content_type=os.getenv(
            "FRAGMENTLY_DEFAULT_CONTENT_TYPE", "text/html; charset=utf-8"
        ),
        autoescape=_env_flag("FRAGMENTLY_AUTOESCAPE", "true"),
        template_dir=os.getenv("FRAGMENTLY_TEMPLATE_DIR") or None,
        output_dir=os.getenv("FRAGMENTLY_OUTPUT_DIR", "./dist"),
        verbose=_env_flag("FRAGMENTLY_VERBOSE", "false"),
    )


def reset_settings() -> None:
    """Clear the cached settings (for testing)."""
    get_settings.cache_clear()
