"""
Render context helpers.

A render context is a flat mapping. Fragments merge by shallow override:
keys in a later fragment replace keys in an earlier one, absent keys are
inherited, and ``None`` fragments are skipped.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .errors import InvalidArgumentError
from .types import Channel, RenderContext

if TYPE_CHECKING:
    from .config import RuntimeSettings


def merge_contexts(*fragments: Mapping[str, Any] | None) -> RenderContext:
    """
    Merge context fragments left to right. Later fragments win.

    Args:
        *fragments: Context mappings, lowest priority first

    Returns:
        New merged context

    Raises:
        InvalidArgumentError: If a fragment is not a mapping
    """
    result: RenderContext = {}
    for fragment in fragments:
        if fragment is None:
            continue
        validate_context(fragment)
        result.update(fragment)
    return result


def create_default_context(settings: RuntimeSettings | None = None) -> RenderContext:
    """
    Create the base context used when the caller supplies none.

    Channel defaults to "web"; locale is only present when configured.
    """
    if settings is None:
        return {"channel": Channel.WEB.value}

    context: RenderContext = {"channel": settings.default_channel}
    if settings.default_locale:
        context["locale"] = settings.default_locale
    return context


def validate_context(context: Any) -> None:
    """Raise InvalidArgumentError unless ``context`` is a mapping."""
    if not isinstance(context, Mapping):
        raise InvalidArgumentError(
            f"Context must be a mapping, got {type(context).__name__}"
        )


__all__ = [
    "create_default_context",
    "merge_contexts",
    "validate_context",
]
