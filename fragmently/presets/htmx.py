"""
HTMX preset.

Configures the runtime for hypermedia fragment endpoints (HTMX swaps,
Alpine.js islands): channel "web" plus an ``htmx`` service for HX-*
request inspection and response headers.

Usage:
    runtime = create_runtime(htmx_preset(locale="de").to_runtime_config())
    htmx = await runtime.get_service("htmx")

    if htmx.is_htmx_request(request.headers):
        headers = htmx.response_headers(trigger="cart-updated")
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from fragmently.types import Channel, ServiceDefinition

from .base import PresetConfig

if TYPE_CHECKING:
    from fragmently.runtime import FragmentRuntime


def _header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


class HTMXService:
    """HTMX request/response helpers."""

    def __init__(self, runtime: FragmentRuntime | None = None):
        self._runtime = runtime

    def response_headers(
        self,
        *,
        retarget: str | None = None,
        reswap: str | None = None,
        trigger: str | None = None,
        refresh: bool = False,
        redirect: str | None = None,
        push_url: str | None = None,
    ) -> dict[str, str]:
        """Build HX-* response headers for the given options."""
        headers: dict[str, str] = {}
        if retarget:
            headers["HX-Retarget"] = retarget
        if reswap:
            headers["HX-Reswap"] = reswap
        if trigger:
            headers["HX-Trigger"] = trigger
        if refresh:
            headers["HX-Refresh"] = "true"
        if redirect:
            headers["HX-Redirect"] = redirect
        if push_url:
            headers["HX-Push-Url"] = push_url
        return headers

    def is_htmx_request(self, headers: Mapping[str, str]) -> bool:
        return _header(headers, "HX-Request") == "true"

    def trigger_info(self, headers: Mapping[str, str]) -> dict[str, str | None]:
        """Describe the element that triggered an HTMX request."""
        return {
            "id": _header(headers, "HX-Trigger"),
            "name": _header(headers, "HX-Trigger-Name"),
            "target": _header(headers, "HX-Target"),
            "current_url": _header(headers, "HX-Current-URL"),
        }


def htmx_preset(*, locale: str = "en", htmx_headers: bool = True) -> PresetConfig:
    """
    Build the HTMX preset.

    Args:
        locale: Default locale
        htmx_headers: Whether fragment endpoints emit HX-* headers
    """
    return PresetConfig(
        base_context={
            "locale": locale,
            "channel": Channel.WEB.value,
            "framework": "htmx",
            "htmx": htmx_headers,
        },
        services=[ServiceDefinition(name="htmx", factory=HTMXService)],
    )
