"""
HTTP adapter for Fragmently.

Turns rendered markup into starlette responses and mounts a FastAPI
router that serves registered components as HTML fragments (for HTMX
swaps, widget embeds, preview cards).

Error mapping:
    NotFoundError -> 404 "Component not found: <id>"
    anything else -> 500 "Error rendering component: <message>"

Usage:
    app = FastAPI()
    app.include_router(create_fragment_router(runtime, prefix="/fragments"))

    # GET /fragments/hero?title=Hello  ->  render_to_string("hero", props={"title": "Hello"})
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl, urlsplit

from fastapi import APIRouter, Request
from starlette.responses import PlainTextResponse, Response

from fragmently.errors import NotFoundError

if TYPE_CHECKING:
    from fragmently.runtime import FragmentRuntime

logger = logging.getLogger(__name__)

# Query parameters routed into the render context instead of props
CONTEXT_QUERY_PARAMS = ("channel", "locale")


@dataclass
class AdapterOptions:
    """
    Response defaults for HTTP handlers.

    Attributes:
        default_status: Status for successful renders
        default_content_type: Content-Type for successful renders
        default_headers: Headers added to every successful response
        cache_control: Cache-Control header value, if any
    """

    default_status: int = 200
    default_content_type: str = "text/html; charset=utf-8"
    default_headers: dict[str, str] = field(default_factory=dict)
    cache_control: str | None = None

    def build_headers(self) -> dict[str, str]:
        headers = {"Content-Type": self.default_content_type, **self.default_headers}
        if self.cache_control:
            headers["Cache-Control"] = self.cache_control
        return headers


def _html_response(html: str, options: AdapterOptions) -> Response:
    return Response(content=html, status_code=options.default_status, headers=options.build_headers())


def _error_response(error: Exception) -> Response:
    return PlainTextResponse(f"Error rendering component: {error}", status_code=500)


def create_component_handler(runtime: FragmentRuntime, options: AdapterOptions | None = None):
    """
    Create a handler that renders component handles to responses.

    Returns:
        ``async handler(component, props=None, context=None) -> Response``
    """
    options = options or AdapterOptions()

    async def handler(
        component: Any,
        props: Mapping[str, Any] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Response:
        try:
            html = await runtime.render_component(component, props, context)
        except Exception as e:
            logger.error(f"[http] Render failed: {e}", exc_info=True)
            return _error_response(e)
        return _html_response(html, options)

    return handler


def create_route_handler(runtime: FragmentRuntime, options: AdapterOptions | None = None):
    """
    Create a handler that renders registered components by id.

    Returns:
        ``async handler(component_id, props=None, context=None) -> Response``
    """
    options = options or AdapterOptions()

    async def route_handler(
        component_id: str,
        props: Mapping[str, Any] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Response:
        try:
            html = await runtime.render_to_string(component_id, props=props, context=context)
        except NotFoundError:
            logger.info(f"[http] Component not found: {component_id}")
            return PlainTextResponse(f"Component not found: {component_id}", status_code=404)
        except Exception as e:
            logger.error(f"[http] Render failed for '{component_id}': {e}", exc_info=True)
            return _error_response(e)
        return _html_response(html, options)

    return route_handler


def parse_query_props(url: str) -> dict[str, str]:
    """Parse a URL's query string into props. Later duplicates win."""
    return dict(parse_qsl(urlsplit(url).query, keep_blank_values=True))


def split_context_params(params: Mapping[str, str]) -> tuple[dict[str, str], dict[str, str]]:
    """Split query parameters into (props, context)."""
    props: dict[str, str] = {}
    context: dict[str, str] = {}
    for key, value in params.items():
        if key in CONTEXT_QUERY_PARAMS:
            context[key] = value
        else:
            props[key] = value
    return props, context


def create_fragment_router(
    runtime: FragmentRuntime,
    *,
    prefix: str = "/fragments",
    options: AdapterOptions | None = None,
    tags: list[str] | None = None,
) -> APIRouter:
    """
    Create a FastAPI router serving registered components.

    ``channel`` and ``locale`` query parameters go into the render
    context; every other parameter becomes a prop.
    """
    router = APIRouter(prefix=prefix, tags=tags or ["fragments"])
    route_handler = create_route_handler(runtime, options)

    @router.get("/{component_id}")
    async def render_fragment(component_id: str, request: Request) -> Response:
        props, context = split_context_params(dict(request.query_params))
        return await route_handler(component_id, props, context or None)

    return router


__all__ = [
    "AdapterOptions",
    "create_component_handler",
    "create_fragment_router",
    "create_route_handler",
    "parse_query_props",
    "split_context_params",
]
