"""
Fragmently Adapters

Protocol adapters that take a runtime and map rendered markup onto a
transport:

- http: starlette responses and a FastAPI fragment router
- cli: stdout / file output and the ``fragmently`` console command
"""

from .cli import BatchItem, CLIRenderer, RenderResult, run_cli
from .http import (
    AdapterOptions,
    create_component_handler,
    create_fragment_router,
    create_route_handler,
    parse_query_props,
)

__all__ = [
    "AdapterOptions",
    "BatchItem",
    "CLIRenderer",
    "RenderResult",
    "create_component_handler",
    "create_fragment_router",
    "create_route_handler",
    "parse_query_props",
    "run_cli",
]
