"""
Fragmently Rendering Engines

The runtime treats the engine as an opaque collaborator: given a
component handle, props and slots it returns a markup string.

Engines:
- JinjaEngine: Jinja2 templates (default)

Boundary:
- RenderEngine protocol
- EngineBridge: lazy engine creation + context injection
"""

from .base import CONTEXT_PROP, EngineBridge, RenderEngine
from .jinja import JinjaEngine

__all__ = [
    "CONTEXT_PROP",
    "EngineBridge",
    "JinjaEngine",
    "RenderEngine",
]
