"""
Rendering engine boundary.

The merged render context reaches the engine as the reserved prop
``__context``; the runtime never inspects engine internals.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from fragmently.config import RuntimeSettings

logger = logging.getLogger(__name__)

CONTEXT_PROP = "__context"


@runtime_checkable
class RenderEngine(Protocol):
    """
    Protocol for rendering engines.

    Implementations raise EngineError on an invalid component or a
    rendering fault.
    """

    async def render(
        self,
        component: Any,
        *,
        props: Mapping[str, Any] | None = None,
        slots: Mapping[str, Any] | None = None,
    ) -> str:
        """Render a component handle to markup."""
        ...


class EngineBridge:
    """
    Stable interface between the runtime and its rendering engine.

    Creates the engine on first render and injects the render context
    into props.
    """

    def __init__(
        self,
        engine: RenderEngine | None = None,
        *,
        engine_factory: Callable[[], RenderEngine] | None = None,
        settings: RuntimeSettings | None = None,
    ):
        """
        Initialize bridge.

        Args:
            engine: Ready engine instance
            engine_factory: Builds the engine lazily when no instance is given
            settings: Settings for the default Jinja engine
        """
        self._engine = engine
        self._engine_factory = engine_factory
        self._settings = settings
        # Engines handed in by the caller outlive dispose()
        self._owns_engine = engine is None

    @property
    def engine(self) -> RenderEngine:
        """Get or create the engine instance."""
        if self._engine is None:
            if self._engine_factory is not None:
                self._engine = self._engine_factory()
            else:
                from .jinja import JinjaEngine

                self._engine = JinjaEngine.from_settings(self._settings)
            logger.debug(f"[engine] Created engine: {type(self._engine).__name__}")
        return self._engine

    async def render(
        self,
        component: Any,
        *,
        props: Mapping[str, Any] | None = None,
        slots: Mapping[str, Any] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> str:
        """
        Render a component, passing the context as the ``__context`` prop.

        Args:
            component: Component handle understood by the engine
            props: Component props
            slots: Named slot contents
            context: Merged render context
        """
        render_props: dict[str, Any] = dict(props or {})
        if context is not None:
            render_props[CONTEXT_PROP] = dict(context)

        return await self.engine.render(component, props=render_props, slots=dict(slots or {}))

    def dispose(self) -> None:
        """Drop an engine the bridge created; the next render creates a fresh one."""
        if self._owns_engine and self._engine is not None:
            self._engine = None
            logger.debug("[engine] Disposed engine")
