"""
Fragment Runtime.

The public surface of Fragmently: renders pre-defined components to
markup outside a page pipeline, for web fragments, email, social-preview
cards and embeddable widgets.

Design Principle:
    The runtime only orchestrates. Markup comes from the rendering
    engine; the runtime tracks components, resolves them lazily,
    merges context and builds services on demand.

Flow:
    render_to_string(component_id)
        1. Registry lookup (NotFoundError if absent)
        2. ResolutionCache.resolve (loader runs once per id)
        3. merge_contexts(base, override)
        4. EngineBridge.render
        5. Prefix inline styles, if the entry has any

State:
    Registry, resolution cache, services and base context all belong to
    one runtime instance. Rendering never mutates them.

Usage:
    runtime = create_runtime(RuntimeConfig(
        base_context={"locale": "de", "channel": "web"},
        components=[RegistryEntry("hero", load_hero)],
    ))
    html = await runtime.render_to_string("hero", props={"title": "Hallo"})
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from starlette.responses import Response

from .config import RuntimeSettings, get_settings
from .context import create_default_context, merge_contexts, validate_context
from .engine import EngineBridge, RenderEngine
from .errors import FragmentError, NotFoundError, RenderError
from .registry import ComponentRegistry
from .resolution import ResolutionCache
from .services import ServiceLocator
from .types import (
    ComponentFilter,
    ComponentLoader,
    ComponentMeta,
    RegistryEntry,
    RenderContext,
    ResponseOptions,
    RuntimeConfig,
    ServiceDefinition,
    ServiceFactory,
)

logger = logging.getLogger(__name__)


class FragmentRuntime:
    """
    Renders registered components and ad-hoc component handles.

    Example:
        runtime = FragmentRuntime()
        runtime.register_component("card", load_card, {"category": "og"})
        runtime.register_service("email", make_email_service)

        html = await runtime.render_to_string("card", props={"title": "Hi"})
        email = await runtime.get_service("email")
    """

    def __init__(
        self,
        config: RuntimeConfig | None = None,
        *,
        engine: RenderEngine | None = None,
        engine_factory: Callable[[], RenderEngine] | None = None,
        settings: RuntimeSettings | None = None,
    ):
        """
        Initialize runtime.

        Args:
            config: Base context, components and services to start with
            engine: Rendering engine (default: JinjaEngine, created lazily)
            engine_factory: Builds the engine on first render
            settings: Runtime settings (default: from environment)
        """
        config = config or RuntimeConfig()
        self._settings = settings or get_settings()
        self._bridge = EngineBridge(engine, engine_factory=engine_factory, settings=self._settings)
        self._registry = ComponentRegistry()
        self._cache = ResolutionCache()
        self._services = ServiceLocator(self)

        if config.base_context is not None:
            validate_context(config.base_context)
            self._base_context: RenderContext = dict(config.base_context)
        else:
            self._base_context = create_default_context(self._settings)

        if config.components:
            self._registry.register_many(config.components)

        for service in config.services or ():
            self._services.register(service.name, service.factory)

        logger.debug(
            f"[runtime] Created runtime | "
            f"components={len(self._registry)} | "
            f"services={len(self._services)}"
        )

    # ==================== Rendering ====================

    async def render_component(
        self,
        component: Any,
        props: Mapping[str, Any] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> str:
        """
        Render a component handle to markup.

        Args:
            component: Component handle understood by the engine
            props: Component props
            context: Per-call context, merged over the base context

        Raises:
            RenderError: If the engine fails
        """
        merged = merge_contexts(self._base_context, context)
        return await self._render(component, props=props, context=merged)

    async def render_to_string(
        self,
        component_id: str,
        *,
        props: Mapping[str, Any] | None = None,
        context: Mapping[str, Any] | None = None,
        slots: Mapping[str, Any] | None = None,
    ) -> str:
        """
        Render a registered component by id.

        Args:
            component_id: Registry id
            props: Component props
            context: Per-call context, merged over the base context
            slots: Named slot contents

        Returns:
            Markup, prefixed with a style block when the entry has inline styles

        Raises:
            NotFoundError: If the id is not registered (engine is never called)
            ResolutionError: If the loader yields no component
            RenderError: If the engine fails
        """
        entry = self._registry.get(component_id)
        if entry is None:
            raise NotFoundError("component", component_id)

        component = await self._cache.resolve(entry)
        merged = merge_contexts(self._base_context, context)
        html = await self._render(
            component,
            props=props,
            slots=slots,
            context=merged,
            component_id=component_id,
        )

        if entry.meta.styles:
            html = f"<style>{entry.meta.styles}</style>{html}"
        return html

    async def render_to_response(
        self,
        component: Any,
        props: Mapping[str, Any] | None = None,
        options: ResponseOptions | None = None,
        *,
        context: Mapping[str, Any] | None = None,
    ) -> Response:
        """
        Render a component and wrap it in an HTTP response.

        Status defaults to 200 and Content-Type to
        ``text/html; charset=utf-8``. Caller headers are kept; an
        explicit Content-Type header wins over ``options.content_type``.
        """
        options = options or ResponseOptions()
        html = await self.render_component(component, props, context)

        headers = dict(options.headers or {})
        if not any(key.lower() == "content-type" for key in headers):
            headers["Content-Type"] = options.content_type or self._settings.default_content_type

        return Response(content=html, status_code=options.status, headers=headers)

    async def _render(
        self,
        component: Any,
        *,
        props: Mapping[str, Any] | None = None,
        slots: Mapping[str, Any] | None = None,
        context: RenderContext,
        component_id: str | None = None,
    ) -> str:
        try:
            return await self._bridge.render(component, props=props, slots=slots, context=context)
        except FragmentError:
            raise
        except Exception as e:
            label = component_id or type(component).__name__
            logger.error(f"[runtime] Engine failed rendering '{label}': {e}")
            raise RenderError(
                f"Error rendering component '{label}': {e}", component_id=component_id
            ) from e

    # ==================== Registry ====================

    def register_component(
        self,
        component_id: str,
        loader: ComponentLoader,
        meta: ComponentMeta | Mapping[str, Any] | None = None,
    ) -> RegistryEntry:
        """
        Register a component. Replaces any entry with the same id.

        Raises:
            InvalidArgumentError: If id is empty or loader not callable
        """
        entry = self._registry.register(component_id, loader, meta)
        self._cache.invalidate(component_id)
        return entry

    def register_components(
        self,
        entries: Iterable[RegistryEntry | Mapping[str, Any]],
    ) -> list[RegistryEntry]:
        """Register a batch; nothing is stored if any entry is malformed."""
        registered = self._registry.register_many(entries)
        for entry in registered:
            self._cache.invalidate(entry.id)
        return registered

    def unregister_component(self, component_id: str) -> bool:
        removed = self._registry.unregister(component_id)
        if removed:
            self._cache.invalidate(component_id)
        return removed

    def has_component(self, component_id: str) -> bool:
        return self._registry.has(component_id)

    def get_component(self, component_id: str) -> RegistryEntry | None:
        return self._registry.get(component_id)

    def list_components(
        self,
        filter: ComponentFilter | Mapping[str, Any] | None = None,
        **criteria: Any,
    ) -> list[RegistryEntry]:
        """List components in registration order, optionally filtered."""
        return self._registry.list(filter, **criteria)

    def invalidate_component(self, component_id: str | None = None) -> bool:
        """
        Drop resolved handles so the next render re-runs the loader.

        Args:
            component_id: Id to evict, or None for all
        """
        return self._cache.invalidate(component_id)

    # ==================== Context ====================

    def set_base_context(self, context: Mapping[str, Any]) -> None:
        """
        Replace the base context wholesale.

        Raises:
            InvalidArgumentError: If context is not a mapping
        """
        validate_context(context)
        self._base_context = dict(context)
        logger.debug(f"[runtime] Base context set: {self._base_context}")

    def get_base_context(self) -> RenderContext:
        """Return a copy of the base context."""
        return dict(self._base_context)

    # ==================== Services ====================

    def register_service(self, name: str, factory: ServiceFactory) -> ServiceDefinition:
        """
        Register a service factory. Re-registering discards the built instance.

        Raises:
            InvalidArgumentError: If name is empty or factory not callable
        """
        return self._services.register(name, factory)

    async def get_service(self, name: str) -> Any:
        """
        Get a service instance, building it once on first use.

        Raises:
            NotFoundError: If the service is not registered
            ServiceBuildError: If the factory fails
        """
        return await self._services.get(name)

    def has_service(self, name: str) -> bool:
        return self._services.has(name)

    # ==================== Lifecycle ====================

    @property
    def settings(self) -> RuntimeSettings:
        return self._settings

    @property
    def registry(self) -> ComponentRegistry:
        return self._registry

    @property
    def services(self) -> ServiceLocator:
        return self._services

    @property
    def cache(self) -> ResolutionCache:
        return self._cache

    @property
    def engine(self) -> RenderEngine:
        return self._bridge.engine

    def dispose(self) -> None:
        """Release the engine and resolved handles."""
        self._bridge.dispose()
        self._cache.invalidate()

    def __repr__(self) -> str:
        return (
            f"<FragmentRuntime components={len(self._registry)} "
            f"services={len(self._services)}>"
        )


def create_runtime(
    config: RuntimeConfig | None = None,
    *,
    engine: RenderEngine | None = None,
    settings: RuntimeSettings | None = None,
) -> FragmentRuntime:
    """
    Create a new runtime instance.

    Example:
        # Zero config
        runtime = create_runtime()
        html = await runtime.render_component("<p>{{ title }}</p>", {"title": "Hello"})

        # With registry and services
        runtime = create_runtime(RuntimeConfig(
            base_context={"locale": "de", "channel": "web"},
            components=[RegistryEntry("hero", load_hero)],
        ))
        html = await runtime.render_to_string("hero", props={"title": "Hallo"})
    """
    return FragmentRuntime(config, engine=engine, settings=settings)


__all__ = ["FragmentRuntime", "create_runtime"]
