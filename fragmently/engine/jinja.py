"""
Jinja2 rendering engine.

Component handles are ``jinja2.Template`` objects or template source
strings. Props become template variables, the render context is
available as ``__context`` and slots as ``slots``:

    <section class="hero" data-channel="{{ __context.channel }}">
      <h1>{{ title }}</h1>
      {{ slots.default }}
    </section>

String slot values are trusted markup; template slot values are rendered
first with the same context. ``slots`` is a reserved variable name.
Template source strings are compiled once per engine.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from jinja2 import Environment, FileSystemLoader, Template, TemplateError, TemplateNotFound
from markupsafe import Markup

from fragmently.errors import EngineError

from .base import CONTEXT_PROP

if TYPE_CHECKING:
    from fragmently.config import RuntimeSettings

logger = logging.getLogger(__name__)


class JinjaEngine:
    """
    Renders Jinja2 templates as components.

    Usage:
        engine = JinjaEngine(template_dir="templates/")
        runtime = create_runtime(engine=engine)
        runtime.register_component("hero", lambda: engine.load("hero.html"))
    """

    def __init__(
        self,
        environment: Environment | None = None,
        *,
        autoescape: bool = True,
        template_dir: str | None = None,
    ):
        """
        Initialize engine.

        Args:
            environment: Preconfigured Jinja environment (overrides other args)
            autoescape: HTML-escape variables
            template_dir: Directory for ``load``
        """
        if environment is None:
            environment = Environment(
                loader=FileSystemLoader(template_dir) if template_dir else None,
                autoescape=autoescape,
                enable_async=True,
            )
        self.environment = environment
        # Per-engine cache of compiled source strings
        self._compile_source = lru_cache(maxsize=256)(self.compile)

    @classmethod
    def from_settings(cls, settings: RuntimeSettings | None = None) -> JinjaEngine:
        if settings is None:
            return cls()
        return cls(autoescape=settings.autoescape, template_dir=settings.template_dir)

    def load(self, name: str) -> Template:
        """
        Load a named template from the environment's loader.

        Raises:
            EngineError: If there is no loader or the template is missing
        """
        if self.environment.loader is None:
            raise EngineError(f"No template loader configured, cannot load '{name}'")
        try:
            return self.environment.get_template(name)
        except TemplateNotFound as e:
            raise EngineError(f"Template not found: {name}") from e
        except TemplateError as e:
            raise EngineError(f"Template '{name}' failed to compile: {e}") from e

    def compile(self, source: str) -> Template:
        """Compile template source into a component handle."""
        try:
            return self.environment.from_string(source)
        except TemplateError as e:
            raise EngineError(f"Template failed to compile: {e}") from e

    async def render(
        self,
        component: Any,
        *,
        props: Mapping[str, Any] | None = None,
        slots: Mapping[str, Any] | None = None,
    ) -> str:
        """
        Render a template with props and slots.

        Raises:
            EngineError: On an invalid component or rendering fault
        """
        template = self._coerce(component)
        props = dict(props or {})

        rendered_slots: dict[str, Markup] = {}
        for name, value in (slots or {}).items():
            if isinstance(value, str):
                rendered_slots[name] = Markup(value)
            else:
                slot_vars = {CONTEXT_PROP: props[CONTEXT_PROP]} if CONTEXT_PROP in props else {}
                slot_html = await self._render_template(self._coerce(value), slot_vars)
                rendered_slots[name] = Markup(slot_html)

        # "slots" is reserved; a prop with that name is shadowed
        variables = {**props, "slots": rendered_slots}
        return await self._render_template(template, variables)

    def _coerce(self, component: Any) -> Template:
        if isinstance(component, Template):
            return component
        if isinstance(component, str):
            return self._compile_source(component)
        raise EngineError(
            f"Invalid component: expected a jinja2.Template or template source, "
            f"got {type(component).__name__}"
        )

    async def _render_template(self, template: Template, variables: dict[str, Any]) -> str:
        try:
            if template.environment.is_async:
                return await template.render_async(variables)
            return template.render(variables)
        except TemplateError as e:
            logger.warning(f"[engine] Template error in '{template.name or '<string>'}': {e}")
            raise EngineError(f"Template rendering failed: {e}") from e
        except EngineError:
            raise
        except Exception as e:
            raise EngineError(f"Rendering fault ({type(e).__name__}): {e}") from e


__all__ = ["JinjaEngine"]
