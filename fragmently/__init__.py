"""
Fragmently - render pre-defined view components outside a page pipeline.

Fragmently is a thin orchestration layer over a template engine, for
producing markup across output channels (web fragments, email,
social-preview cards, embeddable widgets):

- **Component Registry**: ids mapped to lazy loaders plus metadata
- **Resolution Cache**: each loader runs once per id, per runtime
- **Context Merging**: runtime-wide base context with per-call overrides
- **Service Locator**: named, lazily built, memoized helpers
- **Adapters**: HTTP (starlette/FastAPI) and CLI/file output
- **Presets**: ready-made defaults for email, CMS blocks and HTMX

Quick Start:
    >>> from fragmently import RegistryEntry, RuntimeConfig, create_runtime
    >>>
    >>> runtime = create_runtime(RuntimeConfig(
    ...     base_context={"locale": "en"},
    ...     components=[RegistryEntry("greeting", lambda: "<p>Hi {{ name }}</p>")],
    ... ))
    >>> html = await runtime.render_to_string("greeting", props={"name": "Ada"})
"""

__version__ = "0.1.0"
__license__ = "MIT"

from fragmently.context import merge_contexts
from fragmently.errors import (
    EngineError,
    FragmentError,
    InvalidArgumentError,
    NotFoundError,
    RenderError,
    ResolutionError,
    ServiceBuildError,
)
from fragmently.runtime import FragmentRuntime, create_runtime
from fragmently.types import (
    Channel,
    ComponentFilter,
    ComponentMeta,
    RegistryEntry,
    RenderContext,
    ResponseOptions,
    RuntimeConfig,
    ServiceDefinition,
)

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Runtime
    "FragmentRuntime",
    "create_runtime",
    "merge_contexts",
    # Types
    "Channel",
    "ComponentFilter",
    "ComponentMeta",
    "RegistryEntry",
    "RenderContext",
    "ResponseOptions",
    "RuntimeConfig",
    "ServiceDefinition",
    # Errors
    "EngineError",
    "FragmentError",
    "InvalidArgumentError",
    "NotFoundError",
    "RenderError",
    "ResolutionError",
    "ServiceBuildError",
]
