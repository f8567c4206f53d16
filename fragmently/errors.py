"""
Error taxonomy for Fragmently.

Every failure raised by the runtime carries the offending component id or
service name so callers can diagnose it without inspecting internals.

Hierarchy:
    FragmentError
    ├── InvalidArgumentError   malformed registration input (caller bug)
    ├── NotFoundError          unknown component id or service name
    ├── ResolutionError        loader ran but produced no usable component
    ├── RenderError            rendering failed
    │   └── EngineError        raised by rendering engines
    └── ServiceBuildError      service factory raised
"""

from __future__ import annotations


class FragmentError(Exception):
    """Base class for all Fragmently errors."""

    pass


class InvalidArgumentError(FragmentError, ValueError):
    """Raised when registration input or a context fragment is malformed."""

    pass


class NotFoundError(FragmentError, LookupError):
    """
    Raised when a component id or service name is not registered.

    Protocol adapters map this to a 404-equivalent response.
    """

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind.capitalize()} '{name}' not found")


class ResolutionError(FragmentError):
    """Raised when a component loader returns nothing renderable."""

    def __init__(self, component_id: str, reason: str = "loader returned no component"):
        self.component_id = component_id
        super().__init__(f"Component '{component_id}' could not be resolved: {reason}")


class RenderError(FragmentError):
    """Raised when rendering a component fails."""

    def __init__(self, message: str, *, component_id: str | None = None):
        self.component_id = component_id
        super().__init__(message)


class EngineError(RenderError):
    """Raised by a rendering engine on an invalid component or rendering fault."""

    pass


class ServiceBuildError(FragmentError):
    """
    Raised when a service factory fails.

    The original exception is chained as ``__cause__``. A failed build
    is never cached; the next ``get`` re-runs the factory.
    """

    def __init__(self, service_name: str, cause: BaseException | None = None):
        self.service_name = service_name
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Service '{service_name}' failed to build{detail}")


__all__ = [
    "EngineError",
    "FragmentError",
    "InvalidArgumentError",
    "NotFoundError",
    "RenderError",
    "ResolutionError",
    "ServiceBuildError",
]
