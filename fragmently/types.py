"""
Core data types for Fragmently.

Registry entries, component metadata, service definitions and the
runtime configuration surface.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .runtime import FragmentRuntime

# Open key-value map. "locale" and "channel" are the reserved keys.
RenderContext = dict[str, Any]

# Zero-argument callable returning a component handle (or an awaitable of one)
ComponentLoader = Callable[[], Any]

# Receives the owning runtime, returns an instance or an awaitable of one
ServiceFactory = Callable[["FragmentRuntime"], Any]


class Channel(str, Enum):
    """Well-known output channels. Contexts may carry any other string."""

    WEB = "web"
    EMAIL = "email"
    PDF = "pdf"
    OG = "og"
    WIDGET = "widget"


_META_FIELDS = ("category", "tags", "description", "styles")


@dataclass(frozen=True)
class ComponentMeta:
    """
    Metadata attached to a registry entry.

    Well-known fields are typed; anything else goes into ``extra``.

    Attributes:
        category: Grouping used by filtered listing (e.g. "form")
        tags: Ordered tags used by filtered listing
        description: Human-readable description
        styles: Inline CSS prefixed to markup rendered by id
        extra: Caller-defined fields
    """

    category: str | None = None
    tags: tuple[str, ...] = ()
    description: str | None = None
    styles: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> ComponentMeta:
        """Build metadata from an open mapping, routing unknown keys into ``extra``."""
        if not data:
            return cls()
        tags = data.get("tags") or ()
        if isinstance(tags, str):
            tags = (tags,)
        return cls(
            category=data.get("category"),
            tags=tuple(tags),
            description=data.get("description"),
            styles=data.get("styles"),
            extra={k: v for k, v in data.items() if k not in _META_FIELDS},
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a well-known field or an extension field by name."""
        if key in _META_FIELDS:
            return getattr(self, key)
        return self.extra.get(key, default)


@dataclass(frozen=True)
class RegistryEntry:
    """A registered component: id, lazy loader and metadata."""

    id: str
    loader: ComponentLoader
    meta: ComponentMeta = field(default_factory=ComponentMeta)


@dataclass(frozen=True)
class ComponentFilter:
    """
    Conjunctive filter for registry listing.

    Every criterion that is set must pass independently.

    Attributes:
        category: Exact category match
        tag: Entry must carry this tag
        tags: Entry must carry all of these tags
        predicate: Custom check on the whole entry
    """

    category: str | None = None
    tag: str | None = None
    tags: tuple[str, ...] | list[str] | str | None = None
    predicate: Callable[[RegistryEntry], bool] | None = None

    def __post_init__(self) -> None:
        if isinstance(self.tags, str):
            object.__setattr__(self, "tags", (self.tags,))
        elif self.tags is not None:
            object.__setattr__(self, "tags", tuple(self.tags))

    def matches(self, entry: RegistryEntry) -> bool:
        meta = entry.meta
        if self.category is not None and meta.category != self.category:
            return False
        if self.tag is not None and self.tag not in meta.tags:
            return False
        if self.tags and not all(t in meta.tags for t in self.tags):
            return False
        if self.predicate is not None and not self.predicate(entry):
            return False
        return True


@dataclass(frozen=True)
class ServiceDefinition:
    """A named service factory."""

    name: str
    factory: ServiceFactory


@dataclass
class ResponseOptions:
    """Options for wrapping rendered markup as an HTTP response."""

    status: int = 200
    headers: Mapping[str, str] | None = None
    content_type: str | None = None


@dataclass
class RuntimeConfig:
    """
    Runtime construction options. Everything is optional.

    Attributes:
        base_context: Default context applied to every render
        components: Components registered at construction
        services: Services registered at construction
    """

    base_context: RenderContext | None = None
    components: Iterable[RegistryEntry] = ()
    services: Iterable[ServiceDefinition] = ()


__all__ = [
    "Channel",
    "ComponentFilter",
    "ComponentLoader",
    "ComponentMeta",
    "RegistryEntry",
    "RenderContext",
    "ResponseOptions",
    "RuntimeConfig",
    "ServiceDefinition",
    "ServiceFactory",
]
