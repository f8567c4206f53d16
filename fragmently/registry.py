"""
Component Registry for Fragmently.

Maps component ids to lazy loaders plus metadata.

Design Principle:
    Lookup is by id, but listing follows registration order so output
    built from the registry is deterministic. Re-registering an id
    replaces the entry in place; unregister-then-register moves it to
    the end.

Usage:
    registry = ComponentRegistry()
    registry.register("hero", load_hero, {"category": "marketing", "tags": ["above-fold"]})
    registry.register("signup", load_signup, {"category": "form", "tags": ["interactive"]})

    entry = registry.get("hero")
    forms = registry.list(category="form", tags=["interactive"])
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any

from .errors import InvalidArgumentError
from .types import ComponentFilter, ComponentLoader, ComponentMeta, RegistryEntry

logger = logging.getLogger(__name__)


def _coerce_meta(meta: ComponentMeta | Mapping[str, Any] | None) -> ComponentMeta:
    if meta is None:
        return ComponentMeta()
    if isinstance(meta, ComponentMeta):
        return meta
    if isinstance(meta, Mapping):
        return ComponentMeta.from_mapping(meta)
    raise InvalidArgumentError(
        f"Component metadata must be a mapping or ComponentMeta, got {type(meta).__name__}"
    )


def build_entry(
    component_id: Any,
    loader: Any,
    meta: ComponentMeta | Mapping[str, Any] | None = None,
) -> RegistryEntry:
    """
    Validate registration input and build an entry.

    Raises:
        InvalidArgumentError: If the id is empty or not a string,
            or the loader is not callable
    """
    if not component_id or not isinstance(component_id, str):
        raise InvalidArgumentError("Component ID must be a non-empty string")
    if not callable(loader):
        raise InvalidArgumentError(f"Component loader for '{component_id}' must be callable")
    return RegistryEntry(id=component_id, loader=loader, meta=_coerce_meta(meta))


def _build_filter(
    filter: ComponentFilter | Mapping[str, Any] | None,
    criteria: Mapping[str, Any],
) -> ComponentFilter | None:
    try:
        if isinstance(filter, ComponentFilter):
            return replace(filter, **criteria) if criteria else filter
        if isinstance(filter, Mapping):
            return ComponentFilter(**{**filter, **criteria})
        if filter is None:
            return ComponentFilter(**criteria) if criteria else None
    except TypeError as e:
        raise InvalidArgumentError(f"Invalid component filter: {e}") from e
    raise InvalidArgumentError(
        f"Filter must be a ComponentFilter or a mapping, got {type(filter).__name__}"
    )


class ComponentRegistry:
    """
    Registry of renderable components.

    Scoped to one runtime instance. Entries are replaced, never merged,
    on re-registration.
    """

    def __init__(self, entries: Iterable[RegistryEntry] | None = None) -> None:
        self._entries: dict[str, RegistryEntry] = {}
        if entries:
            self.register_many(entries)

    def register(
        self,
        component_id: str,
        loader: ComponentLoader,
        meta: ComponentMeta | Mapping[str, Any] | None = None,
    ) -> RegistryEntry:
        """
        Register a component.

        Args:
            component_id: Unique, non-empty id
            loader: Callable returning the component handle
            meta: Optional metadata (mapping or ComponentMeta)

        Returns:
            The stored entry

        Raises:
            InvalidArgumentError: If input is malformed
        """
        entry = build_entry(component_id, loader, meta)
        self._store(entry)
        return entry

    def register_many(
        self,
        entries: Iterable[RegistryEntry | Mapping[str, Any]],
    ) -> list[RegistryEntry]:
        """
        Register a batch of components.

        The whole batch is validated before anything is stored, so one
        malformed entry leaves the registry untouched.

        Raises:
            InvalidArgumentError: If any entry is malformed
        """
        validated = [self._normalize(item) for item in entries]
        for entry in validated:
            self._store(entry)
        return validated

    def unregister(self, component_id: str) -> bool:
        """
        Remove a component.

        Returns:
            True if it was registered, False otherwise
        """
        if component_id in self._entries:
            del self._entries[component_id]
            logger.info(f"[registry] Unregistered component: {component_id}")
            return True
        return False

    def has(self, component_id: str) -> bool:
        return component_id in self._entries

    def get(self, component_id: str) -> RegistryEntry | None:
        return self._entries.get(component_id)

    def list(
        self,
        filter: ComponentFilter | Mapping[str, Any] | None = None,
        **criteria: Any,
    ) -> list[RegistryEntry]:
        """
        List entries in registration order.

        Criteria may be passed as a ComponentFilter, a mapping, or keyword
        arguments (category, tag, tags, predicate). All set criteria must
        pass. Keyword criteria are combined with a given filter and
        override fields it sets.

        Raises:
            InvalidArgumentError: If a criterion name is unknown
        """
        filter = _build_filter(filter, criteria)

        entries = list(self._entries.values())
        if filter is None:
            return entries
        return [entry for entry in entries if filter.matches(entry)]

    def ids(self) -> list[str]:
        return list(self._entries.keys())

    def clear(self) -> None:
        """Remove all entries (for testing)."""
        self._entries.clear()
        logger.debug("[registry] Cleared all components")

    def _normalize(self, item: RegistryEntry | Mapping[str, Any]) -> RegistryEntry:
        if isinstance(item, RegistryEntry):
            return build_entry(item.id, item.loader, item.meta)
        if isinstance(item, Mapping):
            return build_entry(item.get("id"), item.get("loader"), item.get("meta"))
        raise InvalidArgumentError(
            f"Registry entry must be a RegistryEntry or mapping, got {type(item).__name__}"
        )

    def _store(self, entry: RegistryEntry) -> None:
        if entry.id in self._entries:
            logger.debug(f"[registry] Replacing component: {entry.id}")
        self._entries[entry.id] = entry
        logger.info(f"[registry] Registered component: {entry.id}")

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, component_id: str) -> bool:
        return component_id in self._entries

    def __repr__(self) -> str:
        return f"<ComponentRegistry components={list(self._entries.keys())}>"


__all__ = ["ComponentRegistry", "build_entry"]
