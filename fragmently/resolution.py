"""
Component Resolution Cache.

Invokes a registry entry's loader once per id and memoizes the component
handle it yields. The cache belongs to one runtime instance; two runtimes
registering different loaders under the same id never see each other's
handles.

Loader results:
    - module-like object exposing ``default``
    - mapping with a ``"default"`` key
    - the component handle itself

    ``None`` in any of these positions is a ResolutionError.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping
from typing import Any

from .errors import ResolutionError
from .memo import SingleFlightCache
from .types import RegistryEntry

logger = logging.getLogger(__name__)


def extract_component(component_id: str, loaded: Any) -> Any:
    """
    Pull the component handle out of a loader result.

    Raises:
        ResolutionError: If there is no usable handle
    """
    if loaded is None:
        raise ResolutionError(component_id, "loader returned nothing")

    if isinstance(loaded, Mapping):
        component = loaded.get("default")
    elif inspect.ismodule(loaded) or hasattr(loaded, "default"):
        component = getattr(loaded, "default", None)
    else:
        component = loaded

    if component is None:
        raise ResolutionError(component_id, "loader result has no default export")
    return component


class ResolutionCache:
    """
    Memoizes resolved component handles by id.

    Concurrent ``resolve`` calls for the same unresolved id share a
    single loader invocation.

    Example:
        cache = ResolutionCache()
        handle = await cache.resolve(registry.get("hero"))
        cache.invalidate("hero")  # hot reload
    """

    def __init__(self) -> None:
        self._memo: SingleFlightCache[str, Any] = SingleFlightCache("resolution")

    async def resolve(self, entry: RegistryEntry) -> Any:
        """
        Resolve an entry to its component handle.

        Args:
            entry: Registry entry whose loader to invoke

        Returns:
            The component handle

        Raises:
            ResolutionError: If the loader fails or yields no component
        """
        return await self._memo.get_or_build(entry.id, lambda: self._load(entry))

    async def _load(self, entry: RegistryEntry) -> Any:
        logger.debug(f"[resolution] Loading component: {entry.id}")
        try:
            loaded = entry.loader()
            if inspect.isawaitable(loaded):
                loaded = await loaded
        except ResolutionError:
            raise
        except Exception as e:
            logger.error(f"[resolution] Loader failed for '{entry.id}': {e}")
            raise ResolutionError(entry.id, f"loader raised {type(e).__name__}: {e}") from e

        component = extract_component(entry.id, loaded)
        logger.info(f"[resolution] Resolved component: {entry.id}")
        return component

    def invalidate(self, component_id: str | None = None) -> bool:
        """
        Evict one resolved handle, or all of them when no id is given.

        Returns:
            True if anything was evicted
        """
        removed = self._memo.evict(component_id)
        if removed:
            target = component_id if component_id is not None else "*"
            logger.debug(f"[resolution] Invalidated: {target}")
        return removed

    def is_cached(self, component_id: str) -> bool:
        return self._memo.is_cached(component_id)

    def __len__(self) -> int:
        return len(self._memo)


__all__ = ["ResolutionCache", "extract_component"]
