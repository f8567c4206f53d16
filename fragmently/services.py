"""
Service Locator for Fragmently.

A flat name -> factory map with lazily built, memoized instances.

Factories receive the owning runtime so a service can call back into
rendering or the registry (e.g. an email service rendering a template
by id). Each instance is built at most once per name per runtime;
re-registering a name discards the memoized instance.

Usage:
    locator = ServiceLocator(runtime)
    locator.register("email", lambda rt: EmailService(rt))

    email = await locator.get("email")
    assert email is await locator.get("email")
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any

from .errors import InvalidArgumentError, NotFoundError, ServiceBuildError
from .memo import SingleFlightCache
from .types import ServiceDefinition, ServiceFactory

if TYPE_CHECKING:
    from .runtime import FragmentRuntime

logger = logging.getLogger(__name__)


class ServiceLocator:
    """
    Registry of service factories with build-once instances.

    Failed builds are not cached: the next ``get`` re-runs the factory.
    """

    def __init__(self, runtime: FragmentRuntime | None = None) -> None:
        self._runtime = runtime
        self._definitions: dict[str, ServiceDefinition] = {}
        self._instances: SingleFlightCache[str, Any] = SingleFlightCache("services")

    def register(self, name: str, factory: ServiceFactory) -> ServiceDefinition:
        """
        Register (or replace) a service factory.

        Args:
            name: Unique, non-empty service name
            factory: Callable taking the runtime, returning the instance
                or an awaitable of it

        Raises:
            InvalidArgumentError: If name is empty or factory not callable
        """
        if not name or not isinstance(name, str):
            raise InvalidArgumentError("Service name must be a non-empty string")
        if not callable(factory):
            raise InvalidArgumentError(f"Service factory for '{name}' must be callable")

        definition = ServiceDefinition(name=name, factory=factory)
        if name in self._definitions:
            logger.debug(f"[services] Replacing service: {name}")
        self._definitions[name] = definition
        self._instances.evict(name)
        logger.info(f"[services] Registered service: {name}")
        return definition

    async def get(self, name: str) -> Any:
        """
        Get the service instance, building it on first use.

        Raises:
            NotFoundError: If no service is registered under ``name``
            ServiceBuildError: If the factory fails
        """
        definition = self._definitions.get(name)
        if definition is None:
            raise NotFoundError("service", name)
        return await self._instances.get_or_build(name, lambda: self._build(definition))

    async def _build(self, definition: ServiceDefinition) -> Any:
        logger.debug(f"[services] Building service: {definition.name}")
        try:
            instance = definition.factory(self._runtime)
            if inspect.isawaitable(instance):
                instance = await instance
        except Exception as e:
            logger.warning(f"[services] Factory failed for '{definition.name}': {e}")
            raise ServiceBuildError(definition.name, e) from e

        logger.info(f"[services] Built service: {definition.name}")
        return instance

    def has(self, name: str) -> bool:
        return name in self._definitions

    def is_built(self, name: str) -> bool:
        return self._instances.is_cached(name)

    def names(self) -> list[str]:
        return list(self._definitions.keys())

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, name: str) -> bool:
        return name in self._definitions

    def __repr__(self) -> str:
        return f"<ServiceLocator services={list(self._definitions.keys())}>"


__all__ = ["ServiceLocator"]
