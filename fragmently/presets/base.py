"""Preset configuration container."""

from __future__ import annotations

from dataclasses import dataclass, field

from fragmently.types import RegistryEntry, RenderContext, RuntimeConfig, ServiceDefinition


@dataclass
class PresetConfig:
    """Defaults a preset contributes to a runtime."""

    base_context: RenderContext = field(default_factory=dict)
    components: list[RegistryEntry] = field(default_factory=list)
    services: list[ServiceDefinition] = field(default_factory=list)

    def to_runtime_config(self) -> RuntimeConfig:
        return RuntimeConfig(
            base_context=dict(self.base_context),
            components=list(self.components),
            services=list(self.services),
        )
