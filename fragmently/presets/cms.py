"""
CMS / headless preset.

Configures the runtime for CMS block rendering: blocks are registered
components whose ids share a prefix ("blocks." by default), rendered
from the block type and data a CMS delivers.

Usage:
    preset = cms_preset(
        provider="contentful",
        blocks=[
            RegistryEntry("blocks.hero", load_hero),
            RegistryEntry("blocks.feature-grid", load_feature_grid),
        ],
    )
    runtime = create_runtime(preset.to_runtime_config())

    cms = await runtime.get_service("cms")
    html = await cms.render_page(page["blocks"], wrapper={"component_id": "layouts.page"})
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from markupsafe import Markup

from fragmently.types import Channel, RegistryEntry, ServiceDefinition

from .base import PresetConfig

if TYPE_CHECKING:
    from fragmently.runtime import FragmentRuntime

logger = logging.getLogger(__name__)


class CMSService:
    """Renders CMS blocks through the runtime registry."""

    def __init__(self, runtime: FragmentRuntime, block_prefix: str = "blocks."):
        self._runtime = runtime
        self.block_prefix = block_prefix

    def block_id(self, block_type: str) -> str:
        """Map a block type to its component id."""
        if block_type.startswith(self.block_prefix):
            return block_type
        return f"{self.block_prefix}{block_type}"

    async def render_block(
        self,
        block_type: str,
        data: Mapping[str, Any] | None = None,
        channel: str | None = None,
    ) -> str:
        return await self._runtime.render_to_string(
            self.block_id(block_type),
            props=self.transform_data(dict(data or {}), block_type),
            context={"channel": channel} if channel else None,
        )

    async def render_blocks(
        self,
        blocks: Iterable[Mapping[str, Any]],
        channel: str | None = None,
    ) -> str:
        """Render blocks concurrently, joined in input order."""
        rendered = await asyncio.gather(
            *(self.render_block(block["type"], block.get("data"), channel) for block in blocks)
        )
        return "\n".join(rendered)

    def has_block(self, block_type: str) -> bool:
        return self._runtime.has_component(self.block_id(block_type))

    def list_blocks(self) -> list[str]:
        """List registered block types, without the prefix."""
        prefix = self.block_prefix
        return [
            entry.id[len(prefix):]
            for entry in self._runtime.list_components()
            if entry.id.startswith(prefix)
        ]

    async def render_page(
        self,
        blocks: Iterable[Mapping[str, Any]],
        *,
        channel: str | None = None,
        wrapper: Mapping[str, Any] | None = None,
    ) -> str:
        """
        Render blocks, optionally inside a wrapper component.

        Args:
            blocks: ``{"type": ..., "data": {...}}`` mappings
            channel: Render channel override
            wrapper: ``{"component_id": ..., "props": {...}}``; rendered
                content is passed as the ``content`` prop, marked safe
        """
        content = await self.render_blocks(blocks, channel)
        if not wrapper:
            return content

        logger.debug(f"[cms] Wrapping page in {wrapper['component_id']}")
        return await self._runtime.render_to_string(
            wrapper["component_id"],
            props={**(wrapper.get("props") or {}), "content": Markup(content)},
            context={"channel": channel} if channel else None,
        )

    def transform_data(self, cms_data: dict[str, Any], block_type: str) -> dict[str, Any]:
        """Map CMS data to block props. Override for provider-specific shapes."""
        return cms_data


def cms_preset(
    *,
    locale: str = "en",
    provider: str = "generic",
    block_prefix: str = "blocks.",
    blocks: Iterable[RegistryEntry] = (),
) -> PresetConfig:
    """
    Build the CMS preset.

    Args:
        locale: Default locale
        provider: CMS provider name
        block_prefix: Id prefix shared by block components
        blocks: Block components to register
    """
    return PresetConfig(
        base_context={
            "locale": locale,
            "channel": Channel.WEB.value,
            "provider": provider,
            "is_headless": True,
        },
        components=list(blocks),
        services=[
            ServiceDefinition(
                name="cms",
                factory=lambda runtime: CMSService(runtime, block_prefix=block_prefix),
            )
        ],
    )
