"""
CLI adapter for Fragmently.

Renders components to stdout or to files, for static generation of email
templates, preview cards and widget snapshots.

Usage:
    renderer = CLIRenderer(runtime, output_dir="dist/")
    await renderer.render_by_id_to_file("emails.welcome", "welcome.html", {"name": "Ada"})

    # Shell
    fragmently myapp.fragments:runtime emails.welcome welcome.html --prop name=Ada
"""

from __future__ import annotations

import argparse
import asyncio
import importlib
import logging
import sys
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from fragmently.errors import FragmentError

if TYPE_CHECKING:
    from fragmently.runtime import FragmentRuntime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderResult:
    """Outcome of a CLI render."""

    html: str
    output_path: Path | None = None
    component_id: str | None = None


@dataclass
class BatchItem:
    """One entry of a batch render."""

    component_id: str
    output_path: str
    props: dict[str, Any] = field(default_factory=dict)
    context: dict[str, Any] | None = None


class CLIRenderer:
    """
    Renders components to strings, files and stdout.

    Args:
        runtime: Runtime to render with
        output_dir: Base directory for relative output paths
        verbose: Log progress at INFO instead of DEBUG
    """

    def __init__(
        self,
        runtime: FragmentRuntime,
        *,
        output_dir: str | Path | None = None,
        verbose: bool | None = None,
    ):
        settings = runtime.settings
        self.runtime = runtime
        self.output_dir = Path(output_dir if output_dir is not None else settings.output_dir)
        self.verbose = settings.verbose if verbose is None else verbose

    def _log(self, message: str) -> None:
        logger.log(logging.INFO if self.verbose else logging.DEBUG, f"[cli] {message}")

    async def render(
        self,
        component: Any,
        props: Mapping[str, Any] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> str:
        self._log("Rendering component...")
        html = await self.runtime.render_component(component, props, context)
        self._log(f"Rendered {len(html)} bytes")
        return html

    async def render_by_id(
        self,
        component_id: str,
        props: Mapping[str, Any] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> str:
        self._log(f"Rendering component: {component_id}")
        html = await self.runtime.render_to_string(component_id, props=props, context=context)
        self._log(f"Rendered {len(html)} bytes")
        return html

    async def render_to_file(
        self,
        component: Any,
        output_path: str | Path,
        props: Mapping[str, Any] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> RenderResult:
        html = await self.runtime.render_component(component, props, context)
        full_path = self._write(output_path, html)
        return RenderResult(html=html, output_path=full_path)

    async def render_by_id_to_file(
        self,
        component_id: str,
        output_path: str | Path,
        props: Mapping[str, Any] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> RenderResult:
        html = await self.runtime.render_to_string(component_id, props=props, context=context)
        full_path = self._write(output_path, html)
        return RenderResult(html=html, output_path=full_path, component_id=component_id)

    async def batch_render(self, items: Iterable[BatchItem]) -> list[RenderResult]:
        """Render items in order, stopping at the first failure."""
        items = list(items)
        self._log(f"Batch rendering {len(items)} components...")

        results = []
        for item in items:
            results.append(
                await self.render_by_id_to_file(
                    item.component_id, item.output_path, item.props, item.context
                )
            )

        self._log(f"Completed batch render: {len(results)} files")
        return results

    async def print_component(
        self,
        component: Any,
        props: Mapping[str, Any] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        html = await self.runtime.render_component(component, props, context)
        sys.stdout.write(html + "\n")

    async def print_by_id(
        self,
        component_id: str,
        props: Mapping[str, Any] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        html = await self.runtime.render_to_string(component_id, props=props, context=context)
        sys.stdout.write(html + "\n")

    def _write(self, output_path: str | Path, html: str) -> Path:
        full_path = (self.output_dir / output_path).resolve()
        self._log(f"Writing to {full_path}")
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(html, encoding="utf-8")
        self._log(f"Written {len(html)} bytes to {full_path}")
        return full_path


# =============================================================================
# Command line entry points
# =============================================================================


def _parse_pairs(pairs: Sequence[str] | None, flag: str) -> dict[str, str]:
    result: dict[str, str] = {}
    for pair in pairs or ():
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"{flag} expects key=value, got '{pair}'")
        result[key] = value
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fragmently",
        description="Render a registered component to stdout or a file.",
    )
    parser.add_argument("component_id", help="Registered component id")
    parser.add_argument("output_path", nargs="?", help="Output file (relative to --output-dir)")
    parser.add_argument("--prop", action="append", metavar="KEY=VALUE", help="Component prop")
    parser.add_argument("--channel", help="Render channel (web, email, og, widget, ...)")
    parser.add_argument("--locale", help="Render locale")
    parser.add_argument("--output-dir", help="Base directory for output files")
    return parser


async def run_cli(runtime: FragmentRuntime, argv: Sequence[str]) -> int:
    """
    Render one component as described by ``argv``.

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(list(argv))

    try:
        props = _parse_pairs(args.prop, "--prop")
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    context = {k: v for k, v in (("channel", args.channel), ("locale", args.locale)) if v}
    renderer = CLIRenderer(runtime, output_dir=args.output_dir, verbose=True)

    try:
        if args.output_path:
            await renderer.render_by_id_to_file(
                args.component_id, args.output_path, props, context or None
            )
        else:
            await renderer.print_by_id(args.component_id, props, context or None)
    except FragmentError as e:
        logger.error(f"[cli] {e}")
        return 1
    return 0


def load_runtime(target: str) -> FragmentRuntime:
    """
    Import a runtime from ``module:attribute``.

    A callable attribute is called with no arguments to produce the runtime.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not attr:
        raise ValueError(f"Runtime target must look like 'module:attribute', got '{target}'")

    obj = getattr(importlib.import_module(module_name), attr)
    return obj() if callable(obj) else obj


def main(argv: Sequence[str] | None = None) -> int:
    """Console entry point: ``fragmently <module:runtime> <component_id> [output_path]``."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0].startswith("-"):
        sys.stderr.write("Usage: fragmently <module:runtime> <component_id> [output_path]\n")
        return 2

    runtime = load_runtime(argv[0])
    return asyncio.run(run_cli(runtime, argv[1:]))


if __name__ == "__main__":
    sys.exit(main())
