"""prowl application — wires config, content API, adapter, and generator.

The three public functions (generate, clean, watch) are the primary entry
points.  Each loads configuration from the site root, opens one content API
client for the duration of the run, and prints a summary to stderr.
"""

from __future__ import annotations

import asyncio
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

from prowl._errors import ConfigError
from prowl.config_loader import load_config

if TYPE_CHECKING:
    from prowl._types import ProwlMode
    from prowl.api.client import ContentApi
    from prowl.config import ProwlConfig
    from prowl.content.listener import Listener
    from prowl.export.static import CleanResult, ExportResult, StaticGenerator
    from prowl.observability.collector import ContentCollector


def _require_endpoint(config: ProwlConfig) -> None:
    if not config.api_endpoint:
        msg = (
            "No content API endpoint configured. Set 'api_endpoint' in prowl.yaml "
            "or the PROWL_API_ENDPOINT environment variable."
        )
        raise ConfigError(msg)


def _build_generator(
    config: ProwlConfig,
    api: ContentApi,
    listener: Listener,
    collector: ContentCollector,
) -> StaticGenerator:
    """Assemble a fresh manifest, renderer, adapter, and generator."""
    from prowl.content.adapter import ContentAdapter
    from prowl.content.manifest import PageManifest
    from prowl.content.render import KidaRenderer
    from prowl.export.static import StaticGenerator

    manifest = PageManifest(config)
    renderer = KidaRenderer(config)
    adapter = ContentAdapter(config, api, manifest, renderer, collector=collector)
    return StaticGenerator(
        adapter, manifest, renderer, config, listener=listener, collector=collector,
    )


def _open_api(config: ProwlConfig) -> ContentApi:
    from prowl.api.client import ContentApi

    return ContentApi(config.api_endpoint, token=config.api_token, timeout=config.timeout)


def _prepare(root: str | Path, mode: ProwlMode, **kwargs: object) -> tuple[ProwlConfig, Listener]:
    """Load config and listener, then print the banner."""
    from prowl.banner import print_banner
    from prowl.content.listener import load_listener
    from prowl.content.manifest import PageManifest

    config = load_config(Path(root), **kwargs)
    _require_endpoint(config)
    listener = load_listener(config.listener, config.root)
    print_banner(
        config, len(PageManifest(config).pages), mode,
        listener=config.listener is not None,
    )
    return config, listener


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def generate(root: str | Path = ".", **kwargs: object) -> ExportResult:
    """Render every known route to static HTML.

    Routes come from the page templates in ``template/pages`` plus one detail
    page per document of each configured collection.  A route that fails is
    reported and skipped; the rest are still written.

    Args:
        root: Path to the site root directory.
        **kwargs: Override ProwlConfig fields.

    """
    from prowl.observability.collector import ContentCollector

    config, listener = _prepare(root, "generate", **kwargs)
    collector = ContentCollector()

    async def run() -> ExportResult:
        async with _open_api(config) as api:
            generator = _build_generator(config, api, listener, collector)
            return await generator.generate()

    result = asyncio.run(run())
    _print_export_summary(result, collector)
    return result


def clean(root: str | Path = ".", **kwargs: object) -> CleanResult:
    """Remove every file ``generate`` would write for the current manifest.

    Args:
        root: Path to the site root directory.
        **kwargs: Override ProwlConfig fields.

    """
    from prowl.observability.collector import ContentCollector

    config, listener = _prepare(root, "clean", **kwargs)
    collector = ContentCollector()

    async def run() -> CleanResult:
        async with _open_api(config) as api:
            generator = _build_generator(config, api, listener, collector)
            return await generator.clean()

    result = asyncio.run(run())
    _print_clean_summary(result)
    return result


def watch(root: str | Path = ".", **kwargs: object) -> None:
    """Generate once, then regenerate whenever the templates change.

    Each regeneration starts from a fresh adapter so edited site settings
    and navigation are picked up too.  Stops on Ctrl-C.

    Args:
        root: Path to the site root directory.
        **kwargs: Override ProwlConfig fields.

    """
    from prowl.content.manifest import PageManifest
    from prowl.observability.collector import ContentCollector

    config, listener = _prepare(root, "watch", **kwargs)
    collector = ContentCollector()

    async def run() -> None:
        async with _open_api(config) as api:
            generator = _build_generator(config, api, listener, collector)
            _print_export_summary(await generator.generate(), collector)

            async for pages in PageManifest(config).watch():
                t0 = time.perf_counter()
                print(f"\n  Change detected ({len(pages)} page templates)", file=sys.stderr)
                generator = _build_generator(config, api, listener, collector)
                collector.log.clear()
                result = await generator.generate()
                _print_export_summary(result, collector)
                print(
                    f"  Rebuilt in {(time.perf_counter() - t0) * 1000:.0f}ms",
                    file=sys.stderr,
                )

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        print("\n  Stopped watching.", file=sys.stderr)


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------


def _print_export_summary(result: object, collector: ContentCollector) -> None:
    """Print generation summary and content traffic to stderr."""
    from prowl.banner import print_failures
    from prowl.export.static import ExportResult
    from prowl.observability.events import QueryIssued

    if not isinstance(result, ExportResult):
        return

    lines = [
        "",
        "─" * 41,
        f"  Generated {result.total_pages} page{'s' if result.total_pages != 1 else ''}"
        f" ({result.total_fallbacks} without CMS content)",
    ]
    if result.failures:
        lines.append(
            f"  {len(result.failures)} route{'s' if len(result.failures) != 1 else ''} failed"
        )
    queries = collector.log.count(QueryIssued)
    if queries:
        per_type = collector.log.by_subject(QueryIssued)
        breakdown = ", ".join(f"{name} {n}" for name, n in sorted(per_type.items()))
        lines.append(f"  {queries} content quer{'ies' if queries != 1 else 'y'} ({breakdown})")
    lines.append(f"  Output: {result.output_dir}")
    lines.append(f"  Done in {result.duration_ms:.0f}ms")

    print("\n".join(lines), file=sys.stderr)
    print_failures(result.failures)


def _print_clean_summary(result: object) -> None:
    """Print clean summary to stderr."""
    from prowl.banner import print_failures
    from prowl.export.static import CleanResult

    if not isinstance(result, CleanResult):
        return

    removed = len(result.removed)
    lines = [
        "",
        "─" * 41,
        f"  Removed {removed} file{'s' if removed != 1 else ''}",
        f"  Output: {result.output_dir}",
        f"  Done in {result.duration_ms:.0f}ms",
    ]
    print("\n".join(lines), file=sys.stderr)
    print_failures(result.failures)
