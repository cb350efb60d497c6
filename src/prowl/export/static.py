"""Static generation — render every known route to HTML files.

Routes come from the page manifest (one per ``<type>.html`` page template)
plus, for each configured collection type, one route per document uid.
Each route goes through the same adapter path as a live page request and
is written using the clean URL convention.

``generate`` and ``clean`` always run every route to completion.  A route
that fails is recorded in the result and the batch carries on.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from prowl._errors import ExportError, ProwlError
from prowl.content.listener import NO_HOOKS
from prowl.content.render import render_variables
from prowl.content.request import ContentRequest
from prowl.export.sitemap import sitemap_path, write_sitemap

if TYPE_CHECKING:
    from prowl.config import ProwlConfig
    from prowl.content.adapter import ContentAdapter
    from prowl.content.listener import Listener
    from prowl.content.manifest import PageManifest
    from prowl.content.render import TemplateRenderer
    from prowl.observability.collector import ContentCollector

_PAGE_SUFFIX = ".html"


@dataclass(frozen=True, slots=True)
class Route:
    """One page to generate.

    Attributes:
        type: Content type (also the page template name).
        uid: Document uid for collection detail pages, else None.
        path: URL path (``/``, ``/about/``, ``/work/some-project/``).
        source: Manifest entry or collection the route came from.

    """

    type: str
    uid: str | None
    path: str
    source: str


@dataclass(frozen=True, slots=True)
class ExportedFile:
    """Record of a single file written during generation.

    Attributes:
        source_path: Route URL path (e.g., ``"/about/"``).
        output_path: Absolute filesystem path to the written file.
        source_type: ``content`` when CMS documents backed the page,
            ``fallback`` for static-only pages, ``error_page`` for 404/500
            pages, ``sitemap`` for the sitemap.
        size_bytes: Size of the written file in bytes.
        duration_ms: Time taken to resolve, render, and write this file.

    """

    source_path: str
    output_path: Path
    source_type: Literal["content", "fallback", "error_page", "sitemap"]
    size_bytes: int
    duration_ms: float


@dataclass(frozen=True, slots=True)
class RouteFailure:
    """A route that could not be generated or removed.

    Attributes:
        source_path: Route URL path.
        error: Human-readable error message.
        kind: Exception class name.

    """

    source_path: str
    error: str
    kind: str


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Aggregate result of a full generation run."""

    files: tuple[ExportedFile, ...]
    failures: tuple[RouteFailure, ...]
    duration_ms: float
    output_dir: Path

    @property
    def total_pages(self) -> int:
        return sum(1 for f in self.files if f.source_type != "sitemap")

    @property
    def total_fallbacks(self) -> int:
        return sum(1 for f in self.files if f.source_type == "fallback")

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass(frozen=True, slots=True)
class CleanResult:
    """Aggregate result of a clean run."""

    removed: tuple[Path, ...]
    failures: tuple[RouteFailure, ...]
    duration_ms: float
    output_dir: Path

    @property
    def ok(self) -> bool:
        return not self.failures


def plan_manifest_routes(pages: Sequence[str], config: ProwlConfig) -> tuple[Route, ...]:
    """One route per ``<type>.html`` manifest entry; the homepage maps to ``/``."""
    routes: list[Route] = []
    for name in pages:
        content_type = name.removesuffix(_PAGE_SUFFIX)
        path = "/" if content_type == config.homepage else f"/{content_type}/"
        routes.append(Route(type=content_type, uid=None, path=path, source=name))
    return tuple(routes)


def route_to_filepath(route: Route, output_dir: Path, config: ProwlConfig) -> Path:
    """Convert a route to an output file path.

    Clean URL convention:
        ``/``                  -> ``output/index.html``
        ``/about/``            -> ``output/about/index.html``
        ``/work/project/``     -> ``output/work/project/index.html``

    Error pages (``404``, ``500``) are written as ``output/404.html``.

    """
    if route.uid is None and route.type in config.error_pages:
        return output_dir / f"{route.type}{_PAGE_SUFFIX}"
    clean = route.path.strip("/")
    if not clean:
        return output_dir / "index.html"
    return output_dir / clean / "index.html"


def _write_html(filepath: Path, html: str) -> int:
    data = html.encode("utf-8")
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)
        filepath.write_bytes(data)
    except OSError as exc:
        raise ExportError(filepath, exc.strerror or str(exc)) from exc
    return len(data)


def _remove_artifact(filepath: Path, output_dir: Path) -> bool:
    """Delete *filepath* and prune route directories left empty.

    Returns False if the file did not exist.
    """
    try:
        filepath.unlink()
    except FileNotFoundError:
        return False
    parent = filepath.parent
    while parent != output_dir and output_dir in parent.parents:
        if any(parent.iterdir()):
            break
        parent.rmdir()
        parent = parent.parent
    return True


def _failure(path: str, exc: BaseException) -> RouteFailure:
    return RouteFailure(source_path=path, error=str(exc) or type(exc).__name__, kind=type(exc).__name__)


class StaticGenerator:
    """Generates (or removes) the static site for a manifest.

    Args:
        adapter: Content adapter used to resolve each route.
        manifest: Known static pages.
        renderer: Template renderer for page templates.
        config: Frozen Prowl configuration.
        listener: Hooks applied to every route's query and context.
        collector: Optional event collector.

    """

    def __init__(
        self,
        adapter: ContentAdapter,
        manifest: PageManifest,
        renderer: TemplateRenderer,
        config: ProwlConfig,
        *,
        listener: Listener = NO_HOOKS,
        collector: ContentCollector | None = None,
    ) -> None:
        self._adapter = adapter
        self._manifest = manifest
        self._renderer = renderer
        self._config = config
        self._listener = listener
        self._collector = collector

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    async def plan(self) -> tuple[tuple[Route, ...], tuple[RouteFailure, ...]]:
        """Collect manifest routes and collection detail routes.

        A collection that cannot be listed is reported as a failure against
        its ``/<type>/`` path; the other routes are still planned.

        """
        routes: dict[str, Route] = {
            route.path: route
            for route in plan_manifest_routes(self._manifest.pages, self._config)
        }
        failures: list[RouteFailure] = []

        for content_type in self._config.collections:
            try:
                documents = await self._adapter.list_documents(content_type)
            except ProwlError as exc:
                failures.append(self._record_failure(f"/{content_type}/", exc))
                continue
            for doc in documents:
                path = f"/{content_type}/{doc.uid}/"
                routes.setdefault(path, Route(
                    type=content_type, uid=doc.uid, path=path, source=content_type,
                ))

        return tuple(routes.values()), tuple(failures)

    # ------------------------------------------------------------------
    # Generate
    # ------------------------------------------------------------------

    async def generate(self) -> ExportResult:
        """Render every planned route and write it to the output directory.

        Site context and navigation resolve once, before any route runs.
        Routes then render with at most ``config.concurrency`` in flight.

        """
        start = time.perf_counter()
        output_dir = self._config.output_path

        try:
            await self._adapter.prime()
        except ProwlError as exc:
            failures = tuple(
                self._record_failure(route.path, exc)
                for route in plan_manifest_routes(self._manifest.pages, self._config)
            )
            return ExportResult(
                files=(),
                failures=failures,
                duration_ms=(time.perf_counter() - start) * 1000,
                output_dir=output_dir,
            )

        routes, plan_failures = await self.plan()
        semaphore = asyncio.Semaphore(self._config.concurrency)

        async def bounded(route: Route) -> ExportedFile | RouteFailure:
            async with semaphore:
                return await self._export_route(route, output_dir)

        outcomes = await asyncio.gather(*(bounded(route) for route in routes))

        files = [o for o in outcomes if isinstance(o, ExportedFile)]
        failures = list(plan_failures)
        failures.extend(o for o in outcomes if isinstance(o, RouteFailure))

        if self._config.base_url:
            try:
                sitemap = await asyncio.to_thread(
                    write_sitemap, files, self._config.base_url, output_dir,
                )
            except ExportError as exc:
                failures.append(self._record_failure("/sitemap.xml", exc))
            else:
                files.append(sitemap)
                self._record_export(sitemap)

        return ExportResult(
            files=tuple(files),
            failures=tuple(failures),
            duration_ms=(time.perf_counter() - start) * 1000,
            output_dir=output_dir,
        )

    async def _export_route(self, route: Route, output_dir: Path) -> ExportedFile | RouteFailure:
        """Resolve, render, and write one route, capturing any failure."""
        t0 = time.perf_counter()
        request = ContentRequest.for_route(route.type, route.uid)
        template = f"{self._config.pages_dir}/{route.type}{_PAGE_SUFFIX}"

        try:
            data = await self._adapter.resolve_page_response(request, self._listener)
            context = await self._adapter.page_context(request, data, self._listener)
            context.set("route", route)
            html = await self._renderer.render(template, **render_variables(context))
            filepath = route_to_filepath(route, output_dir, self._config)
            size = await asyncio.to_thread(_write_html, filepath, html)
        except Exception as exc:
            return self._record_failure(route.path, exc)

        if route.uid is None and route.type in self._config.error_pages:
            source_type = "error_page"
        elif data.is_empty:
            source_type = "fallback"
        else:
            source_type = "content"

        exported = ExportedFile(
            source_path=route.path,
            output_path=filepath,
            source_type=source_type,
            size_bytes=size,
            duration_ms=(time.perf_counter() - t0) * 1000,
        )
        self._record_export(exported)
        return exported

    # ------------------------------------------------------------------
    # Clean
    # ------------------------------------------------------------------

    async def clean(self) -> CleanResult:
        """Remove every artifact ``generate`` would write for this manifest.

        Files that are already gone are skipped silently.
        """
        start = time.perf_counter()
        output_dir = self._config.output_path
        routes, failures_t = await self.plan()
        failures = list(failures_t)
        removed: list[Path] = []

        targets = [(route.path, route_to_filepath(route, output_dir, self._config)) for route in routes]
        if self._config.base_url:
            targets.append(("/sitemap.xml", sitemap_path(output_dir)))

        for path, filepath in targets:
            try:
                existed = await asyncio.to_thread(_remove_artifact, filepath, output_dir)
            except OSError as exc:
                failures.append(self._record_failure(path, exc))
                continue
            if existed:
                removed.append(filepath)
                if self._collector is not None:
                    self._collector.record_removal(path, str(filepath))

        return CleanResult(
            removed=tuple(removed),
            failures=tuple(failures),
            duration_ms=(time.perf_counter() - start) * 1000,
            output_dir=output_dir,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _record_failure(self, path: str, exc: BaseException) -> RouteFailure:
        failure = _failure(path, exc)
        if self._collector is not None:
            self._collector.record_failure(path, failure.error)
        return failure

    def _record_export(self, exported: ExportedFile) -> None:
        if self._collector is None:
            return
        self._collector.record_export(
            exported.source_path,
            str(exported.output_path),
            kind=exported.source_type,
            duration_ms=exported.duration_ms,
        )
