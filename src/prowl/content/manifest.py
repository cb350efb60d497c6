"""Static page manifest — the page templates the site knows about.

Every ``<type>.html`` file in the pages template directory is a known
static page.  The adapter consults the manifest when a content type has no
remote documents (a page with no CMS data is valid if its template exists),
and the static generator derives its route list from it.

``PageManifest.watch()`` keeps the list current while templates change,
bridging watchfiles' ``awatch`` into an async iterator of page lists.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from prowl.config import ProwlConfig

_PAGE_SUFFIX = ".html"

type ChangeCategory = Literal["page", "partial", "template", "config"]


def categorize_change(path: Path, config: ProwlConfig) -> ChangeCategory | None:
    """Determine the category of a changed file based on its location.

    Returns None if the file doesn't belong to any watched category.

    """
    try:
        rel = path.relative_to(config.root)
    except ValueError:
        return None

    parts = rel.parts
    if not parts:
        return None

    if len(parts) == 1 and parts[0] in {"prowl.yaml", "prowl.yml", "prowl.toml"}:
        return "config"

    if parts[0] != config.templates_dir:
        return None
    if len(parts) > 2 and parts[1] == config.pages_dir:
        return "page"
    if len(parts) > 2 and parts[1] == config.partials_dir:
        return "partial"
    return "template"


class PageManifest:
    """Known static pages, as ``<type>.html`` names in sorted order.

    Args:
        config: Frozen Prowl configuration.

    """

    def __init__(self, config: ProwlConfig) -> None:
        self._config = config
        self._pages: tuple[str, ...] = ()
        self.refresh()

    @property
    def pages(self) -> tuple[str, ...]:
        return self._pages

    def refresh(self) -> tuple[str, ...]:
        """Rescan the pages directory and return the new list."""
        pages_dir = self._config.pages_path
        if not pages_dir.is_dir():
            self._pages = ()
        else:
            self._pages = tuple(sorted(
                p.name
                for p in pages_dir.iterdir()
                if p.is_file() and p.suffix == _PAGE_SUFFIX and not p.name.startswith("_")
            ))
        return self._pages

    def contains(self, name: str) -> bool:
        """True if a page file named *name* (e.g. ``about.html``) exists."""
        return name in self._pages

    def has_page(self, content_type: str) -> bool:
        """True if the content type has a static page template."""
        return self.contains(f"{content_type}{_PAGE_SUFFIX}")

    def types(self) -> tuple[str, ...]:
        """Content types with a page template, in manifest order."""
        return tuple(name.removesuffix(_PAGE_SUFFIX) for name in self._pages)

    async def watch(self, stop_event: asyncio.Event | None = None) -> AsyncIterator[tuple[str, ...]]:
        """Yield the refreshed page list after each batch of template changes.

        Changes outside the template directory and config files are ignored.
        Stops when *stop_event* is set.

        """
        from watchfiles import awatch

        watch_path = self._config.templates_path
        async for raw_changes in awatch(watch_path, stop_event=stop_event, debounce=300, step=100):
            if any(
                categorize_change(Path(path_str), self._config) is not None
                for _, path_str in raw_changes
            ):
                yield self.refresh()
