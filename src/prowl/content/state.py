"""Adapter state — the process-scoped navigation cache.

``ContentCache`` is immutable: the API handle, site context, and navigation
list are computed together and stored with a single assignment, so readers
never see a half-populated cache.  ``AdapterState`` is the holder passed to
resolvers; each adapter owns one, so tests never share state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prowl.api.client import ApiHandle
    from prowl.content.navigation import NavigationItem, SiteContext


@dataclass(frozen=True, slots=True)
class ContentCache:
    """Resolved site context and navigation, plus the handle used to fetch them."""

    api: ApiHandle
    site: SiteContext
    navi: tuple[NavigationItem, ...]


class AdapterState:
    """Holder for the current ``ContentCache``.

    Written only by ``replace`` (wholesale) or ``invalidate``; never
    field-by-field.
    """

    __slots__ = ("_cache",)

    def __init__(self, cache: ContentCache | None = None) -> None:
        self._cache = cache

    @property
    def cache(self) -> ContentCache | None:
        return self._cache

    @property
    def is_resolved(self) -> bool:
        return self._cache is not None

    def replace(self, cache: ContentCache) -> None:
        self._cache = cache

    def invalidate(self) -> None:
        """Drop the cache so the next resolution refetches the site document."""
        self._cache = None
