"""Navigation resolver — site context and menu from the singleton site document.

The site document carries two things:

- Site-wide key/value settings (title, description, social links, ...),
  flattened into ``SiteContext.data`` with the ``site.`` namespace stripped.
- A slice zone (``navi``) with one slice per menu entry, in menu order.
  Each slice's first item group holds a ``style`` tag, a ``name`` title,
  and either a ``page`` document link or a manually entered ``slug``.

Resolution is all-or-nothing: a malformed slice aborts it and nothing is
cached.
"""

from __future__ import annotations

import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from prowl._errors import NavigationError
from prowl.api.documents import as_text, fragment_value
from prowl.content.state import ContentCache

if TYPE_CHECKING:
    from prowl.api.client import ContentApi
    from prowl.api.documents import Document
    from prowl.config import ProwlConfig
    from prowl.content.state import AdapterState
    from prowl.observability.collector import ContentCollector


@dataclass(frozen=True, slots=True)
class SiteContext:
    """Site-wide settings from the site document."""

    data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


@dataclass(frozen=True, slots=True)
class NavigationItem:
    """One menu entry.

    Attributes:
        id: Linked document id, or the slug for manual entries.
        uid: Linked document uid, or the slug for manual entries.
        type: Linked document type, or the slug for manual entries.
        slug: Canonical path: ``/`` for the homepage, ``/{uid}/`` otherwise.
        title: Menu label.
        style: Lower-cased style tag.
        linked: True if the entry references a document rather than a
            manually entered slug.

    """

    id: str
    uid: str
    type: str
    slug: str
    title: str
    style: str
    linked: bool = False


def normalize_site(
    document: Document,
    *,
    homepage: str,
    navi_key: str = "navi",
    prefix: str = "site",
) -> tuple[SiteContext, tuple[NavigationItem, ...]]:
    """Derive the site context and navigation list from a site document.

    Raises:
        NavigationError: If the navigation zone is missing or any slice is
            malformed.

    """
    namespace = f"{prefix}."
    data: dict[str, Any] = {}
    for key, value in document.fragments.items():
        name = key.removeprefix(namespace)
        if name == navi_key:
            continue
        data[name] = fragment_value(value)

    zone = document.get(navi_key)
    if zone is None:
        msg = f"Site document {document.id!r} has no {navi_key!r} slice zone"
        raise NavigationError(msg)
    if not isinstance(zone, Sequence) or isinstance(zone, str):
        msg = f"Site document {document.id!r}: {navi_key!r} is not a slice zone"
        raise NavigationError(msg)

    navi = tuple(
        _navigation_item(index, slice_, homepage)
        for index, slice_ in enumerate(zone)
    )
    return SiteContext(data), navi


def _navigation_item(index: int, slice_: object, homepage: str) -> NavigationItem:
    """Build one NavigationItem from a slice, or raise NavigationError."""
    items = slice_.get("items") if isinstance(slice_, Mapping) else None
    if not items or not isinstance(items[0], Mapping):
        msg = f"Navigation slice {index} has no item group"
        raise NavigationError(msg)
    group = items[0]

    style = as_text(group.get("style"))
    title = as_text(group.get("name"))
    if style is None:
        msg = f"Navigation slice {index} is missing 'style'"
        raise NavigationError(msg)
    if title is None:
        msg = f"Navigation slice {index} is missing 'name'"
        raise NavigationError(msg)

    page = group.get("page")
    if isinstance(page, Mapping) and page.get("id"):
        if not page.get("uid") or not page.get("type"):
            msg = f"Navigation slice {index} links document {page['id']!r} without a uid"
            raise NavigationError(msg)
        doc_id, uid, doc_type = str(page["id"]), str(page["uid"]), str(page["type"])
        slug = uid
        linked = True
    else:
        manual = as_text(group.get("slug"))
        if not manual:
            msg = f"Navigation slice {index} has neither a 'page' link nor a 'slug'"
            raise NavigationError(msg)
        slug = manual.replace("/", "")
        doc_id = uid = doc_type = slug
        linked = False

    is_home = slug == homepage
    return NavigationItem(
        id=doc_id,
        uid=homepage if is_home else uid,
        type=doc_type,
        slug="/" if is_home else f"/{slug}/",
        title=title,
        style=style.lower(),
        linked=linked,
    )


def find_navigation_item(
    navi: Sequence[NavigationItem],
    content_type: str,
) -> NavigationItem | None:
    """Return the navigation entry whose uid equals *content_type* (last wins)."""
    found: NavigationItem | None = None
    for item in navi:
        if item.uid == content_type:
            found = item
    return found


async def resolve_navigation(
    state: AdapterState,
    api: ContentApi,
    config: ProwlConfig,
    *,
    collector: ContentCollector | None = None,
) -> ContentCache:
    """Populate *state* with the site context and navigation, once.

    Returns the cached pair without a remote call when already resolved.
    The cache is replaced in a single assignment after everything has been
    computed.

    Raises:
        NavigationError: If the site document is missing or malformed.
        RemoteQueryError: If the content API fails.

    """
    cached = state.cache
    if cached is not None:
        return cached

    t0 = time.perf_counter()
    handle = await api.connect()
    document = await handle.get_single(config.site_type)
    if document is None:
        msg = f"Content API has no {config.site_type!r} document"
        raise NavigationError(msg)

    site, navi = normalize_site(
        document,
        homepage=config.homepage,
        navi_key=config.navi_key,
        prefix=config.site_type,
    )
    cache = ContentCache(api=handle, site=site, navi=navi)
    state.replace(cache)

    if collector is not None:
        collector.record_navigation(
            items=len(navi),
            site_keys=len(site.data),
            duration_ms=(time.perf_counter() - t0) * 1000,
        )
    return cache
