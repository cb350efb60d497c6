"""Query builder — content queries with type filters, paging, and overrides.

A query targets either a named search form (a pre-filtered collection the
API exposes, queried as-is) or the generic ``everything`` form narrowed by
a ``document.type`` predicate.  The snapshot ref is the preview cookie's
value when present, otherwise the API's published master ref.

Listener query hooks return one of two overrides:

- ``Filters``: replacement predicate list; the descriptor is submitted.
- ``PendingResultSet``: an awaitable yielding the final ``SearchResponse``;
  the standard submit is skipped entirely.
"""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from prowl.api import predicates
from prowl.api.client import EVERYTHING_FORM

if TYPE_CHECKING:
    from prowl.api.client import ApiHandle
    from prowl.api.documents import SearchResponse
    from prowl.content.listener import Listener
    from prowl.content.navigation import NavigationItem
    from prowl.content.request import ContentRequest
    from prowl.content.state import ContentCache
    from prowl.observability.collector import ContentCollector

DEFAULT_PAGE_SIZE = 100


@dataclass(frozen=True, slots=True)
class QueryDescriptor:
    """A submittable content query.

    Attributes:
        type: Requested content type.
        form: Search form to query.
        filters: Predicate terms, in order.
        page_size: Documents per page.
        ref: Snapshot reference (master or preview).

    """

    type: str
    form: str
    filters: tuple[str, ...]
    page_size: int
    ref: str


@dataclass(frozen=True, slots=True)
class Filters:
    """Listener override: replace the predicate list, keep the standard submit."""

    terms: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "terms", tuple(self.terms))


@dataclass(frozen=True, slots=True)
class PendingResultSet:
    """Listener override: the final result set, computed by the caller."""

    result: Awaitable[SearchResponse]


type QueryOverride = Filters | PendingResultSet


def resolve_ref(request: ContentRequest | None, api: ApiHandle, cookie_name: str) -> str:
    """Return the preview cookie's ref if the request carries one, else master."""
    if request is not None:
        preview = request.cookie(cookie_name)
        if preview:
            return preview
    return api.master_ref


def resolve_form(api: ApiHandle, content_type: str) -> str:
    """Query a form of the same name directly, else fall back to ``everything``."""
    return content_type if api.has_form(content_type) else EVERYTHING_FORM


def base_filters(
    api: ApiHandle,
    content_type: str,
    navi: NavigationItem | None = None,
) -> list[str]:
    """Default predicates for a content type.

    A link-based navigation item pins the exact document it references.
    Form collections are implicitly typed, so they get no type predicate.
    """
    if navi is not None and navi.linked:
        return [
            predicates.at("document.type", navi.type),
            predicates.at("document.id", navi.id),
        ]
    if api.has_form(content_type):
        return []
    return [predicates.at("document.type", content_type)]


def build_query(
    api: ApiHandle,
    request: ContentRequest | None,
    content_type: str,
    filters: list[str] | tuple[str, ...],
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    cookie_name: str,
) -> QueryDescriptor:
    return QueryDescriptor(
        type=content_type,
        form=resolve_form(api, content_type),
        filters=tuple(filters),
        page_size=page_size,
        ref=resolve_ref(request, api, cookie_name),
    )


def apply_listener(
    listener: Listener,
    api: ApiHandle,
    filters: list[str],
    cache: ContentCache | None,
    request: ContentRequest,
) -> QueryOverride:
    """Run the listener's query hook, or pass the base filters through."""
    if listener.query is None:
        return Filters(filters)
    return listener.query(api, list(filters), cache, request)


async def run_query(
    api: ApiHandle,
    request: ContentRequest,
    content_type: str,
    *,
    listener: Listener,
    cache: ContentCache | None,
    navi: NavigationItem | None = None,
    page_size: int = DEFAULT_PAGE_SIZE,
    cookie_name: str,
    collector: ContentCollector | None = None,
) -> SearchResponse:
    """Build, override, and execute a content query.

    Exactly one remote path runs: the standard submit for ``Filters``, or
    the listener's own computation for ``PendingResultSet``.

    Raises:
        TypeError: If the listener hook returns anything but an override.

    """
    override = apply_listener(
        listener, api, base_filters(api, content_type, navi), cache, request,
    )

    match override:
        case PendingResultSet(result=pending):
            if collector is not None:
                collector.record_query(
                    content_type,
                    form=resolve_form(api, content_type),
                    ref=resolve_ref(request, api, cookie_name),
                    overridden=True,
                )
            return await pending
        case Filters(terms=terms):
            query = build_query(
                api, request, content_type, terms,
                page_size=page_size, cookie_name=cookie_name,
            )
            if collector is not None:
                collector.record_query(
                    content_type, form=query.form, filters=query.filters, ref=query.ref,
                )
            return await api.submit(query)
        case _:
            msg = (
                f"Listener query hook for {content_type!r} returned "
                f"{type(override).__name__}; expected Filters or PendingResultSet"
            )
            raise TypeError(msg)
