"""Event model for content resolution and static generation.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Content resolution events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class QueryIssued:
    """A content query was submitted or handed to a listener override.

    Attributes:
        content_type: Requested content type.
        form: Search form the query ran against.
        filters: Predicate strings sent with the query.
        ref: Snapshot reference the query was pinned to.
        overridden: True if a listener supplied a pending result set.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    content_type: str
    form: str
    filters: tuple[str, ...]
    ref: str
    overridden: bool
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class QueryFailed:
    """A content query failed and was reported to the caller as a value.

    Attributes:
        content_type: Requested content type.
        error: Human-readable error message.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    content_type: str
    error: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class NavigationResolved:
    """The site document was fetched and the navigation cache populated.

    Attributes:
        items: Number of navigation items.
        site_keys: Number of site context keys.
        duration_ms: Time spent fetching and normalizing.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    items: int
    site_keys: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class PreviewIssued:
    """A preview token was exchanged for a redirect target."""

    location: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Static generation events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RouteExported:
    """A route was rendered and written to disk.

    Attributes:
        path: Route URL path.
        target: Output file path.
        kind: ``content`` for CMS-backed pages, ``fallback`` for static-only pages,
            ``error_page`` for 404/500 pages, ``sitemap`` for the sitemap.
        duration_ms: Time taken in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    target: str
    kind: Literal["content", "fallback", "error_page", "sitemap"]
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class RouteFailed:
    """A route could not be resolved, rendered, or removed."""

    path: str
    error: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class RouteRemoved:
    """A previously generated artifact was deleted."""

    path: str
    target: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type ProwlEvent = (
    QueryIssued
    | QueryFailed
    | NavigationResolved
    | PreviewIssued
    | RouteExported
    | RouteFailed
    | RouteRemoved
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
