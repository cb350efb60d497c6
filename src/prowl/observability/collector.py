"""Content collector — records resolution and generation events.

The adapter and the static generator report what they did through a
collector rather than printing, so callers decide how to surface it
(stderr summaries in the CLI, assertions in tests).

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

from prowl.observability.events import (
    NavigationResolved,
    PreviewIssued,
    QueryFailed,
    QueryIssued,
    RouteExported,
    RouteFailed,
    RouteRemoved,
    now_ns,
)
from prowl.observability.log import EventLog


class ContentCollector:
    """Unified event collector for content resolution and static generation.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Content resolution -----

    def record_query(
        self,
        content_type: str,
        *,
        form: str,
        filters: Sequence[str] = (),
        ref: str = "",
        overridden: bool = False,
    ) -> None:
        """Record a submitted (or overridden) content query."""
        self._log.append(
            QueryIssued(
                content_type=content_type,
                form=form,
                filters=tuple(filters),
                ref=ref,
                overridden=overridden,
                timestamp_ns=now_ns(),
            )
        )

    def record_query_failure(self, content_type: str, error: str) -> None:
        """Record a query failure that was absorbed into an error payload."""
        self._log.append(
            QueryFailed(content_type=content_type, error=error, timestamp_ns=now_ns())
        )

    def record_navigation(
        self,
        *,
        items: int,
        site_keys: int,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a navigation cache population."""
        self._log.append(
            NavigationResolved(
                items=items,
                site_keys=site_keys,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_preview(self, location: str) -> None:
        """Record a preview token exchange."""
        self._log.append(PreviewIssued(location=location, timestamp_ns=now_ns()))

    # ----- Static generation -----

    def record_export(
        self,
        path: str,
        target: str,
        *,
        kind: Literal["content", "fallback", "error_page", "sitemap"] = "content",
        duration_ms: float = 0.0,
    ) -> None:
        """Record a written static artifact."""
        self._log.append(
            RouteExported(
                path=path,
                target=target,
                kind=kind,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_failure(self, path: str, error: str) -> None:
        """Record a route that failed during generate or clean."""
        self._log.append(RouteFailed(path=path, error=error, timestamp_ns=now_ns()))

    def record_removal(self, path: str, target: str) -> None:
        """Record a removed static artifact."""
        self._log.append(RouteRemoved(path=path, target=target, timestamp_ns=now_ns()))
