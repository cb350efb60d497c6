"""Event log — bounded, lock-protected store of prowl events.

Holds the most recent events of a run so the CLI can summarize content
traffic and tests can assert on what the adapter and generator did.
Lookups match a route path or a content type by substring.
"""

import threading
from collections import Counter, deque

from prowl.observability.events import ProwlEvent


def _subject(event: ProwlEvent) -> str:
    """Route path for generation events, content type for query events."""
    return getattr(event, "path", None) or getattr(event, "content_type", None) or ""


class EventLog:
    """Ring buffer of events, oldest dropped first once ``max_events`` is hit."""

    __slots__ = ("_events", "_lock")

    def __init__(self, max_events: int = 10_000) -> None:
        self._events: deque[ProwlEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: ProwlEvent) -> None:
        with self._lock:
            self._events.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        path: str | None = None,
        limit: int = 100,
    ) -> list[ProwlEvent]:
        """Return up to *limit* matching events, most recent first."""
        with self._lock:
            snapshot = list(self._events)
        matches = (
            event
            for event in reversed(snapshot)
            if (event_type is None or isinstance(event, event_type))
            and (path is None or path in _subject(event))
        )
        return [event for _, event in zip(range(limit), matches, strict=False)]

    def count(self, event_type: type) -> int:
        """Number of retained events of *event_type*."""
        with self._lock:
            return sum(1 for event in self._events if isinstance(event, event_type))

    def by_subject(self, event_type: type) -> Counter[str]:
        """Count retained *event_type* events per route path or content type."""
        with self._lock:
            return Counter(_subject(e) for e in self._events if isinstance(e, event_type))

    def clear(self) -> int:
        """Drop every event; returns how many were dropped."""
        with self._lock:
            dropped = len(self._events)
            self._events.clear()
            return dropped

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
