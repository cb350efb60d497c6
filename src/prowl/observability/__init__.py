"""Observability — structured events for content resolution and generation.

Aggregates events from:
- **Content adapter**: queries, navigation resolution, preview exchanges
- **Static generator**: exported, failed, and removed routes

All events are frozen dataclasses with nanosecond timestamps, safe for
concurrent production.

Quick Start:
    >>> from prowl.observability import ContentCollector, EventLog
    >>> log = EventLog()
    >>> collector = ContentCollector(log)
    >>> # Pass collector to ContentAdapter / StaticGenerator

"""

from prowl.observability.collector import ContentCollector
from prowl.observability.events import (
    NavigationResolved,
    PreviewIssued,
    ProwlEvent,
    QueryFailed,
    QueryIssued,
    RouteExported,
    RouteFailed,
    RouteRemoved,
    now_ns,
)
from prowl.observability.log import EventLog

__all__ = [
    "ContentCollector",
    "EventLog",
    "NavigationResolved",
    "PreviewIssued",
    "ProwlEvent",
    "QueryFailed",
    "QueryIssued",
    "RouteExported",
    "RouteFailed",
    "RouteRemoved",
    "now_ns",
]
