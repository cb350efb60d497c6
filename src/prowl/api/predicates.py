"""Predicate builders for content queries.

Each helper renders one predicate term in the content API's query syntax::

    at("document.type", "page")   -> '[at(document.type, "page")]'
    any_("document.tags", ["a"])  -> '[any(document.tags, ["a"])]'

``combine`` joins terms into the bracketed ``q`` parameter value.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence


def _literal(value: object) -> str:
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_literal(v) for v in value) + "]"
    return json.dumps(value)


def at(path: str, value: object) -> str:
    """Exact match: the field at *path* equals *value*."""
    return f"[at({path}, {_literal(value)})]"


def not_(path: str, value: object) -> str:
    """Negated exact match."""
    return f"[not({path}, {_literal(value)})]"


def any_(path: str, values: Sequence[object]) -> str:
    """The field at *path* matches any of *values*."""
    return f"[any({path}, {_literal(list(values))})]"


def in_(path: str, values: Sequence[object]) -> str:
    """Document ids or uids in *values* (``document.id`` / ``my.<type>.uid``)."""
    return f"[in({path}, {_literal(list(values))})]"


def fulltext(path: str, text: str) -> str:
    """Full-text search on *path* (``document`` searches every text field)."""
    return f"[fulltext({path}, {_literal(text)})]"


def combine(filters: Iterable[str]) -> str:
    """Join predicate terms into a single ``q`` value."""
    return "[" + "".join(filters) + "]"
