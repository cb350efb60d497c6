"""Document model — remote content records in a stable shape.

The content API returns loosely-typed JSON.  ``Document`` keeps the fields
the resolvers rely on as attributes and the per-type field values as
``fragments``; everything else is preserved in ``raw``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True, slots=True)
class Document:
    """A single content record.

    Attributes:
        id: API-wide document identifier.
        uid: Human-readable identifier, unique per content type (may be empty).
        type: Content type discriminator.
        href: API URL of the document.
        tags: Editorial tags.
        fragments: Field name -> raw field value.
        raw: The original JSON object.

    """

    id: str
    uid: str | None
    type: str
    href: str = ""
    tags: tuple[str, ...] = ()
    fragments: Mapping[str, Any] = field(default_factory=dict)
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> Document:
        """Build a Document from a search-result JSON object."""
        return cls(
            id=str(data["id"]),
            uid=data.get("uid"),
            type=str(data["type"]),
            href=str(data.get("href") or ""),
            tags=tuple(data.get("tags") or ()),
            fragments=MappingProxyType(dict(data.get("data") or {})),
            raw=MappingProxyType(dict(data)),
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Return a fragment by name, with or without the ``<type>.`` namespace."""
        namespace = f"{self.type}."
        for candidate in (key, namespace + key, key.removeprefix(namespace)):
            if candidate in self.fragments:
                return self.fragments[candidate]
        return default

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""
        if self.raw:
            return dict(self.raw)
        return {
            "id": self.id,
            "uid": self.uid,
            "type": self.type,
            "href": self.href,
            "tags": list(self.tags),
            "data": dict(self.fragments),
        }


@dataclass(frozen=True, slots=True)
class SearchResponse:
    """One page of query results.

    Attributes:
        results: Documents on this page.
        page: 1-based page number.
        total_pages: Number of pages for the query.
        total_results_size: Number of documents across all pages.

    """

    results: tuple[Document, ...] = ()
    page: int = 1
    total_pages: int = 1
    total_results_size: int = 0

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> SearchResponse:
        results = tuple(Document.from_json(doc) for doc in data.get("results") or ())
        return cls(
            results=results,
            page=int(data.get("page") or 1),
            total_pages=int(data.get("total_pages") or 1),
            total_results_size=int(data.get("total_results_size") or len(results)),
        )

    @classmethod
    def of(cls, documents: list[Document] | tuple[Document, ...]) -> SearchResponse:
        """Wrap an in-memory list of documents as a single-page response."""
        return cls(results=tuple(documents), total_results_size=len(documents))


def find_document(uid: str | None, documents: tuple[Document, ...] | list[Document]) -> Document | None:
    """Return the first document whose uid matches, or None."""
    for doc in documents:
        if doc.uid == uid:
            return doc
    return None


def fragment_value(value: Any) -> Any:
    """Normalize a fragment to its display value.

    Structured fragments expose ``value`` (text-like) or ``url`` (links,
    images, media); anything else is returned unchanged.
    """
    if isinstance(value, Mapping):
        if value.get("value") is not None:
            return value["value"]
        if value.get("url") is not None:
            return value["url"]
    return value


def as_text(value: Any) -> str | None:
    """Flatten a plain or rich-text fragment to a string.

    Rich text arrives as a list of blocks; the first block's text wins.
    """
    value = fragment_value(value)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        for block in value:
            if isinstance(block, Mapping) and block.get("text"):
                return str(block["text"])
        return None
    return str(value)
