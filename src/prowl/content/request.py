"""Inbound request and outbound payload shapes.

The HTTP layer that maps URLs to adapter calls lives outside prowl; it
hands the adapter a ``ContentRequest`` built from its own request object:

    params   /:type/:uid path parameters
    query    ?format=html&template=foo&token=...
    cookies  request cookies (the preview cookie pins the snapshot ref)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prowl.api.documents import Document


def _frozen(mapping: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True, slots=True)
class ContentRequest:
    """One adapter invocation's view of the incoming request."""

    params: Mapping[str, str] = field(default_factory=dict)
    query: Mapping[str, str] = field(default_factory=dict)
    cookies: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", _frozen(self.params))
        object.__setattr__(self, "query", _frozen(self.query))
        object.__setattr__(self, "cookies", _frozen(self.cookies))

    @classmethod
    def for_route(cls, content_type: str | None, uid: str | None = None) -> ContentRequest:
        """Build a request for a generated route (no query string, no cookies)."""
        params: dict[str, str] = {}
        if content_type:
            params["type"] = content_type
        if uid:
            params["uid"] = uid
        return cls(params=params)

    @property
    def type(self) -> str | None:
        return self.params.get("type") or None

    @property
    def uid(self) -> str | None:
        return self.params.get("uid") or None

    @property
    def format(self) -> str | None:
        return self.query.get("format") or None

    @property
    def template(self) -> str | None:
        return self.query.get("template") or None

    @property
    def token(self) -> str | None:
        return self.query.get("token") or None

    def cookie(self, name: str) -> str | None:
        return self.cookies.get(name) or None


@dataclass(frozen=True, slots=True)
class PageData:
    """Data needed to render a full page.

    Both fields are None for pages with no CMS-backed content.
    """

    item: Document | None = None
    items: tuple[Document, ...] | None = None

    @property
    def is_empty(self) -> bool:
        return self.item is None and self.items is None


@dataclass(frozen=True, slots=True)
class PreviewCookie:
    """Session cookie that pins subsequent queries to a preview ref.

    Readable by client script (``http_only=False``) so pages can show a
    preview banner.
    """

    name: str
    value: str
    max_age: int
    path: str = "/"
    http_only: bool = False
    expires_at: float = 0.0

    def header(self) -> str:
        """Render as a ``Set-Cookie`` header value."""
        parts = [f"{self.name}={self.value}", f"Max-Age={self.max_age}", f"Path={self.path}"]
        if self.http_only:
            parts.append("HttpOnly")
        return "; ".join(parts)


@dataclass(frozen=True, slots=True)
class PreviewRedirect:
    """Result of a preview token exchange."""

    location: str
    cookie: PreviewCookie
