"""Prowl error hierarchy.

All prowl-specific errors inherit from ProwlError for easy catching.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path


class ProwlError(Exception):
    """Base error for all prowl operations."""


class ConfigError(ProwlError):
    """Invalid or missing configuration."""


class ContentError(ProwlError):
    """Error while resolving content from the content API."""


class ContentNotFoundError(ContentError):
    """A content type has no remote documents and no static fallback page."""

    def __init__(self, content_type: str) -> None:
        self.content_type = content_type
        super().__init__(f"The content API has no data for the content-type {content_type!r}.")


class DocumentNotFoundError(ContentError):
    """A document with the requested UID is not in the result set."""

    def __init__(self, uid: str) -> None:
        self.uid = uid
        super().__init__(f"The document with UID {uid!r} could not be found.")


class RemoteQueryError(ContentError):
    """The content API rejected a request or could not be reached.

    Attributes:
        status: HTTP status code, or 0 for transport failures.
        payload: Decoded JSON error body, if the API sent one.

    """

    def __init__(
        self,
        message: str,
        status: int = 0,
        payload: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload or {}


class NavigationError(ContentError):
    """The site document is missing or one of its navigation slices is malformed."""


class ExportError(ProwlError):
    """A generated file could not be written."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot write {path}: {reason}")
