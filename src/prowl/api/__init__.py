"""Content API layer — transport, document model, and predicates.

Speaks the headless CMS's REST API over httpx and normalizes its JSON into
``Document`` and ``SearchResponse`` values.
"""

from prowl.api.client import EVERYTHING_FORM, ApiHandle, ContentApi, Form
from prowl.api.documents import Document, SearchResponse, find_document

__all__ = [
    "EVERYTHING_FORM",
    "ApiHandle",
    "ContentApi",
    "Document",
    "Form",
    "SearchResponse",
    "find_document",
]
