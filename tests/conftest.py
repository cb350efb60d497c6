"""Shared test fixtures for prowl."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import httpx
import pytest

from prowl.api.client import ContentApi
from prowl.config import ProwlConfig
from prowl.content.adapter import ContentAdapter
from prowl.content.manifest import PageManifest
from prowl.observability.collector import ContentCollector

ENDPOINT = "https://cms.test/api/v2"
SEARCH_URL = "https://cms.test/api/v2/documents/search"
MASTER_REF = "master-ref"

_AT = re.compile(r'at\((document\.\w+), "([^"]*)"\)')
_FIELDS = {"document.type": "type", "document.id": "id"}


# ---------------------------------------------------------------------------
# Fake content API
# ---------------------------------------------------------------------------


class FakeCms:
    """In-memory content API served through ``httpx.MockTransport``.

    Understands ``at(document.type, ...)`` and ``at(document.id, ...)``
    predicates, paging, refs, collection forms, and preview sessions.
    """

    def __init__(self) -> None:
        self.documents: list[dict[str, Any]] = []
        self.ref_documents: dict[str, list[dict[str, Any]]] = {}
        self.forms: dict[str, str] = {}
        self.previews: dict[str, dict[str, Any]] = {}
        self.master_ref: str | None = MASTER_REF
        self.requests: list[httpx.Request] = []
        self.search_status: int | None = None

    def add(
        self,
        doc_type: str,
        uid: str | None = None,
        *,
        doc_id: str | None = None,
        data: dict[str, Any] | None = None,
        tags: tuple[str, ...] = (),
        ref: str | None = None,
    ) -> dict[str, Any]:
        doc = {
            "id": doc_id or f"{doc_type}-{uid or len(self.documents)}",
            "uid": uid,
            "type": doc_type,
            "href": f"{SEARCH_URL}?id={doc_id or uid}",
            "tags": list(tags),
            "data": data or {},
        }
        if ref is None:
            self.documents.append(doc)
        else:
            self.ref_documents.setdefault(ref, []).append(doc)
        return doc

    def add_form(self, name: str, doc_type: str) -> None:
        """Expose a pre-filtered collection form for *doc_type*."""
        self.forms[name] = f'[[at(document.type, "{doc_type}")]]'

    def add_preview(self, token_path: str, main_document: str | None) -> str:
        session: dict[str, Any] = {"draftsCount": 1}
        if main_document is not None:
            session["mainDocument"] = main_document
        self.previews[token_path] = session
        return f"https://cms.test{token_path}"

    @property
    def searches(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith("/documents/search")]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/api/v2":
            return httpx.Response(200, json=self._entry())
        if path == "/api/v2/documents/search":
            return self._search(request)
        if path in self.previews:
            return httpx.Response(200, json=self.previews[path])
        return httpx.Response(404, json={"message": f"No such resource {path}"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def _entry(self) -> dict[str, Any]:
        refs = []
        if self.master_ref is not None:
            refs.append({"id": "master", "ref": self.master_ref, "label": "Master", "isMasterRef": True})
        forms: dict[str, Any] = {
            "everything": {"method": "GET", "action": SEARCH_URL, "fields": {"q": {"multiple": True}}},
        }
        for name, default in self.forms.items():
            forms[name] = {
                "method": "GET",
                "action": SEARCH_URL,
                "fields": {"q": {"multiple": True, "default": default}},
            }
        return {"refs": refs, "forms": forms}

    def _search(self, request: httpx.Request) -> httpx.Response:
        if self.search_status is not None:
            return httpx.Response(self.search_status, json={"message": "search is down"})

        params = request.url.params
        ref = params.get("ref")
        matches = self.documents + self.ref_documents.get(ref or "", [])
        for q in params.get_list("q"):
            for field, value in _AT.findall(q):
                key = _FIELDS[field]
                matches = [doc for doc in matches if doc[key] == value]

        page_size = int(params.get("pageSize", 20))
        page = int(params.get("page", 1))
        total_pages = max(1, -(-len(matches) // page_size))
        start = (page - 1) * page_size
        return httpx.Response(200, json={
            "page": page,
            "results_per_page": page_size,
            "results_size": len(matches[start:start + page_size]),
            "total_results_size": len(matches),
            "total_pages": total_pages,
            "results": matches[start:start + page_size],
        })


def navi_slice(name: str, style: str = "Primary", **target: Any) -> dict[str, Any]:
    """One navigation slice; pass ``page={...}`` or ``slug="..."``."""
    group: dict[str, Any] = {
        "style": style,
        "name": [{"type": "heading3", "text": name, "spans": []}],
    }
    group.update(target)
    return {"slice_type": "menu_item", "primary": {}, "items": [group]}


def seed_site(cms: FakeCms) -> FakeCms:
    """Populate *cms* with a small site: home, contact page, two works."""
    cms.add("site", doc_id="site-id", data={
        "title": "Prowl Test",
        "tagline": {"type": "Text", "value": "Content, resolved"},
        "twitter": {"link_type": "Web", "url": "https://twitter.test/prowl"},
        "navi": [
            navi_slice("Home", page={"id": "home-id", "uid": "home", "type": "home"}),
            navi_slice("Work", style="Secondary", slug="/work/"),
            navi_slice("Contact", page={"id": "contact-id", "uid": "contact", "type": "page"}),
        ],
    })
    cms.add("home", "home", doc_id="home-id", data={"title": "Welcome"})
    cms.add("page", "contact", doc_id="contact-id", data={"title": "Contact us"})
    cms.add("work", "alpha", doc_id="work-alpha", data={"title": "Alpha"})
    cms.add("work", "beta", doc_id="work-beta", data={"title": "Beta"})
    return cms


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


class RecordingRenderer:
    """Renderer double: records calls, renders a one-line summary."""

    def __init__(self, fail: frozenset[str] = frozenset()) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.fail = fail

    async def render(self, template: str, **context: Any) -> str:
        self.calls.append((template, context))
        if template in self.fail:
            msg = f"cannot render {template}"
            raise RuntimeError(msg)
        item = context.get("item")
        items = context.get("items") or ()
        uid = item.uid if item is not None else ""
        return f"<main data-template='{template}'>{uid}|{len(items)}</main>"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cms() -> FakeCms:
    return seed_site(FakeCms())


@pytest.fixture
def empty_cms() -> FakeCms:
    return FakeCms()


@pytest.fixture
def tmp_site(tmp_path: Path) -> Path:
    """Create a minimal site: home/about/404 pages and a work partial."""
    pages = tmp_path / "template" / "pages"
    pages.mkdir(parents=True)
    (pages / "home.html").write_text("<h1>{{ item.uid }}</h1>\n")
    (pages / "about.html").write_text("<h1>About</h1>\n")
    (pages / "404.html").write_text("<h1>Not found</h1>\n")
    (pages / "_layout.html").write_text("<html></html>\n")

    partials = tmp_path / "template" / "partials"
    partials.mkdir()
    (partials / "work.html").write_text("<li>{{ item.uid }}</li>\n")
    return tmp_path


@pytest.fixture
def config(tmp_site: Path) -> ProwlConfig:
    return ProwlConfig(root=tmp_site, api_endpoint=ENDPOINT)


@pytest.fixture
def api(cms: FakeCms) -> ContentApi:
    return ContentApi(ENDPOINT, transport=cms.transport())


@pytest.fixture
def manifest(config: ProwlConfig) -> PageManifest:
    return PageManifest(config)


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def collector() -> ContentCollector:
    return ContentCollector()


@pytest.fixture
def adapter(
    config: ProwlConfig,
    api: ContentApi,
    manifest: PageManifest,
    renderer: RecordingRenderer,
    collector: ContentCollector,
) -> ContentAdapter:
    return ContentAdapter(config, api, manifest, renderer, collector=collector)
