"""Tests for prowl.content.navigation — site context and menu resolution."""

from __future__ import annotations

from typing import Any

import pytest
from conftest import ENDPOINT, FakeCms, navi_slice

from prowl._errors import NavigationError, RemoteQueryError
from prowl.api.client import ContentApi
from prowl.api.documents import Document
from prowl.config import ProwlConfig
from prowl.content.navigation import (
    NavigationItem,
    SiteContext,
    find_navigation_item,
    normalize_site,
    resolve_navigation,
)
from prowl.content.state import AdapterState
from prowl.observability.collector import ContentCollector
from prowl.observability.events import NavigationResolved


def _site(**data: Any) -> Document:
    return Document(id="site-id", uid=None, type="site", fragments=data)


class TestNormalizeSite:
    def test_items_in_slice_order(self) -> None:
        slices = [navi_slice(f"Entry {n}", slug=f"/entry-{n}/") for n in range(5)]
        _, navi = normalize_site(_site(navi=slices), homepage="home")
        assert [item.title for item in navi] == [f"Entry {n}" for n in range(5)]
        assert [item.slug for item in navi] == [f"/entry-{n}/" for n in range(5)]

    def test_homepage_slug_is_root(self) -> None:
        slices = [
            navi_slice("Home", page={"id": "h", "uid": "home", "type": "home"}),
            navi_slice("About", page={"id": "a", "uid": "about", "type": "page"}),
        ]
        _, navi = normalize_site(_site(navi=slices), homepage="home")
        home, about = navi
        assert home.slug == "/"
        assert home.uid == "home"
        assert about.slug == "/about/"
        assert about.uid == "about"
        assert about.type == "page"
        assert about.id == "a"
        assert about.linked is True

    def test_manual_slug_entry(self) -> None:
        _, navi = normalize_site(_site(navi=[navi_slice("Work", "Secondary", slug="/work/")]), homepage="home")
        (item,) = navi
        assert item == NavigationItem(
            id="work", uid="work", type="work", slug="/work/", title="Work", style="secondary",
        )
        assert item.linked is False

    def test_manual_homepage_slug(self) -> None:
        _, navi = normalize_site(_site(navi=[navi_slice("Start", slug="home")]), homepage="home")
        assert navi[0].slug == "/"

    def test_style_lowercased(self) -> None:
        _, navi = normalize_site(_site(navi=[navi_slice("X", "CallToAction", slug="x")]), homepage="home")
        assert navi[0].style == "calltoaction"

    def test_empty_style_allowed(self) -> None:
        _, navi = normalize_site(_site(navi=[navi_slice("X", "", slug="x")]), homepage="home")
        assert navi[0].style == ""

    def test_site_context_strips_namespace_and_navi(self) -> None:
        doc = _site(**{
            "site.title": "Prowl",
            "site.tagline": {"type": "Text", "value": "Hello"},
            "site.navi": [],
            "footer": {"url": "https://x.test"},
        })
        site, navi = normalize_site(doc, homepage="home")
        assert navi == ()
        assert dict(site.data) == {"title": "Prowl", "tagline": "Hello", "footer": "https://x.test"}

    def test_missing_zone(self) -> None:
        with pytest.raises(NavigationError, match="no 'navi' slice zone"):
            normalize_site(_site(title="t"), homepage="home")

    def test_zone_not_a_list(self) -> None:
        with pytest.raises(NavigationError, match="not a slice zone"):
            normalize_site(_site(navi="oops"), homepage="home")

    @pytest.mark.parametrize(
        ("slice_", "message"),
        [
            ({"slice_type": "menu_item", "items": []}, "no item group"),
            ({"slice_type": "menu_item"}, "no item group"),
            ({"items": [{"name": "X", "slug": "x"}]}, "missing 'style'"),
            ({"items": [{"style": "Primary", "slug": "x"}]}, "missing 'name'"),
            ({"items": [{"style": "Primary", "name": "X"}]}, "neither a 'page' link nor a 'slug'"),
            ({"items": [{"style": "Primary", "name": "X", "page": {"id": "p1"}}]}, "without a uid"),
        ],
    )
    def test_malformed_slice_is_fatal(self, slice_: dict[str, Any], message: str) -> None:
        good = navi_slice("Fine", slug="fine")
        with pytest.raises(NavigationError, match=message):
            normalize_site(_site(navi=[good, slice_]), homepage="home")


class TestFindNavigationItem:
    def test_last_match_wins(self) -> None:
        first = NavigationItem("1", "work", "work", "/work/", "A", "primary")
        second = NavigationItem("2", "work", "work", "/work/", "B", "primary")
        assert find_navigation_item([first, second], "work") is second

    def test_no_match(self) -> None:
        assert find_navigation_item([], "work") is None


class TestSiteContext:
    def test_read_only(self) -> None:
        site = SiteContext({"title": "x"})
        assert site.get("title") == "x"
        assert site.get("missing", 1) == 1
        with pytest.raises(TypeError):
            site.data["title"] = "y"  # type: ignore[index]


class TestResolveNavigation:
    @pytest.mark.asyncio
    async def test_populates_state(self, api: ContentApi, config: ProwlConfig) -> None:
        state = AdapterState()
        collector = ContentCollector()
        cache = await resolve_navigation(state, api, config, collector=collector)
        assert state.cache is cache
        assert state.is_resolved
        assert [item.slug for item in cache.navi] == ["/", "/work/", "/contact/"]
        assert cache.site.get("title") == "Prowl Test"
        assert cache.site.get("tagline") == "Content, resolved"
        assert cache.site.get("twitter") == "https://twitter.test/prowl"
        (event,) = collector.log.query(event_type=NavigationResolved)
        assert event.items == 3

    @pytest.mark.asyncio
    async def test_idempotent(self, cms: FakeCms, api: ContentApi, config: ProwlConfig) -> None:
        state = AdapterState()
        first = await resolve_navigation(state, api, config)
        request_count = len(cms.requests)
        second = await resolve_navigation(state, api, config)
        assert second is first
        assert len(cms.requests) == request_count

    @pytest.mark.asyncio
    async def test_missing_site_document(self, empty_cms: FakeCms, config: ProwlConfig) -> None:
        api = ContentApi(ENDPOINT, transport=empty_cms.transport())
        state = AdapterState()
        with pytest.raises(NavigationError, match="no 'site' document"):
            await resolve_navigation(state, api, config)
        assert state.cache is None

    @pytest.mark.asyncio
    async def test_malformed_leaves_no_partial_cache(self, empty_cms: FakeCms, config: ProwlConfig) -> None:
        empty_cms.add("site", doc_id="site-id", data={
            "navi": [navi_slice("Ok", slug="ok"), {"items": [{"style": "x"}]}],
        })
        api = ContentApi(ENDPOINT, transport=empty_cms.transport())
        state = AdapterState()
        with pytest.raises(NavigationError):
            await resolve_navigation(state, api, config)
        assert state.cache is None

    @pytest.mark.asyncio
    async def test_remote_failure_propagates(self, cms: FakeCms, api: ContentApi, config: ProwlConfig) -> None:
        cms.search_status = 500
        state = AdapterState()
        with pytest.raises(RemoteQueryError):
            await resolve_navigation(state, api, config)
        assert state.cache is None

    @pytest.mark.asyncio
    async def test_invalidate_forces_refetch(self, cms: FakeCms, api: ContentApi, config: ProwlConfig) -> None:
        state = AdapterState()
        first = await resolve_navigation(state, api, config)
        state.invalidate()
        second = await resolve_navigation(state, api, config)
        assert second is not first
        assert second.navi == first.navi
