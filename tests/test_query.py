"""Tests for prowl.content.query — filters, refs, and listener overrides."""

from __future__ import annotations

from typing import Any

import pytest
from conftest import MASTER_REF, FakeCms

from prowl.api import predicates
from prowl.api.client import EVERYTHING_FORM, ContentApi
from prowl.api.documents import Document, SearchResponse
from prowl.content.listener import NO_HOOKS, Listener
from prowl.content.navigation import NavigationItem
from prowl.content.query import (
    Filters,
    PendingResultSet,
    base_filters,
    build_query,
    resolve_form,
    resolve_ref,
    run_query,
)
from prowl.content.request import ContentRequest
from prowl.observability.collector import ContentCollector
from prowl.observability.events import QueryIssued

COOKIE = "io.prismic.preview"


def _linked(uid: str = "contact", doc_type: str = "page", doc_id: str = "contact-id") -> NavigationItem:
    return NavigationItem(
        id=doc_id, uid=uid, type=doc_type, slug=f"/{uid}/", title=uid, style="primary", linked=True,
    )


class TestResolveRef:
    @pytest.mark.asyncio
    async def test_master_without_cookie(self, api: ContentApi) -> None:
        handle = await api.connect()
        assert resolve_ref(ContentRequest(), handle, COOKIE) == MASTER_REF
        assert resolve_ref(None, handle, COOKIE) == MASTER_REF

    @pytest.mark.asyncio
    async def test_preview_cookie_wins(self, api: ContentApi) -> None:
        handle = await api.connect()
        request = ContentRequest(cookies={COOKIE: "preview-ref"})
        assert resolve_ref(request, handle, COOKIE) == "preview-ref"


class TestBaseFilters:
    @pytest.mark.asyncio
    async def test_type_predicate(self, api: ContentApi) -> None:
        handle = await api.connect()
        assert base_filters(handle, "work") == [predicates.at("document.type", "work")]
        assert resolve_form(handle, "work") == EVERYTHING_FORM

    @pytest.mark.asyncio
    async def test_form_collection_has_no_filters(self, cms: FakeCms, api: ContentApi) -> None:
        cms.add_form("featured", "work")
        handle = await api.connect()
        assert base_filters(handle, "featured") == []
        assert resolve_form(handle, "featured") == "featured"

    @pytest.mark.asyncio
    async def test_linked_navigation_pins_document(self, api: ContentApi) -> None:
        handle = await api.connect()
        assert base_filters(handle, "contact", _linked()) == [
            predicates.at("document.type", "page"),
            predicates.at("document.id", "contact-id"),
        ]

    @pytest.mark.asyncio
    async def test_manual_navigation_does_not_pin(self, api: ContentApi) -> None:
        handle = await api.connect()
        manual = NavigationItem(
            id="work", uid="work", type="work", slug="/work/", title="Work", style="secondary",
        )
        assert base_filters(handle, "work", manual) == [predicates.at("document.type", "work")]


class TestBuildQuery:
    @pytest.mark.asyncio
    async def test_descriptor(self, api: ContentApi) -> None:
        handle = await api.connect()
        query = build_query(
            handle, ContentRequest(cookies={COOKIE: "p"}), "work", ["a", "b"],
            page_size=5, cookie_name=COOKIE,
        )
        assert query.type == "work"
        assert query.form == EVERYTHING_FORM
        assert query.filters == ("a", "b")
        assert query.page_size == 5
        assert query.ref == "p"


class TestRunQuery:
    @pytest.mark.asyncio
    async def test_default_submit(self, cms: FakeCms, api: ContentApi) -> None:
        handle = await api.connect()
        collector = ContentCollector()
        response = await run_query(
            handle, ContentRequest.for_route("work"), "work",
            listener=NO_HOOKS, cache=None, cookie_name=COOKIE, collector=collector,
        )
        assert [d.uid for d in response.results] == ["alpha", "beta"]
        assert len(cms.searches) == 1
        (event,) = collector.log.query(event_type=QueryIssued)
        assert event.content_type == "work"
        assert event.overridden is False
        assert event.ref == MASTER_REF

    @pytest.mark.asyncio
    async def test_filters_override_replaces_predicates(self, cms: FakeCms, api: ContentApi) -> None:
        seen: list[list[str]] = []

        def only_beta(api: Any, filters: list[str], cache: Any, request: Any) -> Filters:
            seen.append(filters)
            return Filters([*filters, predicates.at("document.id", "work-beta")])

        handle = await api.connect()
        response = await run_query(
            handle, ContentRequest.for_route("work"), "work",
            listener=Listener(query=only_beta), cache=None, cookie_name=COOKIE,
        )
        assert seen == [[predicates.at("document.type", "work")]]
        assert [d.uid for d in response.results] == ["beta"]
        assert cms.searches[-1].url.params.get_list("q") == [
            '[[at(document.type, "work")][at(document.id, "work-beta")]]'
        ]

    @pytest.mark.asyncio
    async def test_pending_result_set_skips_default_query(self, cms: FakeCms, api: ContentApi) -> None:
        custom = SearchResponse.of([Document(id="c1", uid="custom", type="work")])

        async def compute() -> SearchResponse:
            return custom

        handle = await api.connect()
        collector = ContentCollector()
        response = await run_query(
            handle, ContentRequest.for_route("work"), "work",
            listener=Listener(query=lambda *args: PendingResultSet(compute())),
            cache=None, cookie_name=COOKIE, collector=collector,
        )
        assert response is custom
        assert cms.searches == []
        (event,) = collector.log.query(event_type=QueryIssued)
        assert event.overridden is True

    @pytest.mark.asyncio
    async def test_bad_override_type(self, api: ContentApi) -> None:
        handle = await api.connect()
        with pytest.raises(TypeError, match="expected Filters or PendingResultSet"):
            await run_query(
                handle, ContentRequest.for_route("work"), "work",
                listener=Listener(query=lambda *args: ["not", "an", "override"]),  # type: ignore[arg-type,return-value]
                cache=None, cookie_name=COOKIE,
            )

    @pytest.mark.asyncio
    async def test_preview_cookie_pins_ref(self, cms: FakeCms, api: ContentApi) -> None:
        cms.add("work", "draft", doc_id="work-draft", ref="preview-ref")
        handle = await api.connect()
        response = await run_query(
            handle, ContentRequest(params={"type": "work"}, cookies={COOKIE: "preview-ref"}), "work",
            listener=NO_HOOKS, cache=None, cookie_name=COOKIE,
        )
        assert cms.searches[-1].url.params["ref"] == "preview-ref"
        assert "draft" in {d.uid for d in response.results}
