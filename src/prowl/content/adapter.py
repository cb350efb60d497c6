"""Content adapter — resolves content-API data into API and page responses.

The adapter is the façade the HTTP layer and the static generator talk to.
It normalizes whatever the content API returns into a stable shape:

    resolve_api_response   raw documents (or a rendered partial) for /api routes
    resolve_page_response  ``PageData`` for full page renders
    resolve_preview        preview token -> redirect target + session cookie
    resolve_partial        a partial template rendered from a payload

Site context and navigation are resolved once per adapter state and shared
by every page resolution; they must be in place before a page query is
built because navigation entries can pin a page to an exact document.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from prowl._errors import ContentError, ContentNotFoundError, DocumentNotFoundError
from prowl.api.documents import find_document
from prowl.content.listener import NO_HOOKS
from prowl.content.navigation import find_navigation_item, resolve_navigation
from prowl.content.query import base_filters, build_query, run_query
from prowl.content.render import RenderContext, render_variables
from prowl.content.request import PageData, PreviewCookie, PreviewRedirect
from prowl.content.state import AdapterState

if TYPE_CHECKING:
    from prowl._types import LinkResolver
    from prowl.api.client import ContentApi
    from prowl.api.documents import Document, SearchResponse
    from prowl.config import ProwlConfig
    from prowl.content.listener import Listener
    from prowl.content.manifest import PageManifest
    from prowl.content.render import TemplateRenderer
    from prowl.content.request import ContentRequest
    from prowl.content.state import ContentCache
    from prowl.observability.collector import ContentCollector


def default_link_resolver(document: Document) -> str:
    """Map a document to ``/{type}/{uid}/``."""
    return f"/{document.type}/{document.uid}/"


class ContentAdapter:
    """Resolves requests against the content API.

    Args:
        config: Frozen Prowl configuration.
        api: Content API client.
        manifest: Known static pages (fallback for types with no remote data).
        renderer: Template renderer for partials.
        state: Navigation cache holder; a fresh one is created when omitted.
        collector: Optional event collector.

    """

    def __init__(
        self,
        config: ProwlConfig,
        api: ContentApi,
        manifest: PageManifest,
        renderer: TemplateRenderer,
        *,
        state: AdapterState | None = None,
        collector: ContentCollector | None = None,
    ) -> None:
        self._config = config
        self._api = api
        self._manifest = manifest
        self._renderer = renderer
        self._state = state if state is not None else AdapterState()
        self._collector = collector

    @property
    def state(self) -> AdapterState:
        return self._state

    @property
    def config(self) -> ProwlConfig:
        return self._config

    async def prime(self) -> ContentCache:
        """Resolve site context and navigation if not already cached."""
        return await resolve_navigation(
            self._state, self._api, self._config, collector=self._collector,
        )

    def invalidate(self) -> None:
        """Forget the cached site context and navigation."""
        self._state.invalidate()

    # ------------------------------------------------------------------
    # API responses
    # ------------------------------------------------------------------

    async def resolve_api_response(
        self,
        request: ContentRequest,
        listener: Listener = NO_HOOKS,
    ) -> dict[str, Any] | str:
        """Resolve a collection or a single document for machine consumption.

        Query failures never raise: they come back as
        ``{"error": {"message", "kind", "status"}}``.  With ``?format=html``
        the payload is rendered through the matching partial instead, and
        render errors propagate.

        """
        try:
            response = await self._query_for_api(request, listener)
        except Exception as exc:
            return self._error_payload(request, exc)

        payload: dict[str, Any]
        if request.uid:
            payload = {"document": find_document(request.uid, response.results)}
        else:
            payload = {"documents": list(response.results)}

        if request.format == "html":
            return await self.resolve_partial(request, payload, listener)
        return payload

    async def _query_for_api(
        self,
        request: ContentRequest,
        listener: Listener,
    ) -> SearchResponse:
        content_type = request.type
        if not content_type:
            msg = "API request has no content type"
            raise ContentError(msg)
        handle = await self._api.connect()
        return await run_query(
            handle,
            request,
            content_type,
            listener=listener,
            cache=self._state.cache,
            page_size=self._config.page_size,
            cookie_name=self._config.preview_cookie,
            collector=self._collector,
        )

    def _error_payload(self, request: ContentRequest, exc: Exception) -> dict[str, Any]:
        message = str(exc) or type(exc).__name__
        if self._collector is not None:
            self._collector.record_query_failure(request.type or "", message)
        return {
            "error": {
                "message": message,
                "kind": type(exc).__name__,
                "status": getattr(exc, "status", None),
            }
        }

    # ------------------------------------------------------------------
    # Page responses
    # ------------------------------------------------------------------

    async def resolve_page_response(
        self,
        request: ContentRequest,
        listener: Listener = NO_HOOKS,
    ) -> PageData:
        """Resolve the documents a full page renders.

        Raises:
            ContentNotFoundError: No remote documents and no static page template.
            DocumentNotFoundError: The requested (or navigation-pinned) uid is
                not in the result set.
            NavigationError: The site document is missing or malformed.
            RemoteQueryError: The content API failed.

        """
        cache = await self.prime()
        content_type = request.type
        if not content_type:
            return PageData()

        # Only link-based entries pin a page to an exact document.
        navi = None if request.uid else find_navigation_item(cache.navi, content_type)
        pinned = navi if navi is not None and navi.linked else None
        response = await run_query(
            cache.api,
            request,
            content_type,
            listener=listener,
            cache=cache,
            navi=pinned,
            page_size=self._config.page_size,
            cookie_name=self._config.preview_cookie,
            collector=self._collector,
        )

        if not response.results:
            if self._manifest.has_page(content_type):
                return PageData()
            raise ContentNotFoundError(content_type)

        uid = request.uid or (pinned.uid if pinned is not None else None)
        if uid is None:
            return PageData(items=response.results)

        item = find_document(uid, response.results)
        if item is None:
            raise DocumentNotFoundError(uid)
        return PageData(item=item, items=response.results)

    async def page_context(
        self,
        request: ContentRequest,
        data: PageData,
        listener: Listener = NO_HOOKS,
    ) -> RenderContext:
        """Build the render context for a full page.

        Carries the site context, navigation, and resolved documents.
        """
        cache = await self.prime()
        context = RenderContext(request.type or self._config.homepage)
        context.set("site", cache.site)
        context.set("navi", cache.navi)
        context.set("homepage", self._config.homepage)
        context.set("item", data.item)
        context.set("items", data.items)
        if listener.context is not None:
            context = listener.context(context, cache, request)
        return context

    async def list_documents(self, content_type: str) -> tuple[Document, ...]:
        """Return every document of a type that has a uid, across all result pages."""
        cache = await self.prime()
        handle = cache.api
        query = build_query(
            handle,
            None,
            content_type,
            base_filters(handle, content_type),
            page_size=self._config.page_size,
            cookie_name=self._config.preview_cookie,
        )
        if self._collector is not None:
            self._collector.record_query(
                content_type, form=query.form, filters=query.filters, ref=query.ref,
            )

        documents: list[Document] = []
        page = 1
        while True:
            response = await handle.submit(query, page=page)
            documents.extend(doc for doc in response.results if doc.uid)
            if page >= response.total_pages:
                break
            page += 1
        return tuple(documents)

    # ------------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------------

    async def resolve_preview(
        self,
        request: ContentRequest,
        link_resolver: LinkResolver | None = None,
    ) -> PreviewRedirect:
        """Exchange a preview token for a redirect target and a session cookie.

        The cookie carries the token itself; while it is present every query
        is pinned to the preview ref instead of master.  Each exchange
        restarts the cookie's lifetime.

        Raises:
            ContentError: If the request carries no token.
            RemoteQueryError: If the preview session cannot be read.

        """
        token = request.token
        if not token:
            msg = "Preview request has no token"
            raise ContentError(msg)

        handle = await self._api.connect()
        location = await handle.preview_session(
            token, link_resolver or default_link_resolver, "/",
        )
        max_age = self._config.preview_max_age
        cookie = PreviewCookie(
            name=self._config.preview_cookie,
            value=token,
            max_age=max_age,
            path="/",
            http_only=False,
            expires_at=time.time() + max_age,
        )
        if self._collector is not None:
            self._collector.record_preview(location)
        return PreviewRedirect(location=location, cookie=cookie)

    # ------------------------------------------------------------------
    # Partials
    # ------------------------------------------------------------------

    async def resolve_partial(
        self,
        request: ContentRequest,
        payload: Mapping[str, Any] | PageData,
        listener: Listener = NO_HOOKS,
    ) -> str:
        """Render ``partials/<template or type>.html`` from a payload.

        Render errors propagate unchanged.
        """
        name = request.template or request.type
        if not name:
            msg = "Partial render needs a template or a content type"
            raise ContentError(msg)

        match payload:
            case PageData(item=document, items=documents):
                pass
            case _:
                document = payload.get("document")
                documents = payload.get("documents")

        context = RenderContext(name)
        if document is not None:
            context.set("item", document)
        if documents is not None:
            context.set("items", documents)
        if listener.context is not None:
            context = listener.context(context, self._state.cache, request)

        template = f"{self._config.partials_dir}/{name}.html"
        return await self._renderer.render(template, **render_variables(context))
