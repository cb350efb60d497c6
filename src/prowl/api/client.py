"""Content API client — async httpx transport for the headless CMS.

``ContentApi.connect()`` fetches the API entry document (refs and search
forms) and returns an ``ApiHandle`` bound to that snapshot of metadata.
Handles submit queries against named forms; every request is a plain GET
that the CDN in front of the API can cache.

Timeouts and connection pooling belong to the underlying
``httpx.AsyncClient``; this layer only maps failures to ``RemoteQueryError``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import httpx

from prowl._errors import RemoteQueryError
from prowl.api import predicates
from prowl.api.documents import Document, SearchResponse

if TYPE_CHECKING:
    from prowl.content.query import QueryDescriptor

EVERYTHING_FORM = "everything"


@dataclass(frozen=True, slots=True)
class Form:
    """A named search form (collection) exposed by the API.

    Attributes:
        name: Form name (``everything`` or a collection name).
        action: Search URL.
        default_q: Predicates the form always applies (pre-filtered collections).

    """

    name: str
    action: str
    default_q: tuple[str, ...] = ()

    @classmethod
    def from_json(cls, name: str, data: Mapping[str, Any]) -> Form:
        fields = data.get("fields") or {}
        q_field = fields.get("q") or {}
        default = q_field.get("default")
        return cls(
            name=name,
            action=str(data["action"]),
            default_q=(str(default),) if default else (),
        )


def _raise_for_status(resp: httpx.Response) -> None:
    """Raise RemoteQueryError for non-2xx responses."""
    if resp.status_code < 400:
        return
    message = f"HTTP {resp.status_code}"
    payload: dict[str, Any] | None = None
    try:
        payload = resp.json()
    except ValueError:
        text = resp.text.strip()
        if text:
            message = text
    else:
        if isinstance(payload, dict):
            msg = payload.get("message") or payload.get("error")
            if isinstance(msg, str) and msg.strip():
                message = msg
        else:
            payload = None
    raise RemoteQueryError(message, resp.status_code, payload)


class ContentApi:
    """Async client for the content API.

    Args:
        endpoint: API entry point URL.
        token: Optional access token, sent as ``access_token`` on every request.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).

    """

    def __init__(
        self,
        endpoint: str,
        *,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._token = token
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def __aenter__(self) -> ContentApi:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def connect(self) -> ApiHandle:
        """Fetch API metadata and return a handle bound to it.

        Raises:
            RemoteQueryError: If the API cannot be reached or has no master ref.

        """
        data = await self.get_json(self._endpoint)
        refs = data.get("refs") or []
        master = next((r["ref"] for r in refs if r.get("isMasterRef")), None)
        if master is None:
            msg = f"Content API at {self._endpoint} did not report a master ref"
            raise RemoteQueryError(msg)
        forms = {
            name: Form.from_json(name, form)
            for name, form in (data.get("forms") or {}).items()
        }
        return ApiHandle(self, master_ref=str(master), forms=forms)

    async def get_json(
        self,
        url: str,
        params: list[tuple[str, str | int]] | None = None,
    ) -> dict[str, Any]:
        """GET *url* and decode the JSON body."""
        query = list(params or [])
        if self._token:
            query.append(("access_token", self._token))
        try:
            resp = await self._client.get(url, params=query)
        except httpx.HTTPError as exc:
            msg = f"Content API request to {url} failed: {exc}"
            raise RemoteQueryError(msg) from exc
        _raise_for_status(resp)
        try:
            data = resp.json()
        except ValueError as exc:
            msg = f"Content API returned invalid JSON from {url}"
            raise RemoteQueryError(msg, resp.status_code) from exc
        if not isinstance(data, dict):
            msg = f"Content API returned {type(data).__name__} from {url}, expected an object"
            raise RemoteQueryError(msg, resp.status_code)
        return data


class ApiHandle:
    """Connected view of the content API.

    Holds the master ref and search forms from one ``connect()`` call.
    Immutable; a fresh ``connect()`` yields a fresh handle.

    """

    __slots__ = ("_api", "forms", "master_ref")

    def __init__(self, api: ContentApi, *, master_ref: str, forms: Mapping[str, Form]) -> None:
        self._api = api
        self.master_ref = master_ref
        self.forms: Mapping[str, Form] = MappingProxyType(dict(forms))

    def has_form(self, name: str) -> bool:
        """True if *name* is a search form (a pre-filtered collection)."""
        return name in self.forms

    def form(self, name: str) -> Form:
        try:
            return self.forms[name]
        except KeyError:
            msg = f"Content API has no search form {name!r}"
            raise RemoteQueryError(msg) from None

    async def submit(self, query: QueryDescriptor, *, page: int = 1) -> SearchResponse:
        """Run a query descriptor and return one page of results."""
        return await self.search(
            query.form,
            query.filters,
            ref=query.ref,
            page_size=query.page_size,
            page=page,
        )

    async def search(
        self,
        form_name: str,
        filters: tuple[str, ...] | list[str] = (),
        *,
        ref: str,
        page_size: int = 100,
        page: int = 1,
    ) -> SearchResponse:
        form = self.form(form_name)
        params: list[tuple[str, str | int]] = [
            ("ref", ref),
            ("pageSize", page_size),
            ("page", page),
        ]
        for default in form.default_q:
            params.append(("q", default))
        if filters:
            params.append(("q", predicates.combine(filters)))
        data = await self._api.get_json(form.action, params)
        return SearchResponse.from_json(data)

    async def get_single(self, content_type: str, *, ref: str | None = None) -> Document | None:
        """Return the one document of a singleton type, or None."""
        response = await self.search(
            EVERYTHING_FORM,
            [predicates.at("document.type", content_type)],
            ref=ref or self.master_ref,
            page_size=1,
        )
        return response.results[0] if response.results else None

    async def get_by_id(self, document_id: str, *, ref: str | None = None) -> Document | None:
        response = await self.search(
            EVERYTHING_FORM,
            [predicates.at("document.id", document_id)],
            ref=ref or self.master_ref,
            page_size=1,
        )
        return response.results[0] if response.results else None

    async def preview_session(
        self,
        token: str,
        link_resolver: Callable[[Document], str],
        default: str,
    ) -> str:
        """Exchange a preview token for the URL of the previewed document.

        The token is itself the URL of the preview session.  When the session
        names no main document (or it cannot be found at the preview ref),
        *default* is returned.

        """
        session = await self._api.get_json(token)
        main_document = session.get("mainDocument")
        if not main_document:
            return default
        document = await self.get_by_id(str(main_document), ref=token)
        if document is None:
            return default
        return link_resolver(document)
