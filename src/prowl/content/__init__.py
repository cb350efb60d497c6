"""Content layer — queries, navigation, and the content adapter.

Turns content-API documents into API payloads, page data, preview
redirects, and rendered partials.
"""

from prowl.content.adapter import ContentAdapter, default_link_resolver
from prowl.content.listener import NO_HOOKS, Listener, load_listener
from prowl.content.manifest import PageManifest, categorize_change
from prowl.content.navigation import NavigationItem, SiteContext, resolve_navigation
from prowl.content.query import Filters, PendingResultSet, QueryDescriptor
from prowl.content.render import KidaRenderer, RenderContext, TemplateRenderer
from prowl.content.request import ContentRequest, PageData, PreviewCookie, PreviewRedirect
from prowl.content.state import AdapterState, ContentCache

__all__ = [
    "NO_HOOKS",
    "AdapterState",
    "ContentAdapter",
    "ContentCache",
    "ContentRequest",
    "Filters",
    "KidaRenderer",
    "Listener",
    "NavigationItem",
    "PageData",
    "PageManifest",
    "PendingResultSet",
    "PreviewCookie",
    "PreviewRedirect",
    "QueryDescriptor",
    "RenderContext",
    "SiteContext",
    "TemplateRenderer",
    "categorize_change",
    "default_link_resolver",
    "load_listener",
    "resolve_navigation",
]
