"""prowl — static sites from a headless CMS content API.

Resolves content-API documents into page data, API payloads, preview
redirects, and rendered partials, and renders every known route of a site
to static HTML.

Quick start::

    import prowl

    prowl.generate("my-site/")

Three modes::

    prowl.generate("my-site/")    # Render every route to dist/
    prowl.clean("my-site/")       # Remove what generate wrote
    prowl.watch("my-site/")       # Generate, then regenerate on template edits

Embedding the adapter in an HTTP layer::

    from prowl.content import ContentAdapter, ContentRequest

    data = await adapter.resolve_page_response(ContentRequest.for_route("about"))

"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prowl.config import ProwlConfig

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0-dev"
__all__ = [
    "ProwlConfig",
    "__version__",
    "clean",
    "generate",
    "watch",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import prowl`` fast while providing a clean top-level API.
    """
    if name == "ProwlConfig":
        from prowl.config import ProwlConfig

        return ProwlConfig

    if name == "generate":
        from prowl.app import generate

        return generate

    if name == "clean":
        from prowl.app import clean

        return clean

    if name == "watch":
        from prowl.app import watch

        return watch

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
