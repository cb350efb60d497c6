"""Rendering seam — render contexts and the template renderer protocol.

The adapter never renders markup itself: it builds a ``RenderContext`` and
hands it to a ``TemplateRenderer``.  ``KidaRenderer`` is the default
implementation, loading templates from the site's template directory.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from prowl.config import ProwlConfig


class RenderContext:
    """Named bag of template variables.

    Listener context hooks receive and return one of these; its entries are
    passed to the template as top-level names alongside ``context`` itself.

    Args:
        name: Template (or page type) the context is being built for.

    """

    __slots__ = ("_data", "name")

    def __init__(self, name: str, data: dict[str, Any] | None = None) -> None:
        self.name = name
        self._data: dict[str, Any] = dict(data or {})

    def set(self, key: str, value: Any) -> RenderContext:
        self._data[key] = value
        return self

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    @property
    def data(self) -> dict[str, Any]:
        """A copy of the context entries."""
        return dict(self._data)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"RenderContext({self.name!r}, keys={sorted(self._data)!r})"


@runtime_checkable
class TemplateRenderer(Protocol):
    """Renders a named template to text.

    Errors propagate to the caller unchanged.
    """

    async def render(self, template: str, **context: Any) -> str: ...


class KidaRenderer:
    """Kida-backed renderer over the site's template directory.

    Template names are relative to ``config.templates_path``
    (e.g. ``pages/about.html``, ``partials/work.html``).

    """

    def __init__(self, config: ProwlConfig) -> None:
        from kida import Environment, FileSystemLoader

        self._env = Environment(
            loader=FileSystemLoader([str(config.templates_path)]),
            autoescape=True,
        )

    async def render(self, template: str, **context: Any) -> str:
        return self._env.get_template(template).render(**context)


def render_variables(context: RenderContext) -> dict[str, Any]:
    """Template variables for a context: its entries plus ``context`` itself."""
    variables = context.data
    variables["context"] = context
    return variables
