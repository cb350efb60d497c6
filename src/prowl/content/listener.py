"""Listener hooks — caller-supplied query and context overrides.

A Listener carries two optional capabilities:

``query(api, filters, cache, request) -> Filters | PendingResultSet``
    Receives the base predicate list.  Returning ``Filters`` replaces the
    list and the standard submit still runs; returning ``PendingResultSet``
    replaces the whole query and the adapter awaits it instead.

``context(render_context, cache, request) -> RenderContext``
    Transforms the context before a partial is rendered.

Either slot may be None; a missing hook behaves as identity.
"""

from __future__ import annotations

import importlib.util
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from prowl._errors import ConfigError

if TYPE_CHECKING:
    from prowl.api.client import ApiHandle
    from prowl.content.query import QueryOverride
    from prowl.content.render import RenderContext
    from prowl.content.request import ContentRequest
    from prowl.content.state import ContentCache

type QueryHook = Callable[
    [ApiHandle, list[str], ContentCache | None, ContentRequest], QueryOverride
]
type ContextHook = Callable[
    [RenderContext, ContentCache | None, ContentRequest], RenderContext
]


@dataclass(frozen=True, slots=True)
class Listener:
    """Optional query and context hooks for one route or content type."""

    query: QueryHook | None = None
    context: ContextHook | None = None

    @property
    def has_query(self) -> bool:
        return self.query is not None

    @property
    def has_context(self) -> bool:
        return self.context is not None


NO_HOOKS = Listener()


def load_listener(target: str | None, root: Path) -> Listener:
    """Resolve a ``module:attr`` listener target from a Python file under *root*.

    ``hooks:listener`` loads ``<root>/hooks.py`` and returns its ``listener``
    attribute.  Returns ``NO_HOOKS`` when *target* is empty.

    Raises:
        ConfigError: If the file is missing, fails to import, or the
            attribute is not a Listener.

    """
    if not target:
        return NO_HOOKS
    module_part, _, attr = target.partition(":")
    if not module_part or not attr:
        msg = f"listener {target!r}: expected 'module:attr'"
        raise ConfigError(msg)
    py_file = root / f"{module_part}.py"
    if not py_file.is_file():
        msg = f"listener {target!r}: {py_file} not found"
        raise ConfigError(msg)
    module_name = f"prowl_hooks_{module_part}"
    spec_obj = importlib.util.spec_from_file_location(module_name, py_file)
    if spec_obj is None or spec_obj.loader is None:
        msg = f"listener {target!r}: failed to load {py_file}"
        raise ConfigError(msg)
    module = importlib.util.module_from_spec(spec_obj)
    sys.modules[module_name] = module
    try:
        spec_obj.loader.exec_module(module)
    except Exception as exc:
        msg = f"listener {target!r}: failed to import {py_file}: {exc}"
        raise ConfigError(msg) from exc
    listener = getattr(module, attr, None)
    if not isinstance(listener, Listener):
        msg = f"listener {target!r}: {attr} in {py_file} is not a prowl Listener"
        raise ConfigError(msg)
    return listener
