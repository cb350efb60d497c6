"""Startup banner — mode-aware status output.

Prints a short header with the content endpoint, manifest size, and output
directory before a run starts.  Detects ``NO_COLOR`` / ``TERM`` for safe
fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from prowl._types import ProwlMode
    from prowl.config import ProwlConfig
    from prowl.export.static import RouteFailure


# ---------------------------------------------------------------------------
# ANSI helpers: respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_RED = "\033[31m" if _COLOR else ""

_MODE_STYLES: dict[str, tuple[str, str]] = {
    "generate": (_YELLOW, "generate"),
    "clean": (_CYAN, "clean"),
    "watch": (_GREEN, "watch"),
}


def _mode_badge(mode: str) -> str:
    """Return a styled [mode] badge."""
    color, label = _MODE_STYLES.get(mode, (_DIM, mode))
    return f"{color}[{label}]{_RESET}"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def print_banner(
    config: ProwlConfig,
    page_count: int,
    mode: ProwlMode,
    *,
    listener: bool = False,
) -> None:
    """Print the prowl startup banner to stderr.

    Args:
        config: Resolved ProwlConfig.
        page_count: Number of page templates in the manifest.
        mode: One of ``"generate"``, ``"clean"``, ``"watch"``.
        listener: Whether a listener module was loaded.

    """
    from prowl import __version__

    lines: list[str] = [
        "",
        f"  {_BOLD}prowl{_RESET} {_DIM}v{__version__}{_RESET}  {_mode_badge(mode)}",
        f"  {_DIM}{'─' * 43}{_RESET}",
        f"  {_DIM}├─{_RESET} content: {_DIM}{config.api_endpoint}{_RESET}",
        f"  {_DIM}├─{_RESET} {_plural(page_count, 'page template')}",
    ]
    if config.collections:
        lines.append(f"  {_DIM}├─{_RESET} collections: {', '.join(config.collections)}")
    if listener:
        lines.append(f"  {_DIM}├─{_RESET} listener: {config.listener}")
    lines.append(f"  {_DIM}└─{_RESET} output: {_DIM}{config.output_path}{_RESET}")
    if mode == "watch":
        lines.append("")
        lines.append(f"  {_DIM}Watching {config.templates_path} for changes...{_RESET}")
    lines.append("")

    print("\n".join(lines), file=sys.stderr)


def print_failures(failures: Sequence[RouteFailure]) -> None:
    """Print one line per failed route to stderr."""
    lines = [
        f"  {_RED}✗{_RESET} {failure.source_path} {_DIM}({failure.kind}){_RESET} {failure.error}"
        for failure in failures
    ]
    if lines:
        print("\n".join(lines), file=sys.stderr)
