"""Shared type definitions for prowl."""

from collections.abc import Callable
from typing import Any, Literal

# Batch operation shown in the banner
type ProwlMode = Literal["generate", "clean", "watch"]

# Maps a document to its public URL path
type LinkResolver = Callable[[Any], str]
