"""Sitemap generation — produce sitemap.xml from generated pages.

Lists every generated page route.  Error pages and the sitemap itself are
excluded.  Only written when ``base_url`` is configured.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING
from xml.etree.ElementTree import Element, SubElement, tostring

from prowl._errors import ExportError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from prowl.export.static import ExportedFile

_SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
_SITEMAP_NAME = "sitemap.xml"

_PAGE_TYPES = frozenset({"content", "fallback"})


def sitemap_path(output_dir: Path) -> Path:
    return output_dir / _SITEMAP_NAME


def generate_sitemap(pages: Sequence[ExportedFile], base_url: str) -> str:
    """Generate a sitemap.xml string from exported page records.

    Args:
        pages: Exported file records from the generator.
        base_url: Site base URL (e.g., ``"https://example.com"``).

    Returns:
        Complete XML string suitable for writing to ``sitemap.xml``.

    """
    base = base_url.rstrip("/")
    today = datetime.now(timezone.utc).strftime("%Y-%m-%d")

    urlset = Element("urlset")
    urlset.set("xmlns", _SITEMAP_NS)

    for page in sorted(pages, key=lambda f: f.source_path):
        if page.source_type not in _PAGE_TYPES:
            continue
        url_el = SubElement(urlset, "url")
        SubElement(url_el, "loc").text = base + page.source_path
        SubElement(url_el, "lastmod").text = today

    xml = tostring(urlset, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + xml + "\n"


def write_sitemap(
    pages: Sequence[ExportedFile],
    base_url: str,
    output_dir: Path,
) -> ExportedFile:
    """Write sitemap.xml to the output directory and return its record.

    Raises:
        ExportError: If the file cannot be written.

    """
    from prowl.export.static import ExportedFile

    t0 = time.perf_counter()
    data = generate_sitemap(pages, base_url).encode("utf-8")
    path = sitemap_path(output_dir)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as exc:
        raise ExportError(path, exc.strerror or str(exc)) from exc

    return ExportedFile(
        source_path="/" + _SITEMAP_NAME,
        output_path=path,
        source_type="sitemap",
        size_bytes=len(data),
        duration_ms=(time.perf_counter() - t0) * 1000,
    )
