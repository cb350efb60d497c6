"""Static generation — render every known route to plain HTML files.

Output is deployable to any static hosting (CDN, GitHub Pages, S3, etc.).
"""

from prowl.export.sitemap import generate_sitemap, sitemap_path, write_sitemap
from prowl.export.static import (
    CleanResult,
    ExportedFile,
    ExportResult,
    Route,
    RouteFailure,
    StaticGenerator,
    plan_manifest_routes,
    route_to_filepath,
)

__all__ = [
    "CleanResult",
    "ExportResult",
    "ExportedFile",
    "Route",
    "RouteFailure",
    "StaticGenerator",
    "generate_sitemap",
    "plan_manifest_routes",
    "route_to_filepath",
    "sitemap_path",
    "write_sitemap",
]
