"""Prowl configuration.

ProwlConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path

from prowl._errors import ConfigError


@dataclass(frozen=True, slots=True)
class ProwlConfig:
    """Configuration for a Prowl site.

    Attributes:
        root: Path to the site root directory (contains template/, prowl.yaml, etc.).
              Always resolved to an absolute path on construction.
        api_endpoint: Content API entry point (e.g. ``https://repo.cdn.prismic.io/api/v2``).
        api_token: Optional content API access token.
        homepage: UID of the homepage document; its navigation slug becomes ``/``.
        notfound: Page type rendered as the "not found" error page.
        notright: Page type rendered as the "server error" page.
        templates_dir: Directory containing Kida templates.
        pages_dir: Subdirectory of ``templates_dir`` holding one template per page type.
        partials_dir: Subdirectory of ``templates_dir`` holding partial templates.
        output: Output directory for static generation.
        base_url: Base URL for the site (used for sitemap generation).
        page_size: Documents requested per content query.
        site_type: Content type of the singleton site document.
        navi_key: Fragment name of the navigation slice zone on the site document.
        preview_cookie: Name of the cookie that pins queries to a preview ref.
        preview_max_age: Preview cookie lifetime in seconds.
        concurrency: Maximum number of routes rendered at once during generation.
        collections: Content types that also get one static page per document.
        listener: ``module:attr`` reference to a Listener defined in the site root.
        timeout: Content API request timeout in seconds.

    """

    root: Path = field(default_factory=Path.cwd)
    api_endpoint: str = ""
    api_token: str | None = None
    homepage: str = "home"
    notfound: str = "404"
    notright: str = "500"
    templates_dir: str = "template"
    pages_dir: str = "pages"
    partials_dir: str = "partials"
    output: Path = field(default_factory=lambda: Path("dist"))
    base_url: str = ""
    page_size: int = 100
    site_type: str = "site"
    navi_key: str = "navi"
    preview_cookie: str = "io.prismic.preview"
    preview_max_age: int = 1800
    concurrency: int = 4
    collections: tuple[str, ...] = ()
    listener: str | None = None
    timeout: float = 30.0

    def __post_init__(self) -> None:
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())
        if not isinstance(self.collections, tuple):
            object.__setattr__(self, "collections", tuple(self.collections))
        if self.concurrency < 1:
            msg = f"concurrency must be at least 1, got {self.concurrency}"
            raise ConfigError(msg)
        if self.page_size < 1:
            msg = f"page_size must be at least 1, got {self.page_size}"
            raise ConfigError(msg)

    @property
    def templates_path(self) -> Path:
        """Absolute path to templates directory."""
        return self.root / self.templates_dir

    @property
    def pages_path(self) -> Path:
        """Absolute path to the page templates directory."""
        return self.templates_path / self.pages_dir

    @property
    def partials_path(self) -> Path:
        """Absolute path to the partial templates directory."""
        return self.templates_path / self.partials_dir

    @property
    def output_path(self) -> Path:
        """Absolute path to output directory."""
        if self.output.is_absolute():
            return self.output
        return self.root / self.output

    @property
    def error_pages(self) -> frozenset[str]:
        """Page types written as ``<type>.html`` at the output root."""
        return frozenset({self.notfound, self.notright})
