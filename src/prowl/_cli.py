"""prowl CLI — prowl generate / prowl clean / prowl watch.

Entry point for the ``prowl`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the prowl CLI."""
    parser = argparse.ArgumentParser(
        prog="prowl",
        description="Static site generation from a headless CMS content API.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # prowl generate
    generate_parser = subparsers.add_parser(
        "generate",
        help="Render every known route to static HTML files",
    )
    generate_parser.add_argument("root", nargs="?", default=".", help="Site root directory")
    generate_parser.add_argument("--output", default=None, help="Output directory")
    generate_parser.add_argument(
        "--base-url", default=None, help="Base URL for sitemap generation",
    )
    generate_parser.add_argument(
        "--concurrency", type=int, default=None, help="Routes rendered in parallel",
    )

    # prowl clean
    clean_parser = subparsers.add_parser(
        "clean",
        help="Remove the files generate would write",
    )
    clean_parser.add_argument("root", nargs="?", default=".", help="Site root directory")
    clean_parser.add_argument("--output", default=None, help="Output directory")

    # prowl watch
    watch_parser = subparsers.add_parser(
        "watch",
        help="Generate, then regenerate on template changes",
    )
    watch_parser.add_argument("root", nargs="?", default=".", help="Site root directory")
    watch_parser.add_argument("--output", default=None, help="Output directory")

    return parser


def _get_version() -> str:
    """Get the package version."""
    from prowl import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Exits with status 1 when configuration is invalid or any route failed.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from prowl._errors import ProwlError
    from prowl.app import clean, generate, watch

    try:
        if args.command == "generate":
            result = generate(
                root=args.root,
                output=args.output,
                base_url=args.base_url,
                concurrency=args.concurrency,
            )
        elif args.command == "clean":
            result = clean(root=args.root, output=args.output)
        else:
            watch(root=args.root, output=args.output)
            return
    except ProwlError as exc:
        print(f"prowl: {exc}", file=sys.stderr)
        sys.exit(1)

    if not result.ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
