"""Sitexport CLI — sitexport static / sitexport project.

Entry point for the ``sitexport`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the sitexport CLI."""
    parser = argparse.ArgumentParser(
        prog="sitexport",
        description="Compile page-builder trees into static sites or Spring Boot projects.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # sitexport static
    static_parser = subparsers.add_parser(
        "static",
        help="Export pages as a static HTML/CSS/JS site",
    )
    static_parser.add_argument("pages", help="JSON page document")
    destination = static_parser.add_mutually_exclusive_group()
    destination.add_argument("-o", "--output", help="Output archive (.zip) or .html file")
    destination.add_argument("--dir", help="Output directory")
    static_parser.add_argument(
        "--inline-css", action="store_true", help="Inline the stylesheet into every page",
    )
    static_parser.add_argument(
        "--inline-js", action="store_true", help="Inline the script into every page",
    )
    static_parser.add_argument(
        "--single-page", action="store_true",
        help="Write one self-contained HTML document with embedded images",
    )
    _add_common(static_parser)

    # sitexport project
    project_parser = subparsers.add_parser(
        "project",
        help="Export pages as a Spring Boot / Thymeleaf project",
    )
    project_parser.add_argument("pages", help="JSON page document")
    destination = project_parser.add_mutually_exclusive_group()
    destination.add_argument("-o", "--output", help="Output archive (.zip)")
    destination.add_argument("--dir", help="Output directory")
    project_parser.add_argument("--group-id", help="Maven group id")
    project_parser.add_argument("--artifact-id", help="Maven artifact id")
    project_parser.add_argument("--project-name", help="Project display name")
    _add_common(project_parser)

    return parser


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--asset-base-url", help="Origin that root-relative images are fetched from")
    parser.add_argument("--site-name", help="Site title used in README files")
    parser.add_argument("-q", "--quiet", action="store_true", help="Do not print the summary")


def _get_version() -> str:
    """Get the package version."""
    from sitexport import __version__

    return __version__


def _overrides(args: argparse.Namespace) -> dict[str, object]:
    """Config overrides from the parsed flags; unset flags are left out."""
    overrides: dict[str, object] = {
        "output": args.output or args.dir,
        "asset_base_url": args.asset_base_url,
        "site_name": args.site_name,
    }
    if args.command == "static":
        # Flags only ever switch a file setting on
        if args.inline_css:
            overrides["include_css"] = False
        if args.inline_js:
            overrides["include_js"] = False
        if args.single_page:
            overrides["single_page"] = True
    else:
        overrides.update(
            group_id=args.group_id,
            artifact_id=args.artifact_id,
            project_name=args.project_name,
        )
    return overrides


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from sitexport._errors import SitexportError
    from sitexport.app import export_project, export_static
    from sitexport.banner import print_error

    export = export_static if args.command == "static" else export_project
    try:
        export(args.pages, quiet=args.quiet, **_overrides(args))
    except SitexportError as exc:
        print_error(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
