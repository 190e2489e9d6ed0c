"""Jigsaw CLI — dev server and one-off rendering.

Entry point registered as ``jigsaw`` in ``pyproject.toml``::

    [project.scripts]
    jigsaw = "jigsaw.cli:main"
"""

import argparse
import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``jigsaw`` command."""
    parser = argparse.ArgumentParser(
        prog="jigsaw",
        description="Jigsaw — templates, components and cached routes.",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Logging verbosity",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- jigsaw run -------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the development server")
    run_parser.add_argument("app", help="Import string (e.g. site:engine)")
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--watch",
        action="store_true",
        help="Reload templates and components when their files change",
    )

    # -- jigsaw render ----------------------------------------------------
    render_parser = subparsers.add_parser("render", help="Render one template file")
    render_parser.add_argument("path", help="Template file to render")
    render_parser.add_argument(
        "--data",
        default=None,
        help="JSON object to render against (or @file.json)",
    )
    render_parser.add_argument(
        "--components",
        default=None,
        help="Directory holding component files",
    )
    render_parser.add_argument(
        "--raw",
        action="store_true",
        help="Skip HTML post-processing",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format=LOG_FORMAT)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from jigsaw.cli._run import run_server

        run_server(args)
    elif args.command == "render":
        from jigsaw.cli._render import render_file

        render_file(args)
