"""``jigsaw run`` — development server command."""

import argparse
import sys

from jigsaw.cli._resolve import resolve_engine


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` to an Engine and serve it with pounce.

    With ``--watch`` the engine loads every source up front and starts
    its change feed before the server accepts connections.
    """
    try:
        engine = resolve_engine(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if args.watch:
        engine.load_sources()
        engine.watch()

    from jigsaw.server.dev import run_dev_server

    try:
        run_dev_server(
            engine,
            args.host or engine.config.host,
            args.port or engine.config.port,
            reload=engine.config.debug,
            app_path=args.app,
        )
    finally:
        engine.stop_watching()
