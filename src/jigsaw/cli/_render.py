"""``jigsaw render`` — render a single template file to stdout."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from jigsaw.config import AppConfig
from jigsaw.engine import Engine
from jigsaw.html.postprocess import postprocess
from jigsaw.loader import FileSystemSource


def load_data(value: str | None) -> dict[str, Any]:
    """Parse ``--data``: inline JSON, or ``@path`` to read JSON from a file."""
    if value is None:
        return {}
    if value.startswith("@"):
        value = Path(value[1:]).read_text(encoding="utf-8")
    data = json.loads(value)
    if not isinstance(data, dict):
        msg = f"--data must be a JSON object, got {type(data).__name__}"
        raise ValueError(msg)
    return data


def render_file(args: argparse.Namespace) -> None:
    path = Path(args.path)
    try:
        source = path.read_text(encoding="utf-8")
        data = load_data(args.data)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    component_dir = args.components if args.components is not None else path.parent
    config = AppConfig(
        template_dir=path.parent,
        component_dir=component_dir,
        template_extension=path.suffix or ".jig",
        static_dir=None,
    )
    engine = Engine(config, source=FileSystemSource.from_config(config))
    engine.load_sources()

    output = engine.render_string(source, data)
    if not args.raw:
        output = postprocess(output)
    sys.stdout.write(output + "\n")
