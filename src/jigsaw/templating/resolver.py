"""Expression resolver — dotted-path lookup and value rendering.

Paths are split on ``.`` and walked one key at a time. Any missing step
short-circuits to ``UNDEFINED``; nothing here raises for bad data.
"""

import dataclasses
import json
import math
from collections.abc import Mapping
from typing import Any

from jigsaw.templating.values import UNDEFINED, Element, Header, Link, ValueKind, kind_of, to_text


def _lookup(value: Any, key: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(key, UNDEFINED)
    if isinstance(value, (list, tuple)):
        if key.isdigit() and int(key) < len(value):
            return value[int(key)]
        return UNDEFINED
    if isinstance(value, (Element, Link, Header)) and value.data is not None:
        return value.data.get(key, UNDEFINED)
    if dataclasses.is_dataclass(value):
        return getattr(value, key, UNDEFINED)
    return UNDEFINED


def resolve(path: str, context: Mapping[str, Any]) -> Any:
    """Resolve a dotted *path* against *context*.

    Sequences accept numeric keys (``items.0.name``). A typed leaf built
    from a mapping is walked through that mapping; other leaves and
    dataclasses expose their fields by attribute name.
    """
    value: Any = context
    for key in path.strip().split("."):
        if value is None or value is UNDEFINED:
            return UNDEFINED
        value = _lookup(value, key)
    return value


def is_truthy(value: Any) -> bool:
    """Template truthiness.

    Only undefined, ``None``, ``False``, zero and the empty string are
    falsy. Empty lists and mappings are truthy.
    """
    if value is None or value is UNDEFINED:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def _json_default(value: Any) -> Any:
    if isinstance(value, (Element, Link, Header)):
        if value.data is not None:
            return dict(value.data)
        shape = {f.name: getattr(value, f.name) for f in dataclasses.fields(value) if f.name != "data"}
        if isinstance(value, Element):
            return shape
        return {"type": value.type, **shape}
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (set, frozenset)):
        return list(value)
    return str(value)


def to_json(value: Any) -> str:
    """Compact JSON serialization used for non-leaf objects and arrays."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_json_default)


def render_value(value: Any) -> str:
    """Render a resolved value as markup text."""
    match kind_of(value):
        case ValueKind.EMPTY:
            return ""
        case ValueKind.ELEMENT | ValueKind.LINK | ValueKind.HEADER:
            return value.render()
        case ValueKind.RAW:
            return to_json(value)
        case _:
            return to_text(value)


def render(path: str, context: Mapping[str, Any]) -> str:
    """Resolve *path* and render the result."""
    return render_value(resolve(path, context))
