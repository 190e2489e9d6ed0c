"""Typed leaf values rendered by ``{{ path }}`` interpolation.

Plain data uses structural shapes: a mapping with a ``tag`` key is an
element, ``{"type": "link", ...}`` is a link, ``{"type": "header", ...}``
is a header. ``prepare()`` converts those shapes into frozen dataclasses
once, when the data context is built, so the renderer dispatches on the
Python type instead of re-inspecting keys on every interpolation.

A leaf built from a mapping keeps that mapping as ``data``, so dotted
paths still walk every key of the original (``{{ post.title }}`` works
when ``post`` happens to carry a ``tag`` key too).

Usage::

    from jigsaw.templating.values import Element, Link, prepare

    data = prepare({
        "avatar": {"tag": "img", "props": {"src": "/me.png"}},
        "github": {"type": "link", "href": "https://github.com", "text": "GitHub"},
    })
    data["avatar"].render()  # '<img src="/me.png"/>'
"""

import dataclasses
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

# Tags rendered in self-closing form and never suppressed for lack of content
VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "img",
        "br",
        "hr",
        "input",
        "meta",
        "link",
        "area",
        "base",
        "col",
        "embed",
        "param",
        "source",
        "track",
        "wbr",
    }
)


class _Undefined:
    """Sentinel for a path that did not resolve. Distinct from ``None``."""

    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Any = _Undefined()


def to_text(value: Any) -> str:
    """Convert a scalar to its markup text.

    Booleans render lowercase and integral floats drop the ``.0`` so the
    output matches what template authors write in attribute values.
    """
    if value is None or value is UNDEFINED:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True, slots=True)
class Element:
    """A generic HTML element: ``{tag, content?, props?, children?}``."""

    tag: str
    content: str = ""
    props: Mapping[str, Any] = field(default_factory=dict)
    children: tuple[Any, ...] = ()
    data: Mapping[str, Any] | None = field(default=None, compare=False, repr=False)

    @property
    def is_void(self) -> bool:
        return self.tag.lower() in VOID_ELEMENTS

    def attributes(self) -> str:
        """Render ``props`` as `` key="value"`` pairs in insertion order."""
        if not self.props:
            return ""
        return " " + " ".join(f'{key}="{to_text(value)}"' for key, value in self.props.items())

    def render(self) -> str:
        attrs = self.attributes()
        if self.is_void:
            return f"<{self.tag}{attrs}/>"

        inner = to_text(self.content) + "".join(
            child.render() if isinstance(child, Leaf) else to_text(child)
            for child in self.children
        )
        if not inner.strip():
            return ""
        return f"<{self.tag}{attrs}>{inner}</{self.tag}>"


@dataclass(frozen=True, slots=True)
class Link:
    """An anchor: ``{type: "link", href, text, title?}``."""

    type: ClassVar[str] = "link"

    href: str
    text: str
    title: str | None = None
    data: Mapping[str, Any] | None = field(default=None, compare=False, repr=False)

    def render(self) -> str:
        title = f' title="{self.title}"' if self.title else ""
        return f'<a href="{self.href}"{title}>{self.text}</a>'


@dataclass(frozen=True, slots=True)
class Header:
    """A heading: ``{type: "header", level, text, id?}``."""

    type: ClassVar[str] = "header"

    level: int
    text: str
    id: str | None = None
    data: Mapping[str, Any] | None = field(default=None, compare=False, repr=False)

    def render(self) -> str:
        level = to_text(self.level)
        id_attr = f' id="{self.id}"' if self.id else ""
        return f"<h{level}{id_attr}>{self.text}</h{level}>"


Leaf = Element | Link | Header


class ValueKind(Enum):
    """How a resolved value is rendered by interpolation."""

    EMPTY = "empty"
    ELEMENT = "element"
    LINK = "link"
    HEADER = "header"
    SCALAR = "scalar"
    RAW = "raw"


def kind_of(value: Any) -> ValueKind:
    """Classify a resolved (already prepared) value."""
    if value is None or value is UNDEFINED:
        return ValueKind.EMPTY
    if isinstance(value, Element):
        return ValueKind.ELEMENT
    if isinstance(value, Link):
        return ValueKind.LINK
    if isinstance(value, Header):
        return ValueKind.HEADER
    if isinstance(value, (str, bytes, int, float)):
        return ValueKind.SCALAR
    if isinstance(value, (Mapping, list, tuple)) or dataclasses.is_dataclass(value):
        return ValueKind.RAW
    return ValueKind.SCALAR


def leaf_from_mapping(data: Mapping[str, Any]) -> Leaf | None:
    """Build a typed leaf from a structural mapping, or ``None``.

    Detection order: ``tag`` present → Element, then the ``type``
    discriminant for Link and Header.
    """
    if "tag" in data:
        children = data.get("children") or ()
        return Element(
            tag=str(data["tag"]),
            content=data.get("content") or "",
            props=dict(fields_of(data.get("props")) or {}),
            children=tuple(_prepare_child(child) for child in children),
            data=data,
        )
    kind = data.get("type")
    if kind == "link":
        return Link(
            href=data.get("href", ""),
            text=data.get("text", ""),
            title=data.get("title"),
            data=data,
        )
    if kind == "header":
        return Header(
            level=data.get("level", 1),
            text=data.get("text", ""),
            id=data.get("id"),
            data=data,
        )
    return None


def fields_of(value: Any) -> Mapping[str, Any] | None:
    """The key/value view of *value*: a mapping itself, or the mapping a leaf was built from."""
    if isinstance(value, Mapping):
        return value
    if isinstance(value, (Element, Link, Header)):
        return value.data
    return None


def _prepare_child(child: Any) -> Any:
    if isinstance(child, Mapping):
        return leaf_from_mapping(child) or child
    return child


def prepare(data: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a render-ready copy of *data* with leaf shapes converted.

    The top-level mapping itself is never converted, only the values under
    it. Already-typed leaves pass through untouched, so calling this twice
    is harmless.
    """
    if not data:
        return {}
    return {key: prepare_value(value) for key, value in data.items()}


def prepare_value(value: Any) -> Any:
    """Convert one value (recursively) the way ``prepare`` does."""
    if isinstance(value, (Element, Link, Header)):
        return value
    if isinstance(value, Mapping):
        prepared = {key: prepare_value(item) for key, item in value.items()}
        return leaf_from_mapping(prepared) or prepared
    if isinstance(value, (list, tuple)):
        return [prepare_value(item) for item in value]
    return value
