"""Knob — the template renderer.

A ``Knob`` compiles its source once into a small node tree (using the
token stream and depth-counted block boundaries from ``blocks``) and then
walks that tree for every ``render()`` call. Output order always follows
document order and loop order.

Components (``{{{ name }}}``) are looked up at render time through a
callable supplied by the registry, so replacing a component's source is
visible to the next render without recompiling the templates that use it.
When no component is registered under a name and the data at that name
is a typed leaf, the leaf is rendered in its place.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from jigsaw._internal.types import ComponentLookup
from jigsaw.templating.blocks import Token, TokenKind, find_block_end, find_else, tokenize
from jigsaw.templating.resolver import is_truthy, render_value, resolve
from jigsaw.templating.values import Element, Header, Link, fields_of, prepare

logger = logging.getLogger("jigsaw.templating")

_FOR_HEADER = re.compile(r"^(?P<target>\w+)\s+in\s+(?P<iterable>[\w.]+)$")

# A branch whose whole source is one element: <tag ...> ... </tag>
_WRAPPER = re.compile(r"\s*<([A-Za-z][\w-]*)\b[^>]*>.*</\1>\s*", re.DOTALL)
# ...and whose rendered form came out as an empty shell
_EMPTY_WRAPPER = re.compile(r"\s*<([A-Za-z][\w-]*)\b[^>]*>\s*</\1>\s*")


# -- Nodes --

type Node = Text | Interpolation | Include | IfBlock | ForBlock


@dataclass(frozen=True, slots=True)
class Text:
    text: str


@dataclass(frozen=True, slots=True)
class Interpolation:
    path: str


@dataclass(frozen=True, slots=True)
class Include:
    name: str
    raw: str


@dataclass(frozen=True, slots=True)
class Branch:
    """One arm of an ``if``.

    ``collapsible`` is set when the arm's source is a single wrapping
    element; an empty rendering of such an arm is dropped entirely.
    """

    nodes: tuple[Node, ...]
    collapsible: bool


@dataclass(frozen=True, slots=True)
class IfBlock:
    condition: str
    body: Branch
    orelse: Branch | None


@dataclass(frozen=True, slots=True)
class ForBlock:
    target: str
    iterable: str
    body: tuple[Node, ...]


# -- Compilation --


def _branch(tokens: list[Token], start: int, stop: int, source: str, span: tuple[int, int]) -> Branch:
    text = source[span[0] : span[1]]
    return Branch(
        nodes=tuple(_parse(tokens, start, stop, source)),
        collapsible=_WRAPPER.fullmatch(text) is not None,
    )


def _parse(tokens: list[Token], start: int, stop: int, source: str) -> list[Node]:
    nodes: list[Node] = []
    index = start
    while index < stop:
        token = tokens[index]
        kind = token.kind

        if kind is TokenKind.TEXT:
            nodes.append(Text(token.value))
        elif kind is TokenKind.INTERPOLATION:
            nodes.append(Interpolation(token.value))
        elif kind is TokenKind.COMPONENT:
            nodes.append(Include(token.value, source[token.start : token.end]))
        elif kind is TokenKind.OPEN:
            end_index = find_block_end(tokens, index, stop)
            if end_index is None:
                # Unclosed block runs to the end of the span and renders nothing
                break
            end_token = tokens[end_index]
            if token.value == "if":
                else_index = find_else(tokens, index + 1, end_index)
                if else_index is None:
                    body = _branch(tokens, index + 1, end_index, source, (token.end, end_token.start))
                    orelse = None
                else:
                    else_token = tokens[else_index]
                    body = _branch(
                        tokens, index + 1, else_index, source, (token.end, else_token.start)
                    )
                    orelse = _branch(
                        tokens, else_index + 1, end_index, source, (else_token.end, end_token.start)
                    )
                nodes.append(IfBlock(token.argument, body, orelse))
            else:
                header = _FOR_HEADER.match(token.argument)
                if header is not None:
                    body_nodes = tuple(_parse(tokens, index + 1, end_index, source))
                    nodes.append(ForBlock(header["target"], header["iterable"], body_nodes))
            index = end_index + 1
            continue
        # ELSE / END / UNKNOWN outside their owning block render nothing

        index += 1
    return nodes


@lru_cache(maxsize=512)
def compile_source(source: str) -> tuple[Node, ...]:
    """Compile template text into its node tree.

    Memoized on the source text, so components (which are stored as raw
    text) are only parsed once per distinct body.
    """
    tokens = tokenize(source)
    return tuple(_parse(tokens, 0, len(tokens), source))


# -- Rendering --


class Knob:
    """A compiled template.

    Usage::

        knob = Knob("<li>{{ name }}</li>")
        knob.render({"name": "Ada"})  # '<li>Ada</li>'

        knob = Knob("{{{ nav }}}<main>{{ body }}</main>", components=registry.get_component)
    """

    __slots__ = ("_components", "_nodes", "source")

    def __init__(self, source: str, components: ComponentLookup | None = None) -> None:
        self.source = source
        self._components = components
        self._nodes = compile_source(source)

    def render(self, data: Mapping[str, Any] | None = None) -> str:
        """Render against *data*. Never raises for missing names."""
        return self._render_nodes(self._nodes, prepare(data), ())

    def _render_nodes(
        self,
        nodes: tuple[Node, ...],
        context: Mapping[str, Any],
        including: tuple[str, ...],
    ) -> str:
        parts: list[str] = []
        for node in nodes:
            match node:
                case Text(text):
                    parts.append(text)
                case Interpolation(path):
                    parts.append(render_value(resolve(path, context)))
                case Include():
                    parts.append(self._render_include(node, context, including))
                case IfBlock():
                    parts.append(self._render_if(node, context, including))
                case ForBlock():
                    parts.append(self._render_for(node, context, including))
        return "".join(parts)

    def _render_branch(
        self,
        branch: Branch,
        context: Mapping[str, Any],
        including: tuple[str, ...],
    ) -> str:
        rendered = self._render_nodes(branch.nodes, context, including)
        if branch.collapsible and _EMPTY_WRAPPER.fullmatch(rendered):
            return ""
        return rendered

    def _render_if(
        self,
        node: IfBlock,
        context: Mapping[str, Any],
        including: tuple[str, ...],
    ) -> str:
        if is_truthy(resolve(node.condition, context)):
            return self._render_branch(node.body, context, including)
        if node.orelse is not None:
            return self._render_branch(node.orelse, context, including)
        return ""

    def _render_for(
        self,
        node: ForBlock,
        context: Mapping[str, Any],
        including: tuple[str, ...],
    ) -> str:
        collection = resolve(node.iterable, context)
        entries = fields_of(collection)
        if entries is not None:
            items: list[Any] = [{"key": key, "value": value} for key, value in entries.items()]
        elif isinstance(collection, (list, tuple)):
            items = list(collection)
        else:
            return ""

        target = node.target
        last = len(items) - 1
        parts: list[str] = []
        for index, item in enumerate(items):
            child = {
                **context,
                target: item,
                f"{target}_index": index,
                f"{target}_first": index == 0,
                f"{target}_last": index == last,
            }
            parts.append(self._render_nodes(node.body, child, including))
        return "".join(parts)

    def _render_include(
        self,
        node: Include,
        context: Mapping[str, Any],
        including: tuple[str, ...],
    ) -> str:
        value = context.get(node.name)
        body = self._components(node.name) if self._components is not None else None
        if body is None:
            if isinstance(value, (Element, Link, Header)):
                return value.render()
            logger.warning("Component not found: %s", node.name)
            return ""

        if node.name in including:
            logger.warning(
                "Component %r includes itself (via %s); leaving it unexpanded",
                node.name,
                " -> ".join(including),
            )
            return node.raw

        scope = fields_of(value) or {}
        return self._render_nodes(compile_source(body), scope, (*including, node.name))
