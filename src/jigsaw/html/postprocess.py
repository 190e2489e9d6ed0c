"""HTML post-processing for rendered route output.

Two normalizations, nothing more:

- elements whose whole subtree holds no text are dropped (``script`` and
  ``style`` are kept, and void elements count as content);
- void elements are written in one canonical form, ``<img src="...">``.

The output is stable: running it through ``postprocess`` again returns it
unchanged.
"""

from html import escape

from bs4 import BeautifulSoup, Doctype, NavigableString, Tag
from bs4.element import PreformattedString

from jigsaw.templating.values import VOID_ELEMENTS

RAW_TEXT_ELEMENTS: frozenset[str] = frozenset({"script", "style"})


def _format_attrs(tag: Tag) -> str:
    parts: list[str] = []
    for name, value in tag.attrs.items():
        if isinstance(value, list):
            value = " ".join(value)
        if value == "":
            parts.append(name)
        else:
            parts.append(f'{name}="{escape(str(value), quote=True)}"')
    return " " + " ".join(parts) if parts else ""


def _has_content(tag: Tag) -> bool:
    for child in tag.children:
        if isinstance(child, Tag):
            if child.name in VOID_ELEMENTS or child.name in RAW_TEXT_ELEMENTS:
                return True
            if _has_content(child):
                return True
        elif isinstance(child, PreformattedString):
            continue
        elif isinstance(child, NavigableString) and child.strip():
            return True
    return False


def is_empty_element(tag: Tag) -> bool:
    """True when *tag* would be removed: no text anywhere below it."""
    name = tag.name.lower()
    if name in VOID_ELEMENTS or name in RAW_TEXT_ELEMENTS:
        return False
    return not _has_content(tag)


def _process(node: object) -> str:
    if isinstance(node, Doctype):
        return f"<!DOCTYPE {node}>"
    if isinstance(node, PreformattedString):
        # Comments, CDATA, processing instructions
        return ""
    if isinstance(node, NavigableString):
        parent = node.parent
        if parent is not None and parent.name in RAW_TEXT_ELEMENTS:
            return str(node)
        return escape(str(node), quote=False)
    if not isinstance(node, Tag):
        return ""

    name = node.name.lower()
    attrs = _format_attrs(node)
    if name in VOID_ELEMENTS:
        return f"<{name}{attrs}>"
    if is_empty_element(node):
        return ""
    inner = "".join(_process(child) for child in node.children)
    return f"<{name}{attrs}>{inner}</{name}>"


def postprocess(html: str) -> str:
    """Prune empty elements and canonicalize void tags in *html*."""
    soup = BeautifulSoup(html, "html.parser", multi_valued_attributes=None)
    return "".join(_process(child) for child in soup.contents)
