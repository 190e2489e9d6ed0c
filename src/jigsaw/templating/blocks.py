"""Tokenizer and balanced-block extraction for the template mini-language.

Source text is split once into a flat token stream::

    {{{ name }}}          -> COMPONENT
    {{ path }}            -> INTERPOLATION
    {% if cond %}         -> OPEN   (value="if",  argument="cond")
    {% for x in xs %}     -> OPEN   (value="for", argument="x in xs")
    {% else %}            -> ELSE
    {% endif %}           -> END    (value="if")
    anything else         -> TEXT / UNKNOWN

Block boundaries are then found by depth counting over that stream: each
nested open tag of the same keyword increments the depth, each matching
end tag decrements it, and the end tag that brings the depth back to zero
closes the block. Malformed input never raises; an open tag without its
end tag simply has no block.
"""

import re
from dataclasses import dataclass
from enum import Enum

BLOCK_KEYWORDS: frozenset[str] = frozenset({"if", "for"})

TOKEN_PATTERN = re.compile(
    r"\{\{\{\s*(?P<component>\w+)\s*\}\}\}"
    r"|\{\{(?P<expr>[^}]+)\}\}"
    r"|\{%(?P<tag>[^%]+)%\}"
)


class TokenKind(Enum):
    TEXT = "text"
    COMPONENT = "component"
    INTERPOLATION = "interpolation"
    OPEN = "open"
    ELSE = "else"
    END = "end"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class Token:
    """One lexical unit of a template.

    ``start``/``end`` are offsets into the source, so the literal text of
    any token (or any span between two tokens) can be sliced back out.
    """

    kind: TokenKind
    value: str
    start: int
    end: int
    argument: str = ""


def _classify_tag(inner: str, start: int, end: int) -> Token:
    words = inner.split()
    if not words:
        return Token(TokenKind.UNKNOWN, "", start, end)
    keyword = words[0]
    if keyword in BLOCK_KEYWORDS:
        return Token(TokenKind.OPEN, keyword, start, end, argument=" ".join(words[1:]))
    if keyword == "else" and len(words) == 1:
        return Token(TokenKind.ELSE, keyword, start, end)
    if keyword.startswith("end") and keyword[3:] in BLOCK_KEYWORDS and len(words) == 1:
        return Token(TokenKind.END, keyword[3:], start, end)
    return Token(TokenKind.UNKNOWN, keyword, start, end, argument=" ".join(words[1:]))


def tokenize(source: str) -> list[Token]:
    """Split *source* into tokens, left to right."""
    tokens: list[Token] = []
    position = 0
    for match in TOKEN_PATTERN.finditer(source):
        start, end = match.span()
        if start > position:
            tokens.append(Token(TokenKind.TEXT, source[position:start], position, start))
        if match.group("component") is not None:
            tokens.append(Token(TokenKind.COMPONENT, match.group("component"), start, end))
        elif match.group("expr") is not None:
            tokens.append(Token(TokenKind.INTERPOLATION, match.group("expr").strip(), start, end))
        else:
            tokens.append(_classify_tag(match.group("tag"), start, end))
        position = end
    if position < len(source):
        tokens.append(Token(TokenKind.TEXT, source[position:], position, len(source)))
    return tokens


def find_block_end(tokens: list[Token], open_index: int, stop: int | None = None) -> int | None:
    """Return the index of the end tag matching ``tokens[open_index]``.

    Only open/end tags of the same keyword affect the depth. Returns
    ``None`` when the block is never closed before *stop*.
    """
    keyword = tokens[open_index].value
    depth = 0
    limit = len(tokens) if stop is None else stop
    for index in range(open_index + 1, limit):
        token = tokens[index]
        if token.value != keyword:
            continue
        if token.kind is TokenKind.OPEN:
            depth += 1
        elif token.kind is TokenKind.END:
            if depth == 0:
                return index
            depth -= 1
    return None


def find_else(tokens: list[Token], start: int, stop: int) -> int | None:
    """Return the index of the first ``else`` at nesting depth zero.

    An ``else`` inside a nested block (of either keyword) belongs to that
    block, not to the one being split.
    """
    depth = 0
    for index in range(start, stop):
        token = tokens[index]
        if token.kind is TokenKind.OPEN:
            depth += 1
        elif token.kind is TokenKind.END:
            depth -= 1
        elif token.kind is TokenKind.ELSE and depth == 0:
            return index
    return None


def extract_block(source: str, keyword: str, condition: str | None = None) -> str:
    """Return the text strictly between an open tag and its end tag.

    Finds the first ``{% <keyword> <condition> %}`` (any condition when
    *condition* is ``None``). Returns ``""`` when there is no such open
    tag or it is never closed.
    """
    tokens = tokenize(source)
    wanted = None if condition is None else " ".join(condition.split())
    for index, token in enumerate(tokens):
        if token.kind is not TokenKind.OPEN or token.value != keyword:
            continue
        if wanted is not None and token.argument != wanted:
            continue
        end_index = find_block_end(tokens, index)
        if end_index is None:
            return ""
        return source[token.end : tokens[end_index].start]
    return ""


def split_branches(inner: str) -> tuple[str, str | None]:
    """Split the inside of an ``if`` block on its own ``{% else %}``.

    Returns ``(if_branch, else_branch)``; ``else_branch`` is ``None`` when
    the block has no ``else`` at its own depth.
    """
    tokens = tokenize(inner)
    else_index = find_else(tokens, 0, len(tokens))
    if else_index is None:
        return inner, None
    token = tokens[else_index]
    return inner[: token.start], inner[token.end :]
