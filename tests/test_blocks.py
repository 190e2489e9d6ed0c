"""Tests for jigsaw.templating.blocks — tokenizer and balanced extraction."""

from jigsaw.templating.blocks import (
    TokenKind,
    extract_block,
    find_block_end,
    split_branches,
    tokenize,
)


class TestTokenize:
    def test_plain_text(self) -> None:
        tokens = tokenize("<p>hi</p>")
        assert [t.kind for t in tokens] == [TokenKind.TEXT]

    def test_kinds(self) -> None:
        source = "{{{ nav }}}{{ a.b }}{% if x %}{% else %}{% endif %}{% for i in xs %}{% endfor %}"
        kinds = [t.kind for t in tokenize(source)]
        assert kinds == [
            TokenKind.COMPONENT,
            TokenKind.INTERPOLATION,
            TokenKind.OPEN,
            TokenKind.ELSE,
            TokenKind.END,
            TokenKind.OPEN,
            TokenKind.END,
        ]

    def test_values_and_arguments(self) -> None:
        tokens = tokenize("{{{nav}}}{{ user.name }}{% for p in projects %}")
        assert tokens[0].value == "nav"
        assert tokens[1].value == "user.name"
        assert tokens[2].value == "for"
        assert tokens[2].argument == "p in projects"

    def test_offsets_slice_source(self) -> None:
        source = "a{{ x }}b"
        for token in tokenize(source):
            assert source[token.start : token.end]

    def test_unknown_tag(self) -> None:
        tokens = tokenize("{% include x %}")
        assert tokens[0].kind is TokenKind.UNKNOWN


class TestFindBlockEnd:
    def test_nested_same_keyword(self) -> None:
        tokens = tokenize("{% if a %}{% if b %}x{% endif %}y{% endif %}")
        end = find_block_end(tokens, 0)
        assert end == len(tokens) - 1

    def test_unclosed(self) -> None:
        tokens = tokenize("{% if a %}x")
        assert find_block_end(tokens, 0) is None


class TestExtractBlock:
    def test_first_match(self) -> None:
        assert extract_block("{% if a %}A{% endif %}", "if") == "A"

    def test_condition_filter(self) -> None:
        source = "{% if a %}A{% endif %}{% if b %}B{% endif %}"
        assert extract_block(source, "if", "b") == "B"

    def test_nested_inner_block_kept_whole(self) -> None:
        source = "{% if a %}<p>{% if b %}x{% endif %}</p>{% endif %}"
        assert extract_block(source, "if", "a") == "<p>{% if b %}x{% endif %}</p>"

    def test_missing_is_empty(self) -> None:
        assert extract_block("<p></p>", "for") == ""

    def test_unclosed_is_empty(self) -> None:
        assert extract_block("{% for x in xs %}<li>", "for") == ""


class TestSplitBranches:
    def test_no_else(self) -> None:
        assert split_branches("yes") == ("yes", None)

    def test_else(self) -> None:
        assert split_branches("yes{% else %}no") == ("yes", "no")

    def test_nested_else_belongs_to_inner(self) -> None:
        inner = "{% if b %}1{% else %}2{% endif %}{% else %}3"
        assert split_branches(inner) == ("{% if b %}1{% else %}2{% endif %}", "3")
