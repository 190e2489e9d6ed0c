"""Tests for jigsaw._internal — ASGI helpers and handler invocation."""

import pytest

from jigsaw._internal.asgi import query_params
from jigsaw._internal.invoke import invoke


class TestQueryParams:
    def test_empty(self) -> None:
        assert query_params({"query_string": b""}) == {}
        assert query_params({}) == {}

    def test_decoded(self) -> None:
        scope = {"query_string": b"q=hello+world&page=2"}
        assert query_params(scope) == {"q": "hello world", "page": "2"}

    def test_last_value_wins(self) -> None:
        assert query_params({"query_string": b"a=1&a=2"}) == {"a": "2"}

    def test_blank_values_kept(self) -> None:
        assert query_params({"query_string": b"flag="}) == {"flag": ""}


class TestInvoke:
    @pytest.mark.anyio
    async def test_sync(self) -> None:
        assert await invoke(lambda params: f"<p>{params['x']}</p>", {"x": "1"}) == "<p>1</p>"

    @pytest.mark.anyio
    async def test_async(self) -> None:
        async def handler(params: dict[str, str]) -> str:
            return "<p>async</p>"

        assert await invoke(handler, {}) == "<p>async</p>"
