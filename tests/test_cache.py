"""Tests for jigsaw.routing.cache — time-boxed route output cache."""

from jigsaw.routing.cache import DEFAULT_TTL, RouteCache, cache_key


class TestCacheKey:
    def test_no_params(self) -> None:
        assert cache_key("/about") == "/about"
        assert cache_key("/about", {}) == "/about"

    def test_params(self) -> None:
        assert cache_key("/users/:id", {"id": "7"}) == "/users/:id?id=7"

    def test_multiple_params_keep_order(self) -> None:
        assert cache_key("/:a/:b", {"a": "1", "b": "2"}) == "/:a/:b?a=1&b=2"


class TestRouteCache:
    def test_default_ttl_is_five_minutes(self) -> None:
        assert DEFAULT_TTL == 300

    def test_miss(self) -> None:
        assert RouteCache().get("/x") is None

    def test_hit(self) -> None:
        cache = RouteCache()
        cache.put("/x", None, "<p>x</p>")
        assert cache.get("/x") == "<p>x</p>"

    def test_params_distinguish_entries(self) -> None:
        cache = RouteCache()
        cache.put("/u/:id", {"id": "1"}, "one")
        cache.put("/u/:id", {"id": "2"}, "two")
        assert cache.get("/u/:id", {"id": "1"}) == "one"
        assert cache.get("/u/:id", {"id": "2"}) == "two"

    def test_hit_just_before_expiry(self, clock) -> None:
        cache = RouteCache(clock=clock)
        cache.put("/x", None, "x")
        clock.advance(4 * 60 + 59)
        assert cache.get("/x") == "x"

    def test_miss_after_expiry(self, clock) -> None:
        cache = RouteCache(clock=clock)
        cache.put("/x", None, "x")
        clock.advance(5 * 60 + 1)
        assert cache.get("/x") is None

    def test_expired_entry_evicted(self, clock) -> None:
        cache = RouteCache(ttl=10, clock=clock)
        cache.put("/x", None, "x")
        clock.advance(11)
        cache.get("/x")
        assert "/x" not in cache
        assert len(cache) == 0

    def test_put_refreshes_creation_time(self, clock) -> None:
        cache = RouteCache(ttl=10, clock=clock)
        cache.put("/x", None, "old")
        clock.advance(8)
        cache.put("/x", None, "new")
        clock.advance(8)
        assert cache.get("/x") == "new"

    def test_clear(self) -> None:
        cache = RouteCache()
        cache.put("/a", None, "a")
        cache.put("/b", {"id": "1"}, "b")
        cache.clear()
        assert len(cache) == 0
        assert cache.get("/a") is None
