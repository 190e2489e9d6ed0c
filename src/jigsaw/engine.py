"""The jigsaw engine.

One ``Engine`` owns the four tables a site needs — templates, components,
routes, and the rendered-route cache — and is passed around explicitly.
Construct one per process (or one per test).

Request flow::

    path ─▶ Router.match ─▶ RouteCache.get ─(miss)─▶ handler(params)
                                                      │
              RouteCache.put ◀── postprocess ◀────────┘
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from html import escape
from typing import Any

import anyio

from jigsaw._internal.asgi import Receive, Scope, Send, query_params
from jigsaw._internal.invoke import invoke
from jigsaw._internal.types import Handler
from jigsaw.config import AppConfig
from jigsaw.errors import ConfigurationError, HTTPError, MissingParameter, NotFound
from jigsaw.html.postprocess import postprocess
from jigsaw.http.response import Response
from jigsaw.loader import FileSystemSource
from jigsaw.routing.cache import RouteCache, cache_key
from jigsaw.routing.route import Route
from jigsaw.routing.router import Router, parse_pattern
from jigsaw.server.sender import send_response
from jigsaw.server.static import StaticFiles
from jigsaw.templating.registry import Registry, TemplateSource
from jigsaw.watch import ChangeKind, FileWatcher, SourceChange, SourceKind

logger = logging.getLogger("jigsaw.server")
route_logger = logging.getLogger("jigsaw.routing")
template_logger = logging.getLogger("jigsaw.templating")


def wrap_document(head: str, content: str, navigation: str = "") -> str:
    """Wrap route output in a full document with the given head markup.

    *navigation* is placed at the top of the body, ahead of *content*.
    """
    return f"<!DOCTYPE html><html><head>{head}</head><body>{navigation}{content}</body></html>"


def navigation_markup(patterns: Iterable[str]) -> str:
    """Build a ``<nav>`` list linking to each pattern. ``/`` is labelled Home."""
    items = "".join(
        f'<li><a href="{escape(pattern)}">{"Home" if pattern == "/" else escape(pattern[1:])}</a></li>'
        for pattern in patterns
    )
    return f"<nav><ul>{items}</ul></nav>"


@dataclass(slots=True)
class _InFlight:
    """A per-key render lock and the number of requests holding or awaiting it."""

    lock: anyio.Lock
    users: int = 0


class Engine:
    """A template registry, router and route cache bound together.

    Usage::

        engine = Engine()
        engine.add_template("profile", "<h1>{{ name }}</h1>")

        @engine.route("/users/:id")
        async def profile(params):
            user = await fetch_user(params["id"])
            return engine.render("profile", user)

        response = await engine.handle("/users/7")
        response.status, response.text

    Thread safety:
        Source changes (``apply_change``) replace the registry entry and
        clear the cache under one lock, so a reader never sees a cleared
        cache next to a stale template or the reverse.
    """

    __slots__ = (
        "_heads",
        "_inflight",
        "_static",
        "_watcher",
        "_write_lock",
        "cache",
        "config",
        "registry",
        "router",
        "source",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        source: TemplateSource | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self.registry = Registry()
        self.router = Router()
        self.cache = RouteCache(self.config.cache_ttl, clock=clock or time.monotonic)
        self.source: TemplateSource = (
            source if source is not None else FileSystemSource.from_config(self.config)
        )
        self._heads: dict[str, str] = {}
        self._write_lock = threading.RLock()
        self._inflight: dict[str, _InFlight] = {}
        self._watcher: FileWatcher | None = None
        self._static: StaticFiles | None = (
            StaticFiles(self.config.static_dir, self.config.static_url)
            if self.config.static_dir is not None
            else None
        )

    # -- Route registration --

    def add_route(self, pattern: str, handler: Handler) -> Route:
        """Bind *handler* to *pattern*. Re-registering a pattern replaces it."""
        route = Route(pattern=pattern, handler=handler, segments=parse_pattern(pattern))
        with self._write_lock:
            self.router.add(route)
            self.cache.clear()
        return route

    def route(self, pattern: str) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            pattern: URL pattern. Use ``:name`` segments for parameters.
        """

        def decorator(func: Handler) -> Handler:
            self.add_route(pattern, func)
            return func

        return decorator

    def set_head(self, pattern: str, head: str) -> None:
        """Wrap a route's output in a document whose ``<head>`` is *head*."""
        route = self.router.get(pattern)
        if route is None:
            msg = f"Route {pattern!r} is not registered"
            raise ConfigurationError(msg)
        with self._write_lock:
            self._heads[route.pattern] = head
            self.cache.clear()

    # -- Template registration --

    def register_template(self, names: str | Iterable[str]) -> None:
        """Load one or more templates by name from the template source.

        A name the source does not know registers an empty template, so
        routes that render it produce empty output instead of failing.
        """
        if isinstance(names, str):
            names = [names]
        for name in names:
            body = self.source.get_template_source(name)
            if body is None:
                template_logger.warning("Template not found: %s. Using empty template.", name)
                body = ""
            self.add_template(name, body)

    def add_template(self, name: str, source: str) -> None:
        """Register template text under *name* (replacing any previous one)."""
        with self._write_lock:
            self.registry.set_template(name, source)
            self.cache.clear()

    def add_component(self, name: str, source: str) -> None:
        """Register component text under *name* (replacing any previous one)."""
        with self._write_lock:
            self.registry.set_component(name, source)
            self.cache.clear()

    def load_sources(self) -> None:
        """Register every template and component the source provides."""
        with self._write_lock:
            self.registry.load(self.source)
            self.cache.clear()

    # -- Rendering --

    def render(self, name: str, data: Mapping[str, Any] | None = None) -> str:
        """Render a registered template. Unknown names render as ``""``."""
        template = self.registry.get_template(name)
        if template is None:
            template_logger.warning("Template not found: %s", name)
            return ""
        return template.render(data)

    def render_string(self, source: str, data: Mapping[str, Any] | None = None) -> str:
        """Render ad-hoc template text with this engine's components."""
        return self.registry.compile(source).render(data)

    # -- Change feed --

    def apply_change(self, change: SourceChange) -> None:
        """Apply one source change, then wipe the route cache.

        Added or changed entries are re-read from the source; an entry
        whose file has vanished in the meantime is dropped.
        """
        with self._write_lock:
            is_component = change.source_kind is SourceKind.COMPONENT
            body: str | None = None
            if change.kind is not ChangeKind.REMOVED:
                body = (
                    self.source.get_component_source(change.name)
                    if is_component
                    else self.source.get_template_source(change.name)
                )

            if body is None:
                if is_component:
                    self.registry.remove_component(change.name)
                else:
                    self.registry.remove_template(change.name)
            elif is_component:
                self.registry.set_component(change.name, body)
            else:
                self.registry.set_template(change.name, body)

            self.cache.clear()

    def watch(self) -> FileWatcher:
        """Start polling the file-system source for changes."""
        if not isinstance(self.source, FileSystemSource):
            msg = "Watching requires a FileSystemSource"
            raise ConfigurationError(msg)
        if self._watcher is None:
            self._watcher = FileWatcher(
                self.source, self.apply_change, interval=self.config.watch_interval
            )
        self._watcher.start()
        return self._watcher

    def stop_watching(self) -> None:
        if self._watcher is not None:
            self._watcher.stop()

    # -- Dispatch --

    async def dispatch(self, path: str, query: Mapping[str, str] | None = None) -> str:
        """Match *path*, then serve it from the cache or its handler.

        Raises ``NotFound`` when nothing matches. Path parameters take
        precedence over query parameters of the same name. Query
        parameters reach the handler but do not vary the cache key.
        """
        match = self.router.match(path)
        params = {**(query or {}), **match.params}
        return await self._serve(match.route, params)

    async def call_route(self, pattern: str, params: Mapping[str, str] | None = None) -> str:
        """Serve a route by its pattern with explicit parameter bindings.

        Raises ``MissingParameter`` if a declared ``:param`` is absent.
        """
        route = self.router.get(pattern)
        if route is None:
            raise NotFound(f"No route registered for {pattern!r}")
        return await self._serve(route, dict(params or {}))

    async def _serve(self, route: Route, params: dict[str, str]) -> str:
        for name in route.param_names:
            if name not in params:
                raise MissingParameter(name, route.pattern)

        if not self.config.cache_enabled:
            return await self._produce(route, params)

        # Only declared path parameters identify a cached page
        declared = {name: params[name] for name in route.param_names}
        cached = self.cache.get(route.pattern, declared)
        if cached is not None:
            route_logger.debug("Cache hit: %s", route.pattern)
            return cached

        key = cache_key(route.pattern, declared)
        entry = self._inflight.get(key)
        if entry is None:
            entry = self._inflight[key] = _InFlight(anyio.Lock())
        entry.users += 1
        try:
            async with entry.lock:
                # A request for the same key may have filled it while we waited
                cached = self.cache.get(route.pattern, declared)
                if cached is not None:
                    return cached
                route_logger.debug("Cache miss: %s", key)
                content = await self._produce(route, params)
                self.cache.put(route.pattern, declared, content)
                return content
        finally:
            entry.users -= 1
            if not entry.users:
                del self._inflight[key]

    async def _produce(self, route: Route, params: dict[str, str]) -> str:
        content = await invoke(route.handler, params)
        if not isinstance(content, str):
            msg = (
                f"Handler for {route.pattern!r} returned {type(content).__name__}, expected str"
            )
            raise TypeError(msg)
        head = self._heads.get(route.pattern)
        if head is not None:
            navigation = self._navigation() if self.config.generate_navigation else ""
            content = wrap_document(head, content, navigation)
        if self.config.postprocess:
            content = postprocess(content)
        return content

    def _navigation(self) -> str:
        return navigation_markup(route.pattern for route in self.router.routes if route.is_exact)

    # -- Transport boundary --

    async def handle(self, path: str, query: Mapping[str, str] | None = None) -> Response:
        """Serve *path* as a status/body pair. Never raises.

        404 when no route matches, 500 when the handler fails or a
        required parameter is missing, 200 otherwise. Failure details are
        logged, not returned (unless ``config.debug`` is set).
        """
        try:
            body = await self.dispatch(path, query)
        except HTTPError as exc:
            if exc.status >= 500:
                logger.error("%d %s: %s", exc.status, path, exc.detail)
                detail = exc.detail if self.config.debug else "Internal Server Error"
            else:
                logger.debug("%d %s: %s", exc.status, path, exc.detail)
                detail = exc.detail or f"Error {exc.status}"
            response = Response(body=detail, status=exc.status)
            for name, value in exc.headers:
                response = response.with_header(name, value)
            return response
        except Exception:
            logger.exception("500 %s", path)
            return Response(body="Internal Server Error", status=500)
        return Response(body=body)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        method = scope.get("method", "GET")
        path = scope.get("path", "/")

        response: Response | None = None
        if self._static is not None and method in ("GET", "HEAD"):
            response = self._static.lookup(path)
        if response is None:
            response = await self.handle(path, query_params(scope))

        await send_response(response, send, head=method == "HEAD")

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        With ``config.watch`` set, sources are loaded and the change feed
        is started at startup and stopped at shutdown.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    if self.config.watch:
                        self.load_sources()
                        self.watch()
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return

            elif msg_type == "lifespan.shutdown":
                self.stop_watching()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Start the development server (requires the ``server`` extra)."""
        from jigsaw.server.dev import run_dev_server

        run_dev_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
        )
