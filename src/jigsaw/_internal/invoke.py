"""Invoke helpers — call sync or async route handlers uniformly.

Route handlers can be ``def`` or ``async def``. The dispatcher is the only
caller, but the sync/async check still lives in exactly one place.

Usage::

    from jigsaw._internal.invoke import invoke

    html = await invoke(handler, params)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it is awaitable.

    Works with both sync and async callables::

        # sync: returns markup immediately
        def home(params):
            return engine.render("home", {"title": "Welcome"})

        # async: suspends while fetching data
        async def profile(params):
            user = await fetch_user(params["id"])
            return engine.render("profile", user)
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
