"""Shared type aliases used across jigsaw modules."""

from collections.abc import Awaitable, Callable
from typing import TypeAlias

# Route handler: receives the bound parameters, returns markup (sync or async)
Handler: TypeAlias = Callable[[dict[str, str]], str | Awaitable[str]]

# Component lookup used by the renderer; ``None`` when the name is unknown
ComponentLookup: TypeAlias = Callable[[str], str | None]
