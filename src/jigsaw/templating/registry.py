"""Template and component tables.

Templates are stored compiled (``Knob``); components are stored as raw
text and compiled lazily by the renderer when first included. Every
mutation replaces a whole entry, never part of one.
"""

import logging
import threading
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from jigsaw.templating.knob import Knob

logger = logging.getLogger("jigsaw.templating")


@runtime_checkable
class TemplateSource(Protocol):
    """Where template and component bodies come from.

    ``FileSystemSource`` is the stock implementation; tests use in-memory
    stand-ins. The engine itself never touches storage.
    """

    def get_template_source(self, name: str) -> str | None: ...

    def get_component_source(self, name: str) -> str | None: ...

    def template_names(self) -> Iterable[str]: ...

    def component_names(self) -> Iterable[str]: ...


class Registry:
    """Name → template / component store shared by renders and the change feed."""

    __slots__ = ("_components", "_lock", "_templates")

    def __init__(self) -> None:
        self._templates: dict[str, Knob] = {}
        self._components: dict[str, str] = {}
        self._lock = threading.Lock()

    # -- Templates --

    def set_template(self, name: str, source: str) -> Knob:
        knob = Knob(source, components=self.get_component)
        with self._lock:
            self._templates[name] = knob
        return knob

    def get_template(self, name: str) -> Knob | None:
        return self._templates.get(name)

    def remove_template(self, name: str) -> bool:
        with self._lock:
            return self._templates.pop(name, None) is not None

    # -- Components --

    def set_component(self, name: str, source: str) -> None:
        with self._lock:
            self._components[name] = source

    def get_component(self, name: str) -> str | None:
        return self._components.get(name)

    def remove_component(self, name: str) -> bool:
        with self._lock:
            return self._components.pop(name, None) is not None

    # -- Introspection --

    @property
    def template_names(self) -> list[str]:
        return list(self._templates)

    @property
    def component_names(self) -> list[str]:
        return list(self._components)

    def compile(self, source: str) -> Knob:
        """Compile ad-hoc template text bound to this registry's components."""
        return Knob(source, components=self.get_component)

    def load(self, source: TemplateSource) -> None:
        """Register every template and component *source* knows about."""
        for name in source.component_names():
            body = source.get_component_source(name)
            if body is not None:
                self.set_component(name, body)
        for name in source.template_names():
            body = source.get_template_source(name)
            if body is not None:
                self.set_template(name, body)
        logger.debug(
            "Loaded %d templates and %d components",
            len(self._templates),
            len(self._components),
        )
