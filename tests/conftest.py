"""Shared fixtures for the jigsaw test suite."""

from pathlib import Path

import pytest

from jigsaw.config import AppConfig
from jigsaw.engine import Engine


class MemorySource:
    """In-memory template source."""

    def __init__(
        self,
        templates: dict[str, str] | None = None,
        components: dict[str, str] | None = None,
    ) -> None:
        self.templates = dict(templates or {})
        self.components = dict(components or {})

    def get_template_source(self, name: str) -> str | None:
        return self.templates.get(name)

    def get_component_source(self, name: str) -> str | None:
        return self.components.get(name)

    def template_names(self) -> list[str]:
        return list(self.templates)

    def component_names(self) -> list[str]:
        return list(self.components)


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def source() -> MemorySource:
    return MemorySource()


@pytest.fixture
def engine(source: MemorySource, clock: FakeClock) -> Engine:
    return Engine(AppConfig(static_dir=None), source=source, clock=clock)


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """A site directory with templates, components and static files."""
    (tmp_path / "templates").mkdir()
    (tmp_path / "components").mkdir()
    (tmp_path / "public").mkdir()
    (tmp_path / "templates" / "home.jig").write_text("{{{ nav }}}<h1>{{ title }}</h1>")
    (tmp_path / "components" / "_nav.jig").write_text("<nav>{{ label }}</nav>")
    (tmp_path / "public" / "site.css").write_text("body { margin: 0; }")
    return tmp_path
