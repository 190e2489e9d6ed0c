"""File-system template source.

Layout::

    templates/
        home.jig          -> template "home"
        profile.jig       -> template "profile"
    components/
        _nav.jig          -> component "nav"
        _footer.jig       -> component "footer"

Dotfiles are ignored. Files are read as UTF-8.
"""

from __future__ import annotations

import logging
from pathlib import Path

from jigsaw.config import AppConfig
from jigsaw.watch import Snapshot, SourceKind

logger = logging.getLogger("jigsaw.templating")


class FileSystemSource:
    """Reads template and component bodies from two directories."""

    __slots__ = ("component_dir", "component_prefix", "extension", "template_dir")

    def __init__(
        self,
        template_dir: str | Path = "templates",
        component_dir: str | Path = "components",
        *,
        extension: str = ".jig",
        component_prefix: str = "_",
    ) -> None:
        self.template_dir = Path(template_dir)
        self.component_dir = Path(component_dir)
        self.extension = extension
        self.component_prefix = component_prefix

    @classmethod
    def from_config(cls, config: AppConfig) -> FileSystemSource:
        return cls(
            config.template_dir,
            config.component_dir,
            extension=config.template_extension,
            component_prefix=config.component_prefix,
        )

    # -- Paths --

    def template_path(self, name: str) -> Path:
        return self.template_dir / f"{name}{self.extension}"

    def component_path(self, name: str) -> Path:
        return self.component_dir / f"{self.component_prefix}{name}{self.extension}"

    def classify(self, path: str | Path) -> tuple[SourceKind, str] | None:
        """Map a file path to ``(kind, name)``, or ``None`` if it is not a source."""
        path = Path(path)
        filename = path.name
        if filename.startswith(".") or not filename.endswith(self.extension):
            return None
        stem = filename[: -len(self.extension)]
        if path.parent.resolve() == self.component_dir.resolve():
            if not stem.startswith(self.component_prefix):
                return None
            return SourceKind.COMPONENT, stem[len(self.component_prefix) :]
        if path.parent.resolve() == self.template_dir.resolve():
            return SourceKind.TEMPLATE, stem
        return None

    def _files(self, directory: Path) -> list[Path]:
        if not directory.is_dir():
            return []
        return sorted(p for p in directory.iterdir() if p.is_file())

    def files(self) -> dict[tuple[SourceKind, str], Path]:
        found: dict[tuple[SourceKind, str], Path] = {}
        for directory in (self.component_dir, self.template_dir):
            for path in self._files(directory):
                key = self.classify(path)
                if key is not None:
                    found[key] = path
        return found

    # -- TemplateSource protocol --

    def get_template_source(self, name: str) -> str | None:
        path = self.template_path(name)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def get_component_source(self, name: str) -> str | None:
        path = self.component_path(name)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def template_names(self) -> list[str]:
        if not self.template_dir.is_dir():
            logger.warning("Templates directory not found: %s", self.template_dir)
            return []
        return [name for kind, name in self.files() if kind is SourceKind.TEMPLATE]

    def component_names(self) -> list[str]:
        if not self.component_dir.is_dir():
            logger.warning("Components directory not found: %s", self.component_dir)
            return []
        return [name for kind, name in self.files() if kind is SourceKind.COMPONENT]

    # -- Change feed support --

    def snapshot(self) -> Snapshot:
        """Modification time (ns) of every source file, keyed by ``(kind, name)``."""
        snapshot: Snapshot = {}
        for key, path in self.files().items():
            try:
                snapshot[key] = path.stat().st_mtime_ns
            except FileNotFoundError:
                continue
        return snapshot
