"""Engine configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Engine configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, port=8080, cache_ttl=60.0)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False

    # Template sources
    template_dir: str | Path = "templates"
    component_dir: str | Path = "components"
    template_extension: str = ".jig"
    component_prefix: str = "_"  # components live in "_<name>.jig"

    # Static files
    static_dir: str | Path | None = "public"
    static_url: str = "/"

    # Route cache
    cache_enabled: bool = True
    cache_ttl: float = 300.0  # seconds, measured from creation

    # Output
    postprocess: bool = True
    generate_navigation: bool = False  # <nav> of exact routes in wrapped documents

    # Change feed
    watch: bool = False
    watch_interval: float = 0.5

    # Logging
    log_level: str = "info"
