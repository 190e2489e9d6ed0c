"""Jigsaw — a small website engine: templates, components, routes, cache.

Templates use a compact mini-language::

    {{{ nav }}}
    <h1>{{ user.name }}</h1>
    {% if bio %}<p>{{ bio }}</p>{% else %}<p>No bio yet.</p>{% endif %}
    <ul>{% for p in projects %}<li>{{ p.name }}</li>{% endfor %}</ul>

Basic usage::

    from jigsaw import Engine

    engine = Engine()
    engine.add_template("home", "<h1>{{ title }}</h1>")

    @engine.route("/")
    def home(params):
        return engine.render("home", {"title": "Welcome"})

    engine.run()
"""

__version__ = "0.1.0"
__all__ = [
    "AppConfig",
    "ConfigurationError",
    "Element",
    "Engine",
    "HTTPError",
    "Header",
    "JigsawError",
    "Knob",
    "Link",
    "MissingParameter",
    "NotFound",
    "Response",
    "postprocess",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import jigsaw`` fast while providing a clean top-level API.
    """
    if name == "Engine":
        from jigsaw.engine import Engine

        return Engine

    if name == "AppConfig":
        from jigsaw.config import AppConfig

        return AppConfig

    if name == "Response":
        from jigsaw.http.response import Response

        return Response

    if name in ("Knob", "Element", "Link", "Header"):
        from jigsaw import templating as _tmpl

        return getattr(_tmpl, name)

    if name == "postprocess":
        from jigsaw.html.postprocess import postprocess

        return postprocess

    if name in ("JigsawError", "ConfigurationError", "HTTPError", "MissingParameter", "NotFound"):
        from jigsaw import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
