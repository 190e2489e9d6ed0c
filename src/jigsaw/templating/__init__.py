"""Template engine — tokenizer, block extraction, resolver and renderer.

``{{{ name }}}`` includes a component, ``{{ path }}`` interpolates a value,
``{% if %}``/``{% else %}``/``{% endif %}`` and ``{% for %}``/``{% endfor %}``
control output.
"""

from jigsaw.templating.knob import Knob
from jigsaw.templating.registry import Registry, TemplateSource
from jigsaw.templating.values import Element, Header, Link, prepare

__all__ = ["Element", "Header", "Knob", "Link", "Registry", "TemplateSource", "prepare"]
