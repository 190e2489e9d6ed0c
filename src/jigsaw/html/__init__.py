"""HTML output normalization."""

from jigsaw.html.postprocess import postprocess

__all__ = ["postprocess"]
