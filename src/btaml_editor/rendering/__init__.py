"""HTML page rendering for article previews."""

from .preview_renderer import PreviewRenderer

__all__ = ["PreviewRenderer"]
