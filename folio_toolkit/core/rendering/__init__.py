"""Template engine and page rendering for the staged package."""

from .engine import RenderResult, TemplateEngine, build_variables_tree
from .document_renderer import DocumentRenderer

__all__ = [
    "RenderResult",
    "TemplateEngine",
    "build_variables_tree",
    "DocumentRenderer",
]
