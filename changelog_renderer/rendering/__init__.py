"""Changelog rendering module."""

from .exceptions import TemplateRenderError, TemplateSyntaxError
from .markdown import MarkdownWriter
from .renderer import ChangelogRenderer

__all__ = [
    "TemplateSyntaxError",
    "TemplateRenderError",
    "MarkdownWriter",
    "ChangelogRenderer",
]
