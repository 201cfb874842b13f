# barsmith/core/templating/__init__.py
"""
Templating module for barsmith.

Provides the TemplateRenderer for compiling and rendering Handlebars template
files, render() for template strings, and build_helpers() for the helper
namespace (markdownToHtml, each, zip) passed into every render.
"""
from .renderer import TemplateRenderer, render
from .helpers import build_helpers, markdown_to_html

__all__ = [
    "TemplateRenderer",
    "render",
    "build_helpers",
    "markdown_to_html",
]
