# barsmith/core/context/__init__.py
"""
Context loading for barsmith.

Reads JSON, YAML and plist files (or whole directories of them) and merges
them into the single mapping a template is rendered against.
"""
from .loader import load_context
from .parsers import parse_context_file, SUPPORTED_EXTENSIONS
from .values import Context, ContextValue, normalize_value

__all__ = [
    "load_context",
    "parse_context_file",
    "SUPPORTED_EXTENSIONS",
    "Context",
    "ContextValue",
    "normalize_value",
]
