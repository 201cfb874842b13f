# barsmith/core/context/parsers.py
"""
Extension-based parsing of context data files into mappings.
"""
import json
import plistlib
from pathlib import Path
from typing import Any, Callable, Dict
from xml.parsers.expat import ExpatError
import structlog
import yaml

from barsmith.exceptions import ParseError, UnsupportedExtensionError
from barsmith.util import strip_utf8_bom
from .values import Context, normalize_value

log = structlog.get_logger(__name__)


def _decode_text(path: Path, raw: bytes) -> str:
    try:
        return strip_utf8_bom(raw).decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(path, f"not valid utf-8 text ({e})") from e


def _parse_json(path: Path, raw: bytes) -> Any:
    try:
        return json.loads(_decode_text(path, raw))
    except json.JSONDecodeError as e:
        raise ParseError(path, f"invalid JSON: {e}") from e
    except RecursionError as e:
        raise ParseError(path, "invalid JSON: nested too deeply") from e


def _parse_yaml(path: Path, raw: bytes) -> Any:
    try:
        return yaml.safe_load(_decode_text(path, raw))
    except yaml.YAMLError as e:
        # covers multi-document streams too, which safe_load rejects
        raise ParseError(path, f"invalid YAML: {e}") from e
    except (ValueError, TypeError) as e:
        # constructor failures, e.g. an impossible timestamp like 2020-13-45
        raise ParseError(path, f"invalid YAML value: {e}") from e
    except RecursionError as e:
        raise ParseError(path, "invalid YAML: nested too deeply") from e


def _parse_plist(path: Path, raw: bytes) -> Any:
    try:
        return plistlib.loads(raw)
    except (plistlib.InvalidFileException, ExpatError, ValueError) as e:
        raise ParseError(path, f"invalid property list: {e}") from e
    except RecursionError as e:
        raise ParseError(path, "invalid property list: nested too deeply") from e


PARSERS_BY_EXTENSION: Dict[str, Callable[[Path, bytes], Any]] = {
    "json": _parse_json,
    "yaml": _parse_yaml,
    "yml": _parse_yaml,
    "plist": _parse_plist,
}

SUPPORTED_EXTENSIONS = frozenset(PARSERS_BY_EXTENSION)


def file_extension(path: Path) -> str:
    # literal extension without the dot; matching is case-sensitive.
    return path.suffix[1:] if path.suffix else ""


def parse_context_file(path: Path) -> Context:
    """
    Parses one data file into a context mapping, choosing the parser by extension.

    A zero-byte file with a recognized extension yields an empty mapping.
    Raises UnsupportedExtensionError for unknown extensions and ParseError for
    unreadable files, malformed content, or a root that is not a mapping.
    """
    extension = file_extension(path)
    parser = PARSERS_BY_EXTENSION.get(extension)
    if parser is None:
        raise UnsupportedExtensionError(path, extension)

    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ParseError(path, str(e)) from e

    if not raw:
        log.debug("empty_context_file_treated_as_empty_mapping", path=str(path))
        return {}

    data = parser(path, raw)
    if not isinstance(data, dict):
        raise ParseError(path, f"root must be a mapping, got {type(data).__name__}")

    log.debug("context_file_parsed", path=str(path), format=extension, keys=len(data))
    return normalize_value(data)
