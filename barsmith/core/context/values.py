# barsmith/core/context/values.py
"""
Normalization of parsed data into the value types a template context holds:
str, int/float, bool, None, list, and dict with string keys.
"""
import base64
import datetime
from typing import Any, Dict, List, Mapping, Union

ContextValue = Union[str, int, float, bool, None, List[Any], Dict[str, Any]]
Context = Dict[str, ContextValue]


def normalize_value(value: Any) -> ContextValue:
    """Converts a parsed JSON/YAML/plist value into a ContextValue, recursively."""
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, Mapping):
        return {str(k): normalize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize_value(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return [normalize_value(v) for v in sorted(value, key=str)]
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        # plist <data> blocks
        return base64.b64encode(bytes(value)).decode("ascii")
    return str(value)


def as_sequence(value: Any) -> List[Any]:
    # template helpers iterate lists and mapping keys; anything else is empty.
    if value is None or isinstance(value, (str, bytes)):
        return []
    if isinstance(value, Mapping):
        return list(value.keys())
    try:
        return list(value)
    except TypeError:
        return []


def merge_shallow(target: Context, incoming: Mapping[str, ContextValue]) -> Context:
    """Merges `incoming` into `target` in place; on key collisions the incoming value replaces the old one wholesale."""
    for key, value in incoming.items():
        target[key] = value
    return target
