# barsmith/core/templating/helpers.py
"""
Handlebars helper functions registered for every barsmith render.

Pybars calls every helper with the current 'this' context first. Block
helpers receive the pybars options dict second, whose 'fn' and 'inverse'
entries render the block body and its {{else}} part.
"""
from typing import Any, Callable, Dict, Iterable, Optional, Sequence

import markdown
import pybars  # type: ignore

from barsmith.core.context.values import as_sequence


def markdown_to_html(source: Optional[str], extensions: Sequence[str] = ()) -> Optional[str]:
    """
    Converts markdown text to HTML. None passes through as None so templates
    can call it on optional fields.
    """
    if source is None:
        return None
    if not isinstance(source, str):
        raise TypeError(f"markdownToHtml expects a string, got {type(source).__name__}")
    return markdown.markdown(source, extensions=list(extensions))


def make_markdown_helper(extensions: Sequence[str] = ()) -> Callable[..., Optional[str]]:
    def markdown_to_html_helper(this: Any, source: Optional[str] = None) -> Optional[str]:
        return markdown_to_html(source, extensions)
    return markdown_to_html_helper


def _render_rows(this: Any, options: Dict[str, Any], rows: Iterable[Any], keys: Optional[Sequence[Any]] = None):
    rows = list(rows)
    if not rows:
        return options["inverse"](this)

    result = pybars.strlist()
    last_index = len(rows) - 1
    for index, row in enumerate(rows):
        scope_kwargs = {"index": index, "first": index == 0, "last": index == last_index}
        if keys is not None:
            scope_kwargs["key"] = keys[index]
        scope = pybars.Scope(row, this, options.get("root"), **scope_kwargs)
        result.grow(options["fn"](scope))
    return result


def each_helper(this: Any, options: Dict[str, Any], collection: Any = None):
    """
    {{#each items}}...{{else}}...{{/each}}

    Iterates a list, or the keys of a mapping (exposing @key), with @index,
    @first and @last available inside the block.
    """
    if isinstance(collection, dict):
        keys = list(collection.keys())
        return _render_rows(this, options, (collection[k] for k in keys), keys)
    return _render_rows(this, options, as_sequence(collection))


def _zip_row(elements: Sequence[Any]) -> Any:
    # mapping elements merge, later sequences winning; otherwise the last element.
    mappings = [e for e in elements if isinstance(e, dict)]
    if not mappings:
        return elements[-1]
    row: Dict[str, Any] = {}
    for mapping in mappings:
        row.update(mapping)
    return row


def zip_helper(this: Any, options: Dict[str, Any], *sequences: Any):
    """
    {{#zip names ages}}...{{/zip}}

    Walks several sequences in parallel, stopping at the shortest one.
    """
    if not sequences:
        return options["inverse"](this)
    rows = (_zip_row(elements) for elements in zip(*(as_sequence(s) for s in sequences)))
    return _render_rows(this, options, rows)


def build_helpers(markdown_extensions: Sequence[str] = ()) -> Dict[str, Callable[..., Any]]:
    """Returns the helper namespace passed into every render call."""
    return {
        "markdownToHtml": make_markdown_helper(markdown_extensions),
        "each": each_helper,
        "zip": zip_helper,
    }


BUILTIN_HELPERS = build_helpers()
