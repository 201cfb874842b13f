# barsmith/core/context/loader.py
"""
Builds the combined template context from an ordered list of files and directories.
"""
from pathlib import Path
from typing import Sequence, Union
import structlog

from barsmith.exceptions import LoadError, PathNotFoundError
from barsmith.util import resolve_cli_path
from .parsers import parse_context_file
from .values import Context, merge_shallow
from .walker import iter_context_files

log = structlog.get_logger(__name__)


def _load_directory(directory: Path, context: Context) -> None:
    # directory entries are best-effort: a bad file is logged and skipped.
    for file_path in iter_context_files(directory):
        try:
            data = parse_context_file(file_path)
        except LoadError as e:
            log.warning("context_file_skipped", path=str(file_path), error=str(e))
            continue
        merge_shallow(context, data)
        log.debug("context_file_merged", path=str(file_path), keys=list(data.keys()))


def load_context(sources: Sequence[Union[str, Path]]) -> Context:
    """
    Loads and merges every context source, in order, into one mapping.

    Later sources win on top-level key collisions; values are replaced whole,
    never deep-merged. A missing source or a failing single-file source
    raises and no partial context is returned. Failing files found while
    walking a directory source are skipped.
    """
    context: Context = {}
    log.info("context_load_started", source_count=len(sources))

    for raw_source in sources:
        source = resolve_cli_path(raw_source)
        if not source.exists():
            raise PathNotFoundError(source)

        if source.is_dir():
            _load_directory(source, context)
        else:
            data = parse_context_file(source)
            merge_shallow(context, data)
            log.debug("context_file_merged", path=str(source), keys=list(data.keys()))

    log.info("context_load_complete", keys=len(context))
    return context
