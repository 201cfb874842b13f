# barsmith/core/context/walker.py
import os
import stat
from pathlib import Path
from typing import Iterator
import structlog

log = structlog.get_logger(__name__)

# directories treated as opaque bundles; the walker never descends into them.
BUNDLE_SUFFIXES = frozenset({
    ".app", ".bundle", ".framework", ".plugin", ".kext", ".pkg",
    ".xcodeproj", ".xcworkspace", ".playground", ".photoslibrary",
})


def is_hidden_name(name: str) -> bool:
    return name.startswith(".")


def is_bundle_dir(name: str) -> bool:
    return Path(name).suffix.lower() in BUNDLE_SUFFIXES


def is_regular_file(path: Path) -> bool:
    # lstat so that symlinks are reported as such rather than followed.
    try:
        return stat.S_ISREG(os.lstat(path).st_mode)
    except OSError as e:
        log.warning("context_file_stat_failed", path=str(path), error=str(e))
        return False


def iter_context_files(directory: Path) -> Iterator[Path]:
    """
    Yields the regular files under `directory`, recursively.

    Hidden entries and bundle directories are skipped, symlinks and other
    non-regular files are not yielded. Within each directory files come first
    in lexicographic order, then sub-directories in lexicographic order.
    """
    log.debug("context_directory_walk_started", directory=str(directory))

    for root, dirs, files in os.walk(str(directory), topdown=True, followlinks=False):
        # prune directories.
        dirs[:] = sorted(d for d in dirs if not is_hidden_name(d) and not is_bundle_dir(d))

        for file_name in sorted(files):
            if is_hidden_name(file_name):
                continue
            file_path = Path(root, file_name)
            if not is_regular_file(file_path):
                log.debug("non_regular_context_entry_skipped", path=str(file_path))
                continue
            yield file_path
