import os
from pathlib import Path
from typing import Union

utf8_bom = b"\xef\xbb\xbf"

def strip_utf8_bom(data: bytes) -> bytes:
    # removes the utf-8 byte order mark from byte data if present.
    if data.startswith(utf8_bom):
        return data[len(utf8_bom):]
    return data

def resolve_cli_path(path: Union[str, Path]) -> Path:
    # makes a user-supplied path absolute against the current working directory.
    # symlinks are left alone so the walker can still tell them apart.
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = Path.cwd() / candidate
    return Path(os.path.normpath(candidate))
