import os
import stat
import sys
import tempfile
from pathlib import Path
import structlog
from barsmith.exceptions import OutputError

log = structlog.get_logger(__name__)

def write_to_stdout(text_content: str, trailing_newline: bool = True):
    # writes rendered text to standard output, newline-terminated like print().
    if trailing_newline:
        text_content += "\n"
    try:
        sys.stdout.write(text_content)
        sys.stdout.flush()
    except UnicodeEncodeError as e:
        log.warning("stdout_write_failed_trying_binary_fallback", error=str(e))
        sys.stdout.buffer.write(text_content.encode("utf-8", errors="replace"))
        sys.stdout.buffer.flush()

def _output_file_mode(output_file_path: Path) -> int:
    # an existing file keeps its permissions; a new one gets 0o666 minus the umask.
    try:
        return stat.S_IMODE(output_file_path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask

def write_to_file(output_file_path: Path, text_content: str):
    # writes text verbatim through a temp file in the same directory, so a
    # failed write never leaves a partial output file behind.
    log.info("writing_output_to_file", path=str(output_file_path))
    tmp_name = None
    try:
        output_file_path.parent.mkdir(parents=True, exist_ok=True)
        mode = _output_file_mode(output_file_path)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{output_file_path.name}.", dir=str(output_file_path.parent))
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
            tmp.write(text_content)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, output_file_path)
    except OSError as e:
        raise OutputError(f"failed to write to file '{output_file_path}': {e}") from e
    finally:
        if tmp_name and os.path.exists(tmp_name):
            os.remove(tmp_name)
