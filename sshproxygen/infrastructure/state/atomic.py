"""
Atomic file replacement
"""
import os
import tempfile
from pathlib import Path
from typing import Optional


def write_atomic(
    path: Path,
    data: str,
    mode: Optional[int] = None,
    errors: str = "strict",
) -> None:
    """
    Replace path with data without ever exposing a partial file.

    Line endings are written exactly as they appear in data. The
    content goes to a temporary file in the same directory, is
    fsynced, then renamed over path. On failure the temporary file is
    removed and path is left as it was.

    Args:
        path: Destination file
        data: Text content
        mode: Permission bits for the new file (default: keep the
            existing file's mode, or 0o644 for a new file)
        errors: Encoding error handler, "surrogateescape" writes back
            bytes that were read undecoded

    Raises:
        OSError: If any step fails
    """
    path = Path(path)
    if mode is None:
        try:
            mode = path.stat().st_mode & 0o7777
        except FileNotFoundError:
            mode = 0o644

    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", errors=errors, newline="") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp, mode)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
        raise
