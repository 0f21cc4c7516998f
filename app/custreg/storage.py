from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path


class StorageError(RuntimeError):
    pass


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_text_atomic(path: str | Path, text: str, *, encoding: str = "utf-8") -> None:
    """
    Write `text` to `path` all-or-nothing.

    Data goes to a temp file in the destination directory first and is renamed
    over the target only after a successful flush, so readers never observe a
    half-written file. The temp file is removed on any failure.

    The result keeps the target's existing permission bits; a new file gets
    the same mode a plain open() would give it (0666 minus the umask).
    """
    p = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{p.name}.", suffix=".tmp", dir=p.parent)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        if p.exists():
            shutil.copymode(p, tmp_name)
        else:
            os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, p)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
