"""Writing generated source to disk.

Each file is written to a temporary sibling first and then renamed over the
target, so a crash never leaves a half-written ``.ts`` file behind. This
protects individual files only; a split run that fails part way through
keeps the files it already wrote.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from openapi_typegen.exceptions import OutputWriteError


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* via temp file + ``os.replace``.

    The temp file lives in the target directory so the rename stays on one
    filesystem. It is removed again on any failure.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
            newline="\n",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


def write_text_file(path: Union[str, Path], content: str) -> Path:
    """Write generated *content* to *path*, creating parent directories.

    Returns:
        The path written, as a :class:`~pathlib.Path`.

    Raises:
        OutputWriteError: If the directory cannot be created or the file
            cannot be written.
    """
    target = Path(path)
    try:
        _atomic_write(target, content)
    except OSError as exc:
        raise OutputWriteError(f"Cannot write {target}: {exc}") from exc
    return target
