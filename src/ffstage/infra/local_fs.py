"""Local-disk implementation of :class:`~ffstage.core.protocols.FileSystem`.

Temp files are created with :func:`tempfile.mkstemp` in the system temp
directory (the only writable location on most serverless hosts) and are
never deleted here; cleanup is left to the host.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

from ffstage.exceptions import FileReadError


class LocalFileSystem:
    """Concrete :class:`FileSystem` backed by :mod:`os` and :mod:`shutil`.

    Parameters
    ----------
    temp_dir:
        Directory for generated files.  ``None`` uses the platform default.
    """

    def __init__(self, temp_dir: Path | None = None) -> None:
        self._temp_dir = temp_dir

    def is_file(self, path: str | Path) -> bool:
        return Path(path).is_file()

    def file_size(self, path: str | Path) -> int:
        try:
            return os.stat(path).st_size
        except OSError as exc:
            raise FileReadError(f"Cannot stat {path}: {exc}") from exc

    def read_head(self, path: str | Path, length: int) -> bytes:
        try:
            with open(path, "rb") as handle:
                head = handle.read(length)
        except OSError as exc:
            raise FileReadError(f"Cannot read {path}: {exc}") from exc
        if len(head) < length:
            raise FileReadError(
                f"{path} is {len(head)} bytes long; expected at least {length}.",
            )
        return head

    def allocate_temp_file(self, *, prefix: str = "", suffix: str = "") -> Path:
        fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=self._temp_dir)
        os.close(fd)
        return Path(name)

    def copy_file(self, source: Path, destination: Path) -> None:
        shutil.copyfile(source, destination)

    def set_mode(self, path: Path, mode: int) -> None:
        os.chmod(path, mode)
