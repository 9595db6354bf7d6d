"""Infrastructure: one-time staging of bundled executables.

Bundled binaries usually live on a read-only or ``noexec`` mount.  Before
first use each tool is copied to a fresh temp file and made executable;
the resulting path is memoized for the lifetime of the stager and only
re-staged if the file disappears (e.g. temp cleanup by the host).

First-time staging of a given tool is serialized by a per-tool lock, so
concurrent callers never produce duplicate copies.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from ffstage.core.protocols import FileSystem
from ffstage.exceptions import StagingError, StagingPermissionError
from ffstage.infra.tool_locator import require_tool

logger = logging.getLogger(__name__)

STAGED_MODE = 0o777


class ToolStager:
    """Concrete :class:`~ffstage.core.protocols.ExecutableStager`.

    Parameters
    ----------
    file_system:
        Used for existence checks, temp allocation, copy and chmod.
    bin_dir:
        Preferred directory holding the bundled binaries.
    """

    def __init__(self, file_system: FileSystem, bin_dir: Path | None = None) -> None:
        self._fs = file_system
        self._bin_dir = bin_dir
        self._staged: dict[str, Path] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def ensure_staged(self, tool_name: str) -> Path:
        """Return a runnable copy of *tool_name*, staging it on first use.

        Raises
        ------
        StagingError
            If the tool cannot be located or copied.
        StagingPermissionError
            If the copy cannot be marked executable.
        """
        with self._lock_for(tool_name):
            current = self._staged.get(tool_name)
            if current is not None and self._fs.is_file(current):
                return current
            if current is not None:
                logger.info("Staged %s at %s disappeared; re-staging.", tool_name, current)

            staged = self._stage(tool_name)
            self._staged[tool_name] = staged
            return staged

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def staged_path(self, tool_name: str) -> Path | None:
        return self._staged.get(tool_name)

    def forget(self, tool_name: str) -> None:
        with self._lock_for(tool_name):
            self._staged.pop(tool_name, None)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _lock_for(self, tool_name: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(tool_name, threading.Lock())

    def _stage(self, tool_name: str) -> Path:
        source = require_tool(tool_name, self._bin_dir)
        try:
            destination = self._fs.allocate_temp_file(prefix=f"{tool_name}-")
            self._fs.copy_file(source, destination)
        except OSError as exc:
            raise StagingError(
                f"Failed to copy {tool_name} from {source}: {exc}",
                hint="Check free space and permissions of the temp directory.",
            ) from exc

        try:
            self._fs.set_mode(destination, STAGED_MODE)
        except OSError as exc:
            raise StagingPermissionError(
                f"Failed to mark {destination} executable: {exc}",
                hint="The temp directory may be mounted noexec.",
            ) from exc

        logger.debug("Staged %s from %s to %s", tool_name, source, destination)
        return destination
