"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols, never on concrete
implementations, so every service can be exercised with in-memory
fakes.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol

from ffstage.core.models import ProcessOutcome


class FileSystem(Protocol):
    """Minimal filesystem surface needed by the core services."""

    def is_file(self, path: str | Path) -> bool:
        """Return ``True`` if *path* names an existing regular file."""
        ...  # pragma: no cover

    def file_size(self, path: str | Path) -> int:
        """Return the size of *path* in bytes.

        Raises
        ------
        FileReadError
            When the file cannot be stat-ed.
        """
        ...  # pragma: no cover

    def read_head(self, path: str | Path, length: int) -> bytes:
        """Return exactly the first *length* bytes of *path*.

        Raises
        ------
        FileReadError
            When the file cannot be read or is shorter than *length*.
        """
        ...  # pragma: no cover

    def allocate_temp_file(self, *, prefix: str = "", suffix: str = "") -> Path:
        """Create an empty, uniquely named temp file and return its path."""
        ...  # pragma: no cover

    def copy_file(self, source: Path, destination: Path) -> None:
        ...  # pragma: no cover

    def set_mode(self, path: Path, mode: int) -> None:
        ...  # pragma: no cover


class ExecutableStager(Protocol):
    """Contract for making a bundled tool runnable."""

    def ensure_staged(self, tool_name: str) -> Path:
        """Return an executable path for *tool_name*, staging it if needed.

        Raises
        ------
        StagingError
            When the bundled tool cannot be located or copied.
        StagingPermissionError
            When the staged copy cannot be marked executable.
        """
        ...  # pragma: no cover


class ProcessRunner(Protocol):
    """Pure execution boundary: runs a tool, never interprets its output."""

    def run(self, executable: Path, arguments: Sequence[str]) -> ProcessOutcome:
        """Run *executable* with *arguments* and capture its output.

        A non-zero exit status is reported in the outcome, not raised.

        Raises
        ------
        ProcessSpawnError
            When the process cannot be launched or times out.
        """
        ...  # pragma: no cover


class ProbeProvider(Protocol):
    """Contract for ffprobe backends."""

    def fetch_probe(self, path: str) -> dict[str, Any]:
        """Return the decoded ``-print_format json`` document for *path*.

        The returned dict is expected to contain ``"format"`` and
        ``"streams"`` keys.

        Raises
        ------
        ProbeParseError
            When the tool output cannot be decoded.
        """
        ...  # pragma: no cover
