"""ffprobe-backed :class:`~ffstage.core.protocols.ProbeProvider`.

This module is the only place that runs ffprobe.  Decode failures are
re-raised as :class:`~ffstage.exceptions.ProbeParseError`; nothing raw
escapes the infrastructure boundary.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ffstage.core.protocols import ExecutableStager, ProcessRunner
from ffstage.exceptions import ProbeParseError

logger = logging.getLogger(__name__)

FFPROBE = "ffprobe"

PROBE_ARGUMENTS: tuple[str, ...] = (
    "-v", "quiet",
    "-print_format", "json",
    "-show_format",
    "-show_streams",
)


class FfprobeProvider:
    """Stages ffprobe on demand and returns its JSON document."""

    def __init__(self, stager: ExecutableStager, runner: ProcessRunner) -> None:
        self._stager = stager
        self._runner = runner

    def fetch_probe(self, path: str) -> dict[str, Any]:
        """Probe *path* and return the decoded document.

        Raises
        ------
        ProbeParseError
            When ffprobe prints nothing or something that is not a JSON
            object.
        """
        executable = self._stager.ensure_staged(FFPROBE)
        outcome = self._runner.run(executable, [*PROBE_ARGUMENTS, path])

        if not outcome.stdout.strip():
            raise ProbeParseError(
                f"ffprobe produced no output for {path} (exit {outcome.exit_code}).",
                hint=outcome.stderr.strip() or None,
            )
        try:
            document: Any = json.loads(outcome.stdout)
        except json.JSONDecodeError as exc:
            raise ProbeParseError(f"Invalid ffprobe output for {path}: {exc}") from exc

        if not isinstance(document, dict):
            raise ProbeParseError("ffprobe returned an unexpected data structure.")
        if outcome.exit_code != 0:
            logger.warning("ffprobe exited with %d for %s", outcome.exit_code, path)
        return document
