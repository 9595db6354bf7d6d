"""Subprocess-backed :class:`~ffstage.core.protocols.ProcessRunner`.

Arguments are passed as an argv list, never through a shell, so values
containing spaces or shell metacharacters are not word-split or
interpreted.  The child gets an empty stdin, so an interactive prompt
(ffmpeg asking before it overwrites a file) reads EOF instead of hanging.
The ``command`` string recorded on the outcome is quoted
with :func:`shlex.join` and is for diagnostics only.
"""

from __future__ import annotations

import logging
import shlex
import subprocess  # nosec B404 - running the staged tools is the point
import time
from collections.abc import Sequence
from pathlib import Path

from ffstage.core.models import ProcessOutcome
from ffstage.exceptions import ProcessSpawnError, ProcessTimeoutError

logger = logging.getLogger(__name__)


class SubprocessRunner:
    """Runs a staged tool and captures its text output.

    Parameters
    ----------
    timeout:
        Seconds before the process is killed.  ``None`` waits forever.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    @staticmethod
    def format_command(executable: Path, arguments: Sequence[str]) -> str:
        return shlex.join([str(executable), *arguments])

    def run(self, executable: Path, arguments: Sequence[str]) -> ProcessOutcome:
        """Run *executable* and return exit code, stdout and stderr.

        Raises
        ------
        ProcessSpawnError
            If the executable cannot be launched.
        ProcessTimeoutError
            If it runs longer than the configured timeout.
        """
        command = self.format_command(executable, arguments)
        logger.debug("Running: %s", command)
        started = time.monotonic()

        try:
            completed = subprocess.run(  # nosec B603 - argv list, no shell
                [str(executable), *arguments],
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise ProcessTimeoutError(
                f"{executable.name} did not finish within {self._timeout}s.",
                hint=command,
            ) from exc
        except OSError as exc:
            raise ProcessSpawnError(
                f"Failed to launch {executable}: {exc}",
                hint=command,
            ) from exc

        logger.debug(
            "%s exited with %d after %.2fs",
            executable.name, completed.returncode, time.monotonic() - started,
        )
        return ProcessOutcome(
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            command=command,
        )
