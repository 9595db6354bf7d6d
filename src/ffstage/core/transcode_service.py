"""Core transcode service: the ffmpeg entry point.

Runs the fixed pipeline assemble → stage → execute → stat.  Any failure
before the process runs is raised; failures detected afterwards are
recorded on the returned :class:`InvocationResult` so that the captured
stdout/stderr stay available.

ffmpeg is known to exit 0 on recoverable problems and non-zero on
cosmetic ones, so the exit code alone never decides success: a
produced file of zero bytes is always a failure.  An explicit destination
that already exists is never overwritten; ffmpeg declines and exits
non-zero, leaving the old file in place, which is recorded as
:class:`OutputExistsError` rather than passed off as fresh output.
"""

from __future__ import annotations

import logging

from ffstage.core.models import InputSpec, InvocationResult, OutputSpec
from ffstage.core.parameters import ParameterAssembler
from ffstage.core.protocols import ExecutableStager, FileSystem, ProcessRunner
from ffstage.exceptions import EmptyOutputError, FfstageError, OutputExistsError

logger = logging.getLogger(__name__)

FFMPEG = "ffmpeg"
_EXISTS_MARKER = "already exists"


class TranscodeService:
    """Drives a single ffmpeg invocation.

    Parameters
    ----------
    assembler:
        Builds the argv and resolves the destination.
    stager:
        Provides an executable ffmpeg path.
    runner:
        Executes the staged binary.
    file_system:
        Used to stat the destination after the run.
    """

    def __init__(
        self,
        assembler: ParameterAssembler,
        stager: ExecutableStager,
        runner: ProcessRunner,
        file_system: FileSystem,
    ) -> None:
        self._assembler = assembler
        self._stager = stager
        self._runner = runner
        self._fs = file_system

    def transcode(
        self,
        input_spec: InputSpec | None,
        output_spec: OutputSpec | None = None,
    ) -> InvocationResult:
        """Run ffmpeg for *input_spec* → *output_spec*.

        With no *output_spec* the decode is sent to the null muxer and
        no file is produced.

        Raises
        ------
        MissingInputError, MissingOutputTargetError
            Before anything is staged or spawned.
        StagingError, StagingPermissionError
            When ffmpeg cannot be made runnable.
        ProcessSpawnError
            When ffmpeg cannot be launched or times out.
        """
        invocation = self._assembler.assemble(input_spec, output_spec)
        executable = self._stager.ensure_staged(FFMPEG)
        outcome = self._runner.run(executable, invocation.arguments)

        destination = invocation.destination
        if not destination.produces_file:
            return InvocationResult(
                stdout=outcome.stdout,
                stderr=outcome.stderr,
                command=outcome.command,
                exit_code=outcome.exit_code,
            )

        size = self._stat_output(destination.path)
        error: FfstageError | None = None
        if outcome.exit_code != 0 and _EXISTS_MARKER in outcome.stderr:
            error = OutputExistsError(
                f"Not overwriting existing file {destination.path}",
                hint="Remove it first or choose another output path.",
            )
        elif size < 1:
            error = EmptyOutputError(
                "outputFile was empty. check stdout and stderr for details",
                hint=_last_line(outcome.stderr),
            )
        elif outcome.exit_code != 0:
            logger.warning(
                "ffmpeg exited with %d but produced %d bytes at %s",
                outcome.exit_code, size, destination.path,
            )

        return InvocationResult(
            error=error,
            output_file=destination.path,
            size=size,
            stdout=outcome.stdout,
            stderr=outcome.stderr,
            command=outcome.command,
            exit_code=outcome.exit_code,
        )

    def _stat_output(self, path: str) -> int:
        if not self._fs.is_file(path):
            return 0
        try:
            return self._fs.file_size(path)
        except FfstageError as exc:
            logger.warning("Could not stat %s: %s", path, exc)
            return 0


def _last_line(text: str) -> str | None:
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    return lines[-1] if lines else None
