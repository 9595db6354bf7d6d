"""Wiring of the concrete object graph.

:func:`build_toolkit` is the one place that pairs core services with
their infrastructure adapters.  Each toolkit owns its own
:class:`~ffstage.infra.stager.ToolStager`, so the staged-path memo is
shared by everything built from the same toolkit and by nothing else.
"""

from __future__ import annotations

from dataclasses import dataclass

from ffstage.config import Settings
from ffstage.core.parameters import ParameterAssembler
from ffstage.core.probe_service import ProbeService
from ffstage.core.rates import RateParameterGenerator
from ffstage.core.stream_inspector import StreamInspector
from ffstage.core.transcode_service import TranscodeService
from ffstage.core.validation import ContentValidator
from ffstage.infra.ffprobe_provider import FfprobeProvider
from ffstage.infra.local_fs import LocalFileSystem
from ffstage.infra.process_runner import SubprocessRunner
from ffstage.infra.stager import ToolStager


@dataclass(frozen=True, slots=True)
class Toolkit:
    settings: Settings
    stager: ToolStager
    transcoder: TranscodeService
    probe: ProbeService
    inspector: StreamInspector
    validator: ContentValidator

    def rate_generator(self) -> RateParameterGenerator:
        """Return a fresh generator for manual rate negotiation."""
        return RateParameterGenerator(self.probe)


def build_toolkit(settings: Settings | None = None) -> Toolkit:
    """Build a ready-to-use :class:`Toolkit` from *settings*.

    ``None`` reads settings from the environment.
    """
    settings = settings if settings is not None else Settings.from_env()

    file_system = LocalFileSystem()
    stager = ToolStager(file_system, settings.bin_dir)
    runner = SubprocessRunner(timeout=settings.process_timeout)

    probe = ProbeService(FfprobeProvider(stager, runner))
    assembler = ParameterAssembler(file_system, lambda: RateParameterGenerator(probe))
    transcoder = TranscodeService(assembler, stager, runner, file_system)

    return Toolkit(
        settings=settings,
        stager=stager,
        transcoder=transcoder,
        probe=probe,
        inspector=StreamInspector(probe),
        validator=ContentValidator(file_system, transcoder),
    )
