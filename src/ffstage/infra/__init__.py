"""Infrastructure layer: operating-system integration.

This layer wraps the filesystem, subprocess execution and the bundled
ffmpeg/ffprobe binaries.  Every raw ``OSError``, ``subprocess`` or
``json`` exception must be caught here and re-raised as an
:class:`~ffstage.exceptions.FfstageError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from ffstage.infra.ffprobe_provider import FfprobeProvider
from ffstage.infra.local_fs import LocalFileSystem
from ffstage.infra.process_runner import SubprocessRunner
from ffstage.infra.stager import ToolStager
from ffstage.infra.tool_locator import ToolStatus, detect_tool, require_tool

__all__: list[str] = [
    "FfprobeProvider",
    "LocalFileSystem",
    "SubprocessRunner",
    "ToolStager",
    "ToolStatus",
    "detect_tool",
    "require_tool",
]
