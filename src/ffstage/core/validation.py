"""Content validation: "is this file really format X?".

Two families of checks:

* **Magic bytes**: compare the first four bytes against a container
  signature.  No process is spawned.
* **Decode-and-rescan**: run ffmpeg against the null muxer and read its
  diagnostics (MP3 only).

A negative answer is a :class:`ValidationResult`, never an exception.
Exceptions are reserved for genuine I/O, staging, or spawn failures.
"""

from __future__ import annotations

import logging

from ffstage.core.diagnostics import summarize_diagnostics
from ffstage.core.models import InputSpec, ValidationResult
from ffstage.core.protocols import FileSystem
from ffstage.core.transcode_service import TranscodeService

logger = logging.getLogger(__name__)

AIFF_SIGNATURE = b"FORM"
WAV_SIGNATURE = b"RIFF"

MP3_STREAM_MARKER = "Stream #0:0 -> #0:0 (mp3 "

ERROR_PASS_PARAMETERS: tuple[str, ...] = ("-v", "error")
INFO_PASS_PARAMETERS: tuple[str, ...] = ("-v", "info")

SUPPORTED_FORMATS: tuple[str, ...] = ("mp3", "wav", "aiff")


class ContentValidator:
    """Classifies files by signature or by an ffmpeg decode pass."""

    def __init__(self, file_system: FileSystem, transcoder: TranscodeService) -> None:
        self._fs = file_system
        self._transcoder = transcoder

    # ------------------------------------------------------------------
    # Magic bytes
    # ------------------------------------------------------------------

    def has_signature(self, path: str, signature: bytes) -> bool:
        """Raises :class:`FileReadError` for files shorter than *signature*."""
        return self._fs.read_head(path, len(signature)) == signature

    def is_aiff_file(self, path: str) -> bool:
        return self.has_signature(path, AIFF_SIGNATURE)

    def is_wav_file(self, path: str) -> bool:
        return self.has_signature(path, WAV_SIGNATURE)

    # ------------------------------------------------------------------
    # Decode-and-rescan
    # ------------------------------------------------------------------

    def is_mp3_file(self, path: str) -> ValidationResult:
        """Decode *path* twice and decide whether it is a genuine MP3.

        The first pass (error verbosity) must produce no diagnostics
        once benign noise is filtered out.  The second pass (info
        verbosity) must map an ``mp3`` input stream.
        """
        error_pass = self._transcoder.transcode(InputSpec(path, ERROR_PASS_PARAMETERS))
        summary = summarize_diagnostics(error_pass.stderr, path)
        if summary:
            logger.debug("%s failed the mp3 decode pass: %s", path, summary)
            return ValidationResult(valid=False, detail=summary)

        info_pass = self._transcoder.transcode(InputSpec(path, INFO_PASS_PARAMETERS))
        if MP3_STREAM_MARKER not in info_pass.stderr:
            return ValidationResult(
                valid=False,
                detail="File decodes cleanly but contains no mp3 audio stream.",
            )
        return ValidationResult(valid=True)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def validate(self, path: str, format_name: str) -> ValidationResult:
        """Run the check matching *format_name* (``mp3``, ``wav``, ``aiff``)."""
        name = format_name.lower().lstrip(".")
        if name == "mp3":
            return self.is_mp3_file(path)
        if name == "wav":
            if self.is_wav_file(path):
                return ValidationResult(valid=True)
            return ValidationResult(valid=False, detail="Missing RIFF header.")
        if name in ("aiff", "aif"):
            if self.is_aiff_file(path):
                return ValidationResult(valid=True)
            return ValidationResult(valid=False, detail="Missing FORM header.")
        raise ValueError(
            f"Unsupported format {format_name!r}; expected one of {SUPPORTED_FORMATS}."
        )
