"""Domain models for ffstage.

All models are **frozen** dataclasses: immutable value objects with no
behaviour beyond data access and small derived helpers.  They carry zero
I/O and no dependencies on external packages.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ffstage.exceptions import FfstageError


# ---------------------------------------------------------------------------
# Invocation specs
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class InputSpec:
    """Source file plus the flags that precede ``-i``."""

    path: str
    """Path to an existing regular file."""

    parameters: tuple[str, ...] = ()
    """Input-side ffmpeg flags, in order (e.g. ``("-v", "error")``)."""


@dataclass(frozen=True, slots=True)
class OutputSpec:
    """Destination description for a transcode.

    Exactly one of :attr:`path` / :attr:`postfix` decides where the
    result goes.  When both are set, :attr:`path` wins.
    """

    path: str | None = None
    """Explicit destination.  Used as-is; no ``-y`` is emitted."""

    postfix: str | None = None
    """Suffix for a generated temp destination (e.g. ``".mp3"``)."""

    parameters: tuple[str, ...] = ()
    """Output-side ffmpeg flags, appended before the destination."""

    match_input_rates: bool = False
    """Probe the input and derive rate/codec flags from it."""


# ---------------------------------------------------------------------------
# Destination resolution
# ---------------------------------------------------------------------------

class DestinationKind(enum.Enum):
    EXPLICIT = "explicit"
    GENERATED = "generated"
    DISCARD = "discard"


NULL_SINK_ARGUMENTS: tuple[str, ...] = ("-f", "null", "-")


@dataclass(frozen=True, slots=True)
class Destination:
    """Where ffmpeg writes, and whether it must be told to overwrite."""

    kind: DestinationKind
    path: str = ""

    @property
    def overwrite(self) -> bool:
        # A generated path already exists as an empty placeholder.
        return self.kind is DestinationKind.GENERATED

    @property
    def produces_file(self) -> bool:
        return self.kind is not DestinationKind.DISCARD

    def arguments(self) -> list[str]:
        """Trailing argv fragment for this destination."""
        if self.kind is DestinationKind.DISCARD:
            return list(NULL_SINK_ARGUMENTS)
        prefix = ["-y"] if self.overwrite else []
        return [*prefix, self.path]


@dataclass(frozen=True, slots=True)
class AssembledInvocation:
    arguments: tuple[str, ...]
    destination: Destination


# ---------------------------------------------------------------------------
# Process / invocation results
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ProcessOutcome:
    """Raw result of one tool execution.  No interpretation applied."""

    exit_code: int
    stdout: str
    stderr: str
    command: str


@dataclass(frozen=True, slots=True)
class InvocationResult:
    """Outcome of :meth:`TranscodeService.transcode`.

    ``error`` is ``None`` on success.  It is set for failures detected
    *after* the process ran, so the captured output stays available for
    diagnostics.
    """

    error: FfstageError | None = None
    output_file: str = ""
    size: int = 0
    stdout: str = ""
    stderr: str = ""
    command: str = ""
    exit_code: int | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        """Raise :attr:`error` if one was recorded."""
        if self.error is not None:
            raise self.error


# ---------------------------------------------------------------------------
# Probe data
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class StreamInfo:
    """One elementary stream as reported by ffprobe."""

    index: int
    codec_type: str | None
    codec_name: str | None
    sample_rate: int | None
    """Samples per second, or ``None`` if the stream has no audio rate."""

    bit_rate: int | None
    channels: Any
    """Channel count as reported.  Usually ``int``; left raw for validation."""

    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class ProbeInfo:
    """Container metadata plus an ordered, non-empty stream tuple."""

    format: Mapping[str, Any]
    streams: tuple[StreamInfo, ...]

    @property
    def first_stream(self) -> StreamInfo:
        return self.streams[0]

    def __len__(self) -> int:
        return len(self.streams)


# ---------------------------------------------------------------------------
# Rate negotiation
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SourceRates:
    """Rates recorded from the first stream of a probed source."""

    sample_rate: int
    bit_rate: int | None
    codec_name: str | None


@dataclass(frozen=True, slots=True)
class RateParameters:
    """Resolved output rate flags for one target format."""

    sample_rate: int
    bit_rate: int | None
    codec_name: str | None
    """Set only for PCM sources feeding an uncompressed target."""

    def arguments(self) -> list[str]:
        args = ["-ar", str(self.sample_rate)]
        if self.codec_name is not None:
            args.extend(["-c:a", self.codec_name])
        elif self.bit_rate is not None:
            args.extend(["-b:a", str(self.bit_rate)])
        return args


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Answer to "is this file really format X?"."""

    valid: bool
    detail: str | None = None
    """Human-readable reason when :attr:`valid` is false."""

    def __bool__(self) -> bool:
        return self.valid


def target_format_of(path: str | Path) -> str:
    """Return the lower-cased extension of *path* without the dot.

    A bare postfix such as ``".mp3"`` counts as an extension.
    """
    name = Path(path).name
    _, dot, extension = name.rpartition(".")
    return extension.lower() if dot else ""
