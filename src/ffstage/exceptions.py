"""Custom exception hierarchy for ffstage.

All exceptions that cross layer boundaries must inherit from
:class:`FfstageError`.  Raw ``OSError``, ``subprocess`` and ``json``
exceptions must NEVER propagate beyond the infrastructure layer; they
are caught there and re-raised as a typed subclass defined here.

A negative content check ("this is not an MP3") is *not* an error; it is
returned as a :class:`~ffstage.core.models.ValidationResult`.

Hierarchy
---------
FfstageError
├── ConfigError
├── MissingInputError
├── MissingOutputTargetError
├── StagingError
│   └── ToolNotFoundError
├── StagingPermissionError
├── ProcessSpawnError
│   └── ProcessTimeoutError
├── EmptyOutputError
├── OutputExistsError
├── ProbeParseError
├── RateMatchError
├── FileReadError
└── EnvironmentError
"""

from __future__ import annotations


class FfstageError(Exception):
    """Base exception for all ffstage errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Configuration ---------------------------------------------------------

class ConfigError(FfstageError):
    """Raised when an ``FFSTAGE_*`` environment variable cannot be parsed."""


# --- Invocation assembly ---------------------------------------------------

class MissingInputError(FfstageError):
    """Raised when the input path is unset or does not name an existing file."""


class MissingOutputTargetError(FfstageError):
    """Raised when an output spec carries neither a path nor a postfix."""


# --- Staging ---------------------------------------------------------------

class StagingError(FfstageError):
    """Raised when a bundled tool cannot be copied into the temp directory."""


class ToolNotFoundError(StagingError):
    """Raised when no bundled or PATH copy of a tool can be located."""


class StagingPermissionError(FfstageError):
    """Raised when a staged tool cannot be marked executable."""


# --- Process execution -----------------------------------------------------

class ProcessSpawnError(FfstageError):
    """Raised when a staged tool cannot be launched."""


class ProcessTimeoutError(ProcessSpawnError):
    """Raised when a tool does not finish within the configured timeout."""


class EmptyOutputError(FfstageError):
    """Recorded when the destination file exists but holds zero bytes."""


class OutputExistsError(FfstageError):
    """Recorded when ffmpeg declines to overwrite an existing destination."""


# --- Probing ---------------------------------------------------------------

class ProbeParseError(FfstageError):
    """Raised when ffprobe output is missing, malformed, or has no streams."""


class RateMatchError(FfstageError):
    """Raised when the source stream does not expose a sample rate."""


# --- Content inspection ----------------------------------------------------

class FileReadError(FfstageError):
    """Raised when a file cannot be read or is shorter than a signature."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(FfstageError):
    """Raised when an optional runtime dependency is not available."""
