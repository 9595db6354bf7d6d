"""Runtime settings read from ``FFSTAGE_*`` environment variables.

``Settings.from_env`` accepts an optional mapping so tests never need to
touch :data:`os.environ`.

==================  ===========================================  =========
Variable            Meaning                                      Default
==================  ===========================================  =========
FFSTAGE_BIN_DIR     Directory holding bundled ffmpeg/ffprobe     (unset)
FFSTAGE_TIMEOUT     Per-process timeout in seconds; 0 disables   300
FFSTAGE_LOG_LEVEL   debug / info / warning / error               warning
==================  ===========================================  =========
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from ffstage.exceptions import ConfigError

DEFAULT_TIMEOUT: float = 300.0
LOG_LEVELS: tuple[str, ...] = ("debug", "info", "warning", "error")


@dataclass(frozen=True, slots=True)
class Settings:
    bin_dir: Path | None = None
    process_timeout: float | None = DEFAULT_TIMEOUT
    log_level: str = "warning"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Build settings from *env* (defaults to :data:`os.environ`).

        Raises
        ------
        ConfigError
            If a variable is set to an unparsable value.
        """
        source: Mapping[str, str] = env if env is not None else os.environ

        raw_bin_dir = source.get("FFSTAGE_BIN_DIR", "").strip()
        bin_dir = Path(raw_bin_dir).expanduser() if raw_bin_dir else None

        return cls(
            bin_dir=bin_dir,
            process_timeout=_parse_timeout(source.get("FFSTAGE_TIMEOUT")),
            log_level=_parse_log_level(source.get("FFSTAGE_LOG_LEVEL")),
        )


def _parse_timeout(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(
            f"FFSTAGE_TIMEOUT must be a number of seconds, got {raw!r}.",
        ) from exc
    if value < 0:
        raise ConfigError(f"FFSTAGE_TIMEOUT must not be negative, got {raw!r}.")
    return value or None


def _parse_log_level(raw: str | None) -> str:
    if raw is None or not raw.strip():
        return "warning"
    level = raw.strip().casefold()
    if level not in LOG_LEVELS:
        raise ConfigError(
            f"FFSTAGE_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}; got {raw!r}.",
        )
    return level
