"""Derived queries over probe output."""

from __future__ import annotations

from ffstage.core.probe_service import ProbeService
from ffstage.exceptions import ProbeParseError


class StreamInspector:
    """Answers small questions about a file using :class:`ProbeService`."""

    def __init__(self, probe_service: ProbeService) -> None:
        self._probe = probe_service

    def get_stream_count(self, path: str) -> int:
        """Return the channel count of the first stream of *path*.

        Probe failures propagate unchanged.

        Raises
        ------
        ProbeParseError
            If the first stream's ``channels`` field is not an integer.
        """
        stream = self._probe.probe(path).first_stream
        channels = stream.channels
        if isinstance(channels, bool):
            channels = None
        if isinstance(channels, int):
            return channels
        if isinstance(channels, str) and channels.strip().isdigit():
            return int(channels)
        raise ProbeParseError(
            f"Stream #{stream.index} of {path} has no numeric channel count "
            f"(got {channels!r}).",
        )

    def get_duration(self, path: str) -> float | None:
        """Return the container duration in seconds, or ``None`` if unknown."""
        raw = self._probe.probe(path).format.get("duration")
        if raw is None:
            return None
        try:
            return float(raw)
        except (TypeError, ValueError):
            return None
