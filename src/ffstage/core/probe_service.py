"""Core probe service: turns raw ffprobe documents into :class:`ProbeInfo`.

The service depends on a :class:`~ffstage.core.protocols.ProbeProvider`
injected at construction time.  Every call re-invokes the provider; no
results are cached.

Guarantees
----------
* No direct process or filesystem access.
* Only :class:`~ffstage.exceptions.FfstageError` subclasses escape.
* A successful probe always carries at least one stream.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ffstage.core.models import ProbeInfo, StreamInfo
from ffstage.core.protocols import ProbeProvider
from ffstage.exceptions import FfstageError, ProbeParseError


class ProbeService:
    """Stateless service producing :class:`ProbeInfo` for a media file.

    Parameters
    ----------
    provider:
        Any object satisfying the :class:`ProbeProvider` protocol.
    """

    def __init__(self, provider: ProbeProvider) -> None:
        self._provider: ProbeProvider = provider

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def probe(self, path: str) -> ProbeInfo:
        """Probe *path* and describe its container and streams.

        Raises
        ------
        ProbeParseError
            If the document is malformed or lists no streams.
        StagingError
            If ffprobe cannot be staged.
        ProcessSpawnError
            If ffprobe cannot be launched.
        """
        document = self._fetch(path)
        return self.parse_document(document, source=path)

    # ------------------------------------------------------------------
    # Provider delegation (safe boundary)
    # ------------------------------------------------------------------

    def _fetch(self, path: str) -> dict[str, Any]:
        try:
            return self._provider.fetch_probe(path)
        except FfstageError:
            raise
        except Exception as exc:
            raise ProbeParseError(f"Unexpected probe error: {exc}") from exc

    # ------------------------------------------------------------------
    # Raw-dict → domain-model parsers (pure)
    # ------------------------------------------------------------------

    @classmethod
    def parse_document(cls, document: Mapping[str, Any], *, source: str = "") -> ProbeInfo:
        """Convert a decoded ffprobe document into :class:`ProbeInfo`."""
        raw_streams: object = document.get("streams")
        if not isinstance(raw_streams, list):
            raw_streams = []
        streams = tuple(
            cls._parse_stream(entry, position)
            for position, entry in enumerate(raw_streams)
            if isinstance(entry, dict)
        )
        if not streams:
            raise ProbeParseError(
                f"ffprobe reported no streams for {source or 'input'}.",
                hint="The file may be empty, truncated, or not a media file.",
            )

        raw_format: object = document.get("format")
        fmt = dict(raw_format) if isinstance(raw_format, dict) else {}
        return ProbeInfo(format=fmt, streams=streams)

    @staticmethod
    def _parse_stream(raw: dict[str, Any], position: int) -> StreamInfo:
        raw_index = raw.get("index")
        return StreamInfo(
            index=raw_index if isinstance(raw_index, int) else position,
            codec_type=_optional_str(raw.get("codec_type")),
            codec_name=_optional_str(raw.get("codec_name")),
            sample_rate=_optional_int(raw.get("sample_rate")),
            bit_rate=_optional_int(raw.get("bit_rate")),
            channels=raw.get("channels"),
            raw=dict(raw),
        )


def _optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _optional_int(value: object) -> int | None:
    # ffprobe reports rates as decimal strings ("44100").
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None
