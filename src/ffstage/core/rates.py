"""Rate matching: derive output sample/bit-rate flags from the source.

Encoders are parameterized by bit rate, uncompressed PCM containers by
sample format and endianness.  :meth:`RateParameterGenerator.resolve`
emits ``-ar``/``-c:a`` only for a PCM source feeding one of
:data:`UNCOMPRESSED_TARGETS`; every other target (lossy, lossless
compressed such as FLAC, generic containers, or no extension at all)
gets ``-ar``/``-b:a``.

A generator is created per invocation; its override and floor settings
must be applied before :meth:`~RateParameterGenerator.resolve`.
"""

from __future__ import annotations

import logging

from ffstage.core.models import RateParameters, SourceRates
from ffstage.core.probe_service import ProbeService
from ffstage.exceptions import RateMatchError

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE: int = 48_000
"""Fallback sample rate (Hz) used when the source cannot be probed."""

DEFAULT_BIT_RATE: int = 320_000
"""Fallback bit rate (bits/s) used when the source cannot be probed."""

LITTLE_ENDIAN_TARGETS: frozenset[str] = frozenset({"wav"})
BIG_ENDIAN_TARGETS: frozenset[str] = frozenset({"aiff", "aif", "aifc"})
UNCOMPRESSED_TARGETS: frozenset[str] = (
    LITTLE_ENDIAN_TARGETS | BIG_ENDIAN_TARGETS | frozenset({"caf", "au", "w64"})
)

PCM_PREFIX = "pcm_"


def is_pcm_codec(codec_name: str | None) -> bool:
    return codec_name is not None and codec_name.startswith(PCM_PREFIX)


def swap_endianness(codec_name: str, *, little: bool) -> str:
    """Return the ``le``/``be`` counterpart of a PCM codec name.

    Codecs without an endianness suffix (``pcm_u8``) are returned as-is.
    """
    if little and codec_name.endswith("be"):
        return codec_name[:-2] + "le"
    if not little and codec_name.endswith("le"):
        return codec_name[:-2] + "be"
    return codec_name


class RateParameterGenerator:
    """Resolve output rate flags from a probed source plus overrides.

    Parameters
    ----------
    probe_service:
        Used by :meth:`match_source` to read the first stream.
    """

    def __init__(self, probe_service: ProbeService) -> None:
        self._probe = probe_service
        self._source: SourceRates | None = None

        self._floor_sample_rate: int | None = None
        self._floor_bit_rate: int | None = None
        self._forced_sample_rate: int | None = None
        self._forced_bit_rate: int | None = None
        self._forced_codec: str | None = None

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_floor_sample_rate(self, value: int | None) -> None:
        """Cap the source sample rate: the smaller of the two wins."""
        self._floor_sample_rate = value

    def set_floor_bit_rate(self, value: int | None) -> None:
        """Cap the source bit rate: the smaller of the two wins."""
        self._floor_bit_rate = value

    def set_sample_rate(self, value: int | None) -> None:
        self._forced_sample_rate = value

    def set_bit_rate(self, value: int | None) -> None:
        self._forced_bit_rate = value

    def set_codec(self, value: str | None) -> None:
        self._forced_codec = value

    @property
    def source(self) -> SourceRates | None:
        return self._source

    # ------------------------------------------------------------------
    # Source capture
    # ------------------------------------------------------------------

    def match_source(self, path: str) -> SourceRates:
        """Probe *path* and record its first stream's rates and codec.

        Raises
        ------
        RateMatchError
            If the first stream carries no sample rate.
        ProbeParseError
            If probing fails.
        """
        stream = self._probe.probe(path).first_stream
        if stream.sample_rate is None:
            raise RateMatchError(
                f"First stream of {path} has no sample rate.",
                hint="Rate matching only applies to audio sources.",
            )
        self._source = SourceRates(
            sample_rate=stream.sample_rate,
            bit_rate=stream.bit_rate,
            codec_name=stream.codec_name,
        )
        logger.debug("Matched source rates for %s: %s", path, self._source)
        return self._source

    def use_defaults(self) -> SourceRates:
        """Record the fallback rates as if they had been probed."""
        self._source = SourceRates(
            sample_rate=DEFAULT_SAMPLE_RATE,
            bit_rate=DEFAULT_BIT_RATE,
            codec_name=None,
        )
        return self._source

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, target_format: str) -> RateParameters:
        """Compute the effective rates and codec for *target_format*."""
        source = self._source if self._source is not None else self.use_defaults()
        target = target_format.lower().lstrip(".")

        sample_rate = _effective(
            source.sample_rate, self._floor_sample_rate, self._forced_sample_rate,
        )
        bit_rate = _effective(
            source.bit_rate, self._floor_bit_rate, self._forced_bit_rate,
        )

        if target not in UNCOMPRESSED_TARGETS or not is_pcm_codec(source.codec_name):
            return RateParameters(sample_rate=sample_rate, bit_rate=bit_rate, codec_name=None)

        return RateParameters(
            sample_rate=sample_rate,
            bit_rate=None,
            codec_name=self._resolve_codec(source.codec_name, target),
        )

    def generate_parameters(self, target_format: str) -> list[str]:
        """Return the ffmpeg argument fragment for *target_format*."""
        return self.resolve(target_format).arguments()

    def _resolve_codec(self, source_codec: str | None, target: str) -> str | None:
        if self._forced_codec:
            return self._forced_codec
        if source_codec is None:
            return None
        if target in LITTLE_ENDIAN_TARGETS:
            return swap_endianness(source_codec, little=True)
        if target in BIG_ENDIAN_TARGETS:
            return swap_endianness(source_codec, little=False)
        return source_codec


def _effective(source: int | None, floor: int | None, forced: int | None) -> int | None:
    if forced is not None:
        return forced
    if floor is not None and source is not None:
        return min(floor, source)
    if source is None:
        return floor
    return source
