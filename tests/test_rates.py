"""Tests for rate negotiation (core/rates.py).

The probe service is mocked; each test describes the first stream of a
hypothetical source.

Coverage:
* ``match_source`` records rates and rejects streams without a rate.
* Forced / floor / source precedence.
* Bit-rate vs. PCM-codec branches, including endianness swaps.
* Compressed or unknown targets never receive a PCM codec.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from ffstage.core.models import ProbeInfo, StreamInfo
from ffstage.core.rates import (
    DEFAULT_BIT_RATE,
    DEFAULT_SAMPLE_RATE,
    RateParameterGenerator,
    is_pcm_codec,
    swap_endianness,
)
from ffstage.exceptions import ProbeParseError, RateMatchError


def _generator(**stream_fields: object) -> RateParameterGenerator:
    defaults: dict[str, object] = {
        "index": 0,
        "codec_type": "audio",
        "codec_name": "pcm_s16be",
        "sample_rate": 44100,
        "bit_rate": 1_411_200,
        "channels": 2,
    }
    defaults.update(stream_fields)
    probe = MagicMock()
    probe.probe.return_value = ProbeInfo(
        format={}, streams=(StreamInfo(**defaults),),  # type: ignore[arg-type]
    )
    generator = RateParameterGenerator(probe)
    generator.match_source("source.aiff")
    return generator


# ---------------------------------------------------------------------------
# match_source
# ---------------------------------------------------------------------------

class TestMatchSource:
    def test_records_first_stream(self) -> None:
        generator = _generator(codec_name="mp3", sample_rate=22050, bit_rate=64000)
        assert generator.source is not None
        assert generator.source.sample_rate == 22050
        assert generator.source.bit_rate == 64000
        assert generator.source.codec_name == "mp3"

    def test_missing_sample_rate(self) -> None:
        with pytest.raises(RateMatchError, match="no sample rate"):
            _generator(codec_type="video", codec_name="h264", sample_rate=None)

    def test_probe_errors_propagate(self) -> None:
        probe = MagicMock()
        probe.probe.side_effect = ProbeParseError("bad")
        with pytest.raises(ProbeParseError):
            RateParameterGenerator(probe).match_source("x.wav")


# ---------------------------------------------------------------------------
# PCM sources
# ---------------------------------------------------------------------------

class TestPcmTargets:
    def test_wav_converts_big_endian_to_little(self) -> None:
        assert _generator().generate_parameters("wav") == ["-ar", "44100", "-c:a", "pcm_s16le"]

    def test_aiff_converts_little_endian_to_big(self) -> None:
        generator = _generator(codec_name="pcm_s24le", sample_rate=48000)
        assert generator.generate_parameters("aiff") == ["-ar", "48000", "-c:a", "pcm_s24be"]

    def test_caf_keeps_source_codec(self) -> None:
        assert _generator().generate_parameters("caf") == ["-ar", "44100", "-c:a", "pcm_s16be"]

    @pytest.mark.parametrize("target", ["flac", "mp4", "mkv", ""])
    def test_compressed_or_unknown_target_uses_bit_rate(self, target: str) -> None:
        arguments = _generator(codec_name="pcm_s16le").generate_parameters(target)
        assert arguments == ["-ar", "44100", "-b:a", "1411200"]
        assert "-c:a" not in arguments

    def test_forced_codec_wins(self) -> None:
        generator = _generator()
        generator.set_codec("pcm_f32le")
        assert generator.generate_parameters("wav")[-1] == "pcm_f32le"

    def test_no_bit_rate_flag_for_pcm(self) -> None:
        assert "-b:a" not in _generator().generate_parameters("wav")

    def test_pcm_into_lossy_uses_bit_rate(self) -> None:
        generator = _generator(codec_name="pcm_s16le")
        generator.set_floor_bit_rate(320_000)
        assert generator.generate_parameters("mp3") == ["-ar", "44100", "-b:a", "320000"]


# ---------------------------------------------------------------------------
# Compressed sources
# ---------------------------------------------------------------------------

class TestLossySources:
    def test_mp3_source_emits_rate_and_bit_rate(self) -> None:
        generator = _generator(codec_name="mp3", sample_rate=44100, bit_rate=128000)
        assert generator.generate_parameters("wav") == ["-ar", "44100", "-b:a", "128000"]

    def test_floor_caps_source(self) -> None:
        generator = _generator(codec_name="aac", sample_rate=96000, bit_rate=256000)
        generator.set_floor_sample_rate(44100)
        generator.set_floor_bit_rate(128000)
        assert generator.resolve("mp3").sample_rate == 44100
        assert generator.resolve("mp3").bit_rate == 128000

    def test_floor_above_source_keeps_source(self) -> None:
        generator = _generator(codec_name="aac", sample_rate=22050, bit_rate=64000)
        generator.set_floor_sample_rate(44100)
        assert generator.resolve("mp3").sample_rate == 22050

    def test_forced_beats_floor(self) -> None:
        generator = _generator(codec_name="aac", sample_rate=96000, bit_rate=256000)
        generator.set_floor_sample_rate(44100)
        generator.set_sample_rate(8000)
        generator.set_bit_rate(32000)
        assert generator.generate_parameters("mp3") == ["-ar", "8000", "-b:a", "32000"]

    def test_unknown_bit_rate_is_omitted(self) -> None:
        generator = _generator(codec_name="vorbis", bit_rate=None)
        assert generator.generate_parameters("ogg") == ["-ar", "44100"]


# ---------------------------------------------------------------------------
# Defaults and helpers
# ---------------------------------------------------------------------------

class TestDefaults:
    def test_unmatched_generator_uses_defaults(self) -> None:
        generator = RateParameterGenerator(MagicMock())
        assert generator.generate_parameters("mp3") == [
            "-ar", str(DEFAULT_SAMPLE_RATE), "-b:a", str(DEFAULT_BIT_RATE),
        ]

    def test_default_units(self) -> None:
        assert DEFAULT_SAMPLE_RATE == 48_000
        assert DEFAULT_BIT_RATE == 320_000


class TestHelpers:
    @pytest.mark.parametrize(
        ("codec", "little", "expected"),
        [
            ("pcm_s16be", True, "pcm_s16le"),
            ("pcm_s16le", True, "pcm_s16le"),
            ("pcm_f32le", False, "pcm_f32be"),
            ("pcm_u8", True, "pcm_u8"),
        ],
    )
    def test_swap_endianness(self, codec: str, little: bool, expected: str) -> None:
        assert swap_endianness(codec, little=little) == expected

    def test_is_pcm_codec(self) -> None:
        assert is_pcm_codec("pcm_s16le")
        assert not is_pcm_codec("mp3")
        assert not is_pcm_codec(None)
