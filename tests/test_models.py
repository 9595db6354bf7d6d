"""Tests for domain models (core/models.py).

Coverage:
* Frozen specs.
* Destination tri-state and its argv fragment.
* RateParameters argument rendering.
* InvocationResult / ValidationResult helpers.
"""

from __future__ import annotations

import pytest

from ffstage.core.models import (
    Destination,
    DestinationKind,
    InputSpec,
    InvocationResult,
    OutputSpec,
    ProbeInfo,
    RateParameters,
    StreamInfo,
    ValidationResult,
    target_format_of,
)
from ffstage.exceptions import EmptyOutputError


def _stream(**overrides: object) -> StreamInfo:
    defaults: dict[str, object] = {
        "index": 0,
        "codec_type": "audio",
        "codec_name": "mp3",
        "sample_rate": 44100,
        "bit_rate": 128000,
        "channels": 2,
    }
    defaults.update(overrides)
    return StreamInfo(**defaults)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Specs
# ---------------------------------------------------------------------------

class TestSpecs:
    def test_input_spec_frozen(self) -> None:
        spec = InputSpec("in.wav", ("-v", "error"))
        with pytest.raises(AttributeError):
            spec.path = "other.wav"  # type: ignore[misc]

    def test_output_spec_defaults(self) -> None:
        spec = OutputSpec(postfix=".mp3")
        assert spec.path is None
        assert spec.parameters == ()
        assert spec.match_input_rates is False


# ---------------------------------------------------------------------------
# Destination
# ---------------------------------------------------------------------------

class TestDestination:
    def test_explicit_has_no_overwrite_flag(self) -> None:
        dest = Destination(DestinationKind.EXPLICIT, "/out/a.mp3")
        assert dest.overwrite is False
        assert dest.produces_file is True
        assert dest.arguments() == ["/out/a.mp3"]

    def test_generated_forces_overwrite(self) -> None:
        dest = Destination(DestinationKind.GENERATED, "/tmp/x.mp3")
        assert dest.overwrite is True
        assert dest.arguments() == ["-y", "/tmp/x.mp3"]

    def test_discard_uses_null_muxer(self) -> None:
        dest = Destination(DestinationKind.DISCARD)
        assert dest.produces_file is False
        assert dest.arguments() == ["-f", "null", "-"]


# ---------------------------------------------------------------------------
# RateParameters
# ---------------------------------------------------------------------------

class TestRateParameters:
    def test_bit_rate_flags(self) -> None:
        params = RateParameters(sample_rate=44100, bit_rate=128000, codec_name=None)
        assert params.arguments() == ["-ar", "44100", "-b:a", "128000"]

    def test_codec_flags_replace_bit_rate(self) -> None:
        params = RateParameters(sample_rate=44100, bit_rate=None, codec_name="pcm_s16le")
        assert params.arguments() == ["-ar", "44100", "-c:a", "pcm_s16le"]

    def test_unknown_bit_rate_omitted(self) -> None:
        params = RateParameters(sample_rate=22050, bit_rate=None, codec_name=None)
        assert params.arguments() == ["-ar", "22050"]


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class TestInvocationResult:
    def test_defaults_are_ok(self) -> None:
        result = InvocationResult()
        assert result.ok is True
        result.raise_for_error()

    def test_raise_for_error(self) -> None:
        result = InvocationResult(error=EmptyOutputError("empty"))
        assert result.ok is False
        with pytest.raises(EmptyOutputError, match="empty"):
            result.raise_for_error()


class TestValidationResult:
    def test_truthiness_follows_valid(self) -> None:
        assert ValidationResult(valid=True)
        assert not ValidationResult(valid=False, detail="nope")

    def test_detail_defaults_to_none(self) -> None:
        assert ValidationResult(valid=True).detail is None


class TestProbeInfo:
    def test_first_stream_and_len(self) -> None:
        info = ProbeInfo(format={}, streams=(_stream(), _stream(index=1)))
        assert info.first_stream.index == 0
        assert len(info) == 2

    def test_raw_not_part_of_equality(self) -> None:
        assert _stream(raw={"a": 1}) == _stream(raw={"b": 2})


class TestTargetFormat:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [(".mp3", "mp3"), ("/out/file.WAV", "wav"), ("song.aiff", "aiff"), ("noext", "")],
    )
    def test_extension(self, path: str, expected: str) -> None:
        assert target_format_of(path) == expected
