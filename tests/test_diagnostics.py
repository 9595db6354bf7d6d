"""Tests for ffmpeg stderr normalization (core/diagnostics.py).

Coverage:
* Benign BOM / frame-read warnings are dropped.
* Path prefixes, ``[codec @ 0x...]`` tags, repeat notices and decode
  prefixes are stripped.
* Trimming, deduplication (first occurrence wins) and empty-line removal.
* Individual rules behave in isolation.
"""

from __future__ import annotations

from ffstage.core.diagnostics import (
    BENIGN_RULES,
    NOISE_RULES,
    build_rules,
    path_prefix_rule,
    summarize_diagnostics,
)

PATH = "/tmp/upload (1).mp3"


class TestSummarize:
    def test_empty_input(self) -> None:
        assert summarize_diagnostics("", PATH) == ""

    def test_only_benign_noise_is_clean(self) -> None:
        stderr = (
            "[mp3 @ 0x55d0c8a2e000] Incorrect BOM value\n"
            "[mp3 @ 0x55d0c8a2e000] Error reading frame TXXX, skipped\n"
            "\n"
        )
        assert summarize_diagnostics(stderr, PATH) == ""

    def test_text_file_reports_invalid_data(self) -> None:
        stderr = f"{PATH}: Invalid data found when processing input\n"
        assert summarize_diagnostics(stderr, PATH) == "Invalid data found when processing input"

    def test_decode_errors_are_deduplicated(self) -> None:
        stderr = (
            "[mp3float @ 0x7f8b1c008200] Header missing\n"
            "Error while decoding stream #0:0: Invalid data found when processing input\n"
            "[mp3float @ 0x7f8b1c008200] Header missing\n"
            "    Last message repeated 2 times\n"
            "Error while decoding stream #0:0: Invalid data found when processing input\n"
        )
        assert summarize_diagnostics(stderr, PATH) == (
            "Header missing\nInvalid data found when processing input"
        )

    def test_lines_are_trimmed(self) -> None:
        assert summarize_diagnostics("   something odd   \n", PATH) == "something odd"

    def test_path_with_regex_metacharacters(self) -> None:
        stderr = f"{PATH}: could not find codec parameters\n"
        assert summarize_diagnostics(stderr, PATH) == "could not find codec parameters"

    def test_other_paths_are_kept(self) -> None:
        stderr = "/tmp/other.mp3: Invalid data found when processing input\n"
        assert summarize_diagnostics(stderr, PATH) == stderr.strip()

    def test_without_path(self) -> None:
        assert summarize_diagnostics("[aac @ 0xabc] Too many bits\n") == "Too many bits"

    def test_order_of_first_occurrence(self) -> None:
        stderr = "b\na\nb\nc\na\n"
        assert summarize_diagnostics(stderr) == "b\na\nc"


class TestRules:
    def test_rule_order(self) -> None:
        names = [rule.name for rule in build_rules(PATH)]
        assert names == [
            "bom-warning",
            "frame-read-warning",
            "path-prefix",
            "codec-context-tag",
            "repeat-notice",
            "decode-error-prefix",
        ]

    def test_no_path_rule_without_path(self) -> None:
        assert "path-prefix" not in [rule.name for rule in build_rules(None)]

    def test_drop_rule_returns_none(self) -> None:
        bom = BENIGN_RULES[0]
        assert bom.apply("[mp3 @ 0x1] Incorrect BOM value") is None
        assert bom.apply("Header missing") == "Header missing"

    def test_path_prefix_only_at_line_start(self) -> None:
        rule = path_prefix_rule("/a.mp3")
        assert rule.apply("/a.mp3: bad") == "bad"
        assert rule.apply("see /a.mp3: bad") == "see /a.mp3: bad"

    def test_codec_tag_rule(self) -> None:
        tag = NOISE_RULES[0]
        assert tag.apply("[mp3float @ 0x7f8b1c008200] Header missing") == "Header missing"
