"""Normalization of ffmpeg stderr into a short, deduplicated summary.

The pipeline is an ordered list of :class:`DiagnosticRule` objects so
its exact behaviour can be tested and versioned on its own:

1. Drop lines matching benign warnings (ID3 BOM and frame-read noise).
2. Strip the ``<input path>: `` prefix ffmpeg puts on per-file messages.
3. Strip ``[codec @ 0x...]`` context tags.
4. Strip ``Last message repeated N times`` notices.
5. Strip ``Error while decoding stream #S:I: `` prefixes.
6. Trim, deduplicate (first occurrence wins), drop empty lines.

The result is joined with ``\\n``; an empty string means "nothing to
report".
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DiagnosticRule:
    """One regex substitution applied to every line.

    When :attr:`drop_line` is set, any line matching :attr:`pattern` is
    removed entirely instead of being rewritten.
    """

    name: str
    pattern: re.Pattern[str]
    replacement: str = ""
    drop_line: bool = False

    def apply(self, line: str) -> str | None:
        if self.drop_line:
            return None if self.pattern.search(line) else line
        return self.pattern.sub(self.replacement, line)


BENIGN_RULES: tuple[DiagnosticRule, ...] = (
    DiagnosticRule("bom-warning", re.compile(r"Incorrect BOM value"), drop_line=True),
    DiagnosticRule(
        "frame-read-warning",
        re.compile(r"Error reading frame \S+, skipped"),
        drop_line=True,
    ),
)

NOISE_RULES: tuple[DiagnosticRule, ...] = (
    DiagnosticRule("codec-context-tag", re.compile(r"\[[^\]\[]* @ 0x[0-9a-fA-F]+\]\s*")),
    DiagnosticRule("repeat-notice", re.compile(r"\s*Last message repeated \d+ times?")),
    DiagnosticRule("decode-error-prefix", re.compile(r"Error while decoding stream #\d+:\d+: ")),
)


def path_prefix_rule(path: str) -> DiagnosticRule:
    """Rule stripping ``<path>: `` from the start of a line."""
    return DiagnosticRule("path-prefix", re.compile(r"^\s*" + re.escape(path) + r": "))


def build_rules(path: str | None = None) -> list[DiagnosticRule]:
    rules = list(BENIGN_RULES)
    if path:
        rules.append(path_prefix_rule(path))
    rules.extend(NOISE_RULES)
    return rules


def normalize_lines(lines: Iterable[str], rules: Sequence[DiagnosticRule]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for line in lines:
        current: str | None = line
        for rule in rules:
            current = rule.apply(current)
            if current is None:
                break
        if current is None:
            continue
        current = current.strip()
        if current and current not in seen:
            seen.add(current)
            result.append(current)
    return result


def summarize_diagnostics(stderr: str, path: str | None = None) -> str:
    """Return the normalized, deduplicated summary of *stderr*."""
    return "\n".join(normalize_lines(stderr.splitlines(), build_rules(path)))
