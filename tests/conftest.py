"""Shared pytest fixtures and configuration for the ffstage test suite.

Guidelines
----------
* No real ffmpeg/ffprobe; process execution is mocked at the
  ``ProcessRunner`` boundary (or uses the running Python interpreter).
* Filesystem behaviour uses ``tmp_path``.
* Tests must not depend on ``FFSTAGE_*`` variables of the host.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def _clean_ffstage_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("FFSTAGE_BIN_DIR", "FFSTAGE_TIMEOUT", "FFSTAGE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _reset_ffstage_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("ffstage")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
