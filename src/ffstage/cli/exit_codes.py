"""Process exit statuses returned by :func:`ffstage.cli.app.main`."""

from __future__ import annotations

SUCCESS: int = 0
"""Command finished; for ``check``, the file is the claimed format."""

GENERAL_ERROR: int = 1
"""An :class:`~ffstage.exceptions.FfstageError`, or ``check`` said no."""

UNEXPECTED_ERROR: int = 2
"""A bug: some other exception reached :func:`ffstage.cli.app.cli`."""

KEYBOARD_INTERRUPT: int = 130
"""Interrupted with Ctrl+C (128 + SIGINT)."""
