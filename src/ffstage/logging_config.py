"""Logging setup for the ``ffstage`` logger hierarchy.

Rich is optional: when it is importable a :class:`rich.logging.RichHandler`
renders to stderr, otherwise a plain :class:`logging.StreamHandler` is
used.  Library code only ever calls :func:`logging.getLogger`.
"""

from __future__ import annotations

import logging
import sys

_LEVEL_MAP: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _build_handler() -> logging.Handler:
    try:
        from rich.logging import RichHandler
    except ModuleNotFoundError:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt="%H:%M:%S"))
        return handler

    from rich.console import Console

    return RichHandler(console=Console(stderr=True), show_path=False)


def configure_logging(level: str = "warning") -> logging.Logger:
    """Attach a single handler to the ``ffstage`` logger at *level*.

    Calling it again replaces the previous handler instead of stacking.
    """
    logger = logging.getLogger("ffstage")
    logger.setLevel(_LEVEL_MAP.get(level.casefold(), logging.WARNING))
    logger.handlers.clear()
    logger.addHandler(_build_handler())
    logger.propagate = False
    return logger
