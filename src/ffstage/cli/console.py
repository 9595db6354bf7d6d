"""Stderr output for the CLI, with or without Rich.

Rich is imported on each call rather than at module load, so ``--help``,
``--version`` and ``doctor`` still work on an interpreter without it.
On that plain path ``[style]`` markup is stripped before printing.
"""

from __future__ import annotations

import re
import sys
from typing import Any

from ffstage.exceptions import EnvironmentError

_MARKUP = re.compile(r"\[/?[a-z ]+\]")


def get_rich_console() -> Any:
	"""Return a ``rich.console.Console`` bound to stderr.

	Raises
	------
	EnvironmentError
		If Rich cannot be imported.
	"""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console(stderr=True)


def strip_markup(text: str) -> str:
	return _MARKUP.sub("", text)


class StderrConsole:
	"""``print``-like sink used by every CLI command."""

	def print(self, *objects: object) -> None:
		try:
			target = get_rich_console()
		except EnvironmentError:
			plain = [strip_markup(o) if isinstance(o, str) else o for o in objects]
			print(*plain, file=sys.stderr)
			return
		target.print(*objects)


console = StderrConsole()
