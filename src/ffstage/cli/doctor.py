"""``ffstage doctor``: can this host stage and run the media tools?

Each check produces a :class:`CheckRow`.  Rows are rendered as a Rich
table when Rich is importable and as fixed-width text otherwise.  A
missing ffmpeg or ffprobe is a failure because nothing can be staged
without it.
"""

from __future__ import annotations

import platform
import sys
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ffstage.cli import exit_codes
from ffstage.cli.console import console
from ffstage.infra.tool_locator import ToolStatus, detect_tool
from ffstage.version import __version__

TOOLS: tuple[str, ...] = ("ffmpeg", "ffprobe")
MIN_PYTHON: tuple[int, int] = (3, 10)

_SYSTEM_NAMES: dict[str, str] = {"Darwin": "macOS"}


@dataclass(frozen=True, slots=True)
class CheckRow:
    component: str
    value: str
    passed: bool = True
    note: str = ""

    @property
    def status(self) -> str:
        if self.passed:
            return "OK"
        return f"FAIL ({self.note})" if self.note else "FAIL"

    @property
    def status_markup(self) -> str:
        colour = "green" if self.passed else "red"
        return f"[{colour}]{self.status}[/{colour}]"


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------

def check_package() -> CheckRow:
    return CheckRow("ffstage", __version__)


def check_python() -> CheckRow:
    passed = sys.version_info[:2] >= MIN_PYTHON
    required = ".".join(str(part) for part in MIN_PYTHON)
    return CheckRow(
        "Python",
        platform.python_version(),
        passed=passed,
        note="" if passed else f">={required} required",
    )


def check_tool(status: ToolStatus) -> CheckRow:
    """Row for one bundled tool, showing where it would be staged from."""
    if not status.found:
        return CheckRow(status.name, "not found", passed=False)
    return CheckRow(status.name, f"{status.path} ({status.origin})")


def check_temp_dir() -> CheckRow:
    """Staged copies and generated outputs live here, so it must be writable."""
    temp_dir = Path(tempfile.gettempdir())
    try:
        with tempfile.NamedTemporaryFile(dir=temp_dir):
            pass
    except OSError:
        return CheckRow("temp dir", str(temp_dir), passed=False, note="not writable")
    return CheckRow("temp dir", str(temp_dir))


def check_platform() -> CheckRow:
    system = platform.system()
    label = _SYSTEM_NAMES.get(system, system)
    return CheckRow("OS", f"{label} {platform.release()} ({platform.machine()})")


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _render_plain(rows: Sequence[CheckRow]) -> None:
    width = max(len(row.value) for row in rows) + 2
    print("\nffstage doctor", file=sys.stderr)
    print(f"{'Component':<12} {'Value':<{width}} Status", file=sys.stderr)
    for row in rows:
        print(f"{row.component:<12} {row.value:<{width}} {row.status}", file=sys.stderr)
    print(file=sys.stderr)


def _render_table(rows: Sequence[CheckRow]) -> bool:
    """Print *rows* as a Rich table.  Returns ``False`` without Rich."""
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        return False

    table = Table(title="ffstage doctor", header_style="bold cyan", border_style="dim")
    table.add_column("Component", style="bold")
    table.add_column("Value")
    table.add_column("Status", justify="center")
    for row in rows:
        table.add_row(row.component, row.value, row.status_markup)
    console.print(table)
    return True


def _print_install_guidance(missing: Sequence[ToolStatus]) -> None:
    names = ", ".join(status.name for status in missing)
    console.print(f"[yellow]Not found: {names}.[/yellow]")
    console.print("Set FFSTAGE_BIN_DIR to a directory with static builds, or install:")
    for command in missing[0].install_commands:
        console.print(f"  [bold]{command}[/bold]")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def run_doctor(bin_dir: Path | None = None) -> int:
    """Run every check and print the summary.

    Returns :data:`exit_codes.SUCCESS` when all rows pass, otherwise
    :data:`exit_codes.GENERAL_ERROR`.
    """
    statuses = [detect_tool(name, bin_dir) for name in TOOLS]
    rows = [
        check_package(),
        check_python(),
        *(check_tool(status) for status in statuses),
        check_temp_dir(),
        check_platform(),
    ]

    if not _render_table(rows):
        _render_plain(rows)

    missing = [status for status in statuses if not status.found]
    if missing:
        _print_install_guidance(missing)

    if all(row.passed for row in rows):
        console.print("[bold green]Environment looks good.[/bold green]")
        return exit_codes.SUCCESS
    console.print("[bold red]Doctor found problems.[/bold red]")
    return exit_codes.GENERAL_ERROR
