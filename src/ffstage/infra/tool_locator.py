"""Infrastructure: locating the bundled media tools.

A tool is looked up, in order, in the configured bundle directory, the
``bin/`` directory shipped inside the package, and finally on the system
PATH.  The located file is the *source* for staging; it is never run
in place because bundle locations are typically read-only.

Rules
-----
* Detection via filesystem checks and :func:`shutil.which` only, no
  subprocess.
* No permanent PATH modification.
* No ``print()``; callers handle user-facing output.
"""

from __future__ import annotations

import platform
import shutil
from dataclasses import dataclass
from pathlib import Path

from ffstage.exceptions import ToolNotFoundError

PACKAGE_BIN_DIR: Path = Path(__file__).resolve().parent.parent / "bin"


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ToolStatus:
    """Result of a tool lookup.

    Attributes
    ----------
    name : str
        Tool name (``"ffmpeg"`` or ``"ffprobe"``).
    found : bool
        Whether a copy was located.
    path : Path | None
        Absolute path to the located binary, or ``None``.
    origin : str
        ``"bundle"``, ``"package"``, ``"path"`` or ``"missing"``.
    install_commands : tuple[str, ...]
        Suggested shell commands when the tool is missing.
    """

    name: str
    found: bool
    path: Path | None
    origin: str
    install_commands: tuple[str, ...]


# ---------------------------------------------------------------------------
# Detection logic
# ---------------------------------------------------------------------------

def detect_tool(name: str, bin_dir: Path | None = None) -> ToolStatus:
    """Locate *name* without raising.

    The caller decides whether a missing tool is fatal.
    """
    for origin, directory in (("bundle", bin_dir), ("package", PACKAGE_BIN_DIR)):
        if directory is None:
            continue
        candidate = directory / name
        if candidate.is_file():
            return ToolStatus(
                name=name,
                found=True,
                path=candidate.resolve(),
                origin=origin,
                install_commands=(),
            )

    result = shutil.which(name)
    if result is not None:
        return ToolStatus(
            name=name,
            found=True,
            path=Path(result).resolve(),
            origin="path",
            install_commands=(),
        )

    return ToolStatus(
        name=name,
        found=False,
        path=None,
        origin="missing",
        install_commands=_platform_install_commands(),
    )


def require_tool(name: str, bin_dir: Path | None = None) -> Path:
    """Locate *name* or raise :class:`ToolNotFoundError`."""
    status = detect_tool(name, bin_dir)
    if not status.found or status.path is None:
        hint_lines = [f"Place a static {name} build in FFSTAGE_BIN_DIR, or install it:"]
        hint_lines.extend(f"  {cmd}" for cmd in status.install_commands)
        raise ToolNotFoundError(
            f"{name} is not bundled and not on PATH.",
            hint="\n".join(hint_lines),
        )
    return status.path


# ---------------------------------------------------------------------------
# Platform-specific install guidance
# ---------------------------------------------------------------------------

def _platform_install_commands() -> tuple[str, ...]:
    """Return install commands appropriate for the current OS."""
    system = platform.system().lower()
    if system == "windows":
        return (
            "winget install Gyan.FFmpeg",
            "choco install ffmpeg",
        )
    if system == "linux":
        return (
            "sudo apt install ffmpeg",
            "sudo dnf install ffmpeg",
            "sudo pacman -S ffmpeg",
        )
    if system == "darwin":
        return ("brew install ffmpeg",)
    return ("Download a build from https://ffmpeg.org/download.html",)
