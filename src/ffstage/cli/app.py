"""``ffstage`` command line: argument parsing, dispatch and exit codes.

:func:`cli` is where errors stop.  Typed
:class:`~ffstage.exceptions.FfstageError` failures become a one-line
message plus hint and exit status 1; anything else is reported as a bug
with status 2.

Handlers only translate between argv and the services built by
:func:`ffstage.toolkit.build_toolkit`; they hold no media logic.
"""

from __future__ import annotations

import argparse
import logging
import shlex
import sys
from typing import TYPE_CHECKING

from ffstage.cli import exit_codes
from ffstage.cli.console import console
from ffstage.config import Settings
from ffstage.exceptions import FfstageError
from ffstage.version import __version__

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ffstage.toolkit import Toolkit


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="ffstage",
        description="Staged ffmpeg/ffprobe runner for write-restricted hosts.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log staging and command lines at debug level.",
    )
    commands = parser.add_subparsers(dest="command")

    transcode = commands.add_parser("transcode", help="Run ffmpeg on a file.")
    transcode.add_argument("input", help="Source media file.")
    target = transcode.add_mutually_exclusive_group(required=True)
    target.add_argument("-o", "--output", help="Explicit destination path.")
    target.add_argument(
        "--postfix",
        help="Write to a generated temp file ending in this suffix (e.g. .mp3).",
    )
    transcode.add_argument(
        "--match-rates",
        action="store_true",
        help="Derive sample rate / bit rate / PCM codec from the source.",
    )
    transcode.add_argument(
        "--input-args",
        default="",
        help="Flags placed before -i, as one shell-quoted string.",
    )
    transcode.add_argument(
        "--output-args",
        default="",
        help="Flags placed before the destination, as one shell-quoted string.",
    )

    probe = commands.add_parser("probe", help="List the streams of a file.")
    probe.add_argument("path")

    channels = commands.add_parser("channels", help="Print the first stream's channel count.")
    channels.add_argument("path")

    check = commands.add_parser("check", help="Verify a file really is the given format.")
    check.add_argument("path")
    check.add_argument("--format", required=True, choices=("mp3", "wav", "aiff"))

    commands.add_parser("doctor", help="Run environment diagnostics.")
    return parser


def _build_toolkit(settings: Settings) -> Toolkit:
    from ffstage.toolkit import build_toolkit

    return build_toolkit(settings)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------

def _handle_transcode(args: argparse.Namespace, settings: Settings) -> int:
    from ffstage.core.models import InputSpec, OutputSpec

    toolkit = _build_toolkit(settings)
    result = toolkit.transcoder.transcode(
        InputSpec(args.input, tuple(shlex.split(args.input_args))),
        OutputSpec(
            path=args.output,
            postfix=args.postfix,
            parameters=tuple(shlex.split(args.output_args)),
            match_input_rates=args.match_rates,
        ),
    )
    result.raise_for_error()
    console.print(f"[bold green]Wrote[/bold green] {result.output_file} ({result.size} bytes)")
    return exit_codes.SUCCESS


def _handle_probe(args: argparse.Namespace, settings: Settings) -> int:
    info = _build_toolkit(settings).probe.probe(args.path)
    fmt_name = info.format.get("format_name", "unknown")
    console.print(f"[bold]{args.path}[/bold]  format={fmt_name}")
    for stream in info.streams:
        console.print(
            f"  #{stream.index} {stream.codec_type or '?'} {stream.codec_name or '?'}"
            f"  rate={stream.sample_rate or '-'} bitrate={stream.bit_rate or '-'}"
            f" channels={stream.channels if stream.channels is not None else '-'}"
        )
    return exit_codes.SUCCESS


def _handle_channels(args: argparse.Namespace, settings: Settings) -> int:
    count = _build_toolkit(settings).inspector.get_stream_count(args.path)
    print(count)
    return exit_codes.SUCCESS


def _handle_check(args: argparse.Namespace, settings: Settings) -> int:
    result = _build_toolkit(settings).validator.validate(args.path, args.format)
    if result.valid:
        console.print(f"[bold green]OK[/bold green] {args.path} is a valid {args.format} file.")
        return exit_codes.SUCCESS
    console.print(f"[bold red]INVALID[/bold red] {args.path} is not a valid {args.format} file.")
    if result.detail:
        console.print(result.detail)
    return exit_codes.GENERAL_ERROR


def _handle_doctor(settings: Settings) -> int:
    from ffstage.cli.doctor import run_doctor

    return run_doctor(settings.bin_dir)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Parse *argv* (default ``sys.argv[1:]``), run one command, return its exit status.

    Typed errors propagate to :func:`cli`.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    settings = Settings.from_env()

    from ffstage.logging_config import configure_logging

    configure_logging("debug" if args.verbose else settings.log_level)

    if args.command == "doctor":
        return _handle_doctor(settings)

    handlers = {
        "transcode": _handle_transcode,
        "probe": _handle_probe,
        "channels": _handle_channels,
        "check": _handle_check,
    }
    return handlers[args.command](args, settings)


# ---------------------------------------------------------------------------
# Console script
# ---------------------------------------------------------------------------

def _report(exc: FfstageError) -> None:
    console.print(f"[bold red]Error:[/bold red] {exc}")
    if exc.hint:
        console.print(f"[yellow]Hint:[/yellow] {exc.hint}")


def cli() -> None:
    """Console-script entry point: run :func:`main` and map failures to exit codes."""
    try:
        status = main()
    except FfstageError as exc:
        _report(exc)
        status = exit_codes.GENERAL_ERROR
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        status = exit_codes.KEYBOARD_INTERRUPT
    except Exception as exc:  # noqa: BLE001
        logger.debug("Unhandled exception", exc_info=True)
        console.print(
            f"[bold red]Internal error:[/bold red] {type(exc).__name__}: {exc}\n"
            "Re-run with -v for a traceback and report it."
        )
        status = exit_codes.UNEXPECTED_ERROR
    sys.exit(status)
