"""Allow ``python -m ffstage`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m ffstage`` behaves identically to the ``ffstage`` console
script.
"""

from __future__ import annotations

from ffstage.cli.app import cli

if __name__ == "__main__":
    cli()
