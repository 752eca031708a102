"""Console factory shared by the interpreter and the CLI."""

from __future__ import annotations

from typing import IO, Optional

from rich.console import Console


def make_console(stderr: bool = False, file: Optional[IO[str]] = None) -> Console:
    """Build a rich Console that prints text as-is.

    File contents and command output must reach the terminal untouched, so
    wrapping, highlighting and emoji codes are all off.
    """
    return Console(
        file=file,
        stderr=stderr,
        soft_wrap=True,
        highlight=False,
        emoji=False,
    )
