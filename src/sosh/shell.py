"""External command execution.

A command that is not a built-in runs as a child process resolved through
PATH. The caller blocks until the child exits and gets a ProcessOutcome.
"""

from __future__ import annotations

import errno
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape

from .output import make_console
from .tokenizer import CommandLine

# Upper bound on argv entries handed to a child, command name included.
MAX_ARGS = 63

# Exit status reported when the program could not be executed at all.
SPAWN_FAILURE = 1

# Reported when the child did not exit normally (killed by a signal).
FAILURE_SENTINEL = -1

_FORK_ERRNOS = (errno.EAGAIN, errno.ENOMEM)


@dataclass
class ProcessOutcome:
    code: int
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.code == 0


def build_argv(cmd: CommandLine, max_args: int = MAX_ARGS) -> Tuple[List[str], int]:
    """Return the argv for ``cmd`` and how many arguments were dropped.

    The argv holds at most ``max_args`` entries, command name first.
    """
    argv = [cmd.command, *cmd.args]
    if len(argv) <= max_args:
        return argv, 0
    return argv[:max_args], len(argv) - max_args


def run_external(argv: Sequence[str], console: Optional[Console] = None) -> ProcessOutcome:
    """Run ``argv`` with inherited stdio and wait for it to finish."""
    err = console or make_console(stderr=True)
    try:
        p = subprocess.run(list(argv))
    except OSError as e:
        if e.errno in _FORK_ERRNOS:
            msg = f"Erro ao criar processo filho: {e.strerror or e}"
            err.print(f"[red]{escape(msg)}[/red]")
            return ProcessOutcome(FAILURE_SENTINEL, msg)
        msg = f"Erro ao executar comando: {e.strerror or e}"
        err.print(f"[red]{escape(msg)}[/red]")
        return ProcessOutcome(SPAWN_FAILURE, msg)

    if p.returncode < 0:
        return ProcessOutcome(FAILURE_SENTINEL, f"terminated by signal {-p.returncode}")
    return ProcessOutcome(p.returncode)
