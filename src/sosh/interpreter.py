"""The interactive command loop.

Prompting -> Reading -> (Idle | Dispatching) -> Prompting, until end of
input or ``termina``. Each iteration owns its line, tokens and argv; nothing
carries over to the next one.
"""

from __future__ import annotations

import sys
from enum import Enum
from typing import BinaryIO, Optional

from rich.console import Console

from .builtins import BuiltinContext, DispatchResult, dispatch
from .config import Settings
from .output import make_console
from .shell import ProcessOutcome, build_argv, run_external
from .terminal import create_reader
from .tokenizer import CommandLine, tokenize

BANNER = "Interpretador de comandos (digite 'termina' para sair)"


class State(str, Enum):
    PROMPTING = "prompting"
    READING = "reading"
    IDLE = "idle"
    DISPATCHING = "dispatching"
    TERMINATED = "terminated"


class Interpreter:
    """Reads command lines and runs them until told to stop."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        reader=None,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
        binary_out: Optional[BinaryIO] = None,
    ):
        self.settings = settings or Settings()
        self.console = console or make_console()
        self.err_console = err_console or make_console(stderr=True)
        self.reader = reader or create_reader(
            console=self.console,
            history_enabled=self.settings.history_enabled,
            max_line_length=self.settings.max_line_length,
        )
        if binary_out is None:
            binary_out = sys.stdout.buffer
        self.ctx = BuiltinContext(self.console, self.err_console, binary_out)
        self.state = State.PROMPTING

    def run(self) -> int:
        """Run the loop to completion. Always returns 0."""
        if self.settings.show_banner:
            self.console.print(BANNER, markup=False)
        self.state = State.PROMPTING
        while self.state is not State.TERMINATED:
            self.step()
        return 0

    def step(self) -> State:
        """Handle one prompt/read/dispatch cycle and return the new state."""
        self.state = State.READING
        line = self.reader.prompt(self.settings.prompt)
        if line is None:
            self.state = State.TERMINATED
            return self.state
        if getattr(self.reader, "truncated", False):
            self.err_console.print(
                f"[yellow]Linha truncada a {self.settings.max_line_length} caracteres[/yellow]"
            )
        if "\0" in line:
            # paths and argv entries cannot carry NUL
            self.err_console.print("[yellow]Linha ignorada: contém um byte nulo[/yellow]")
            self.state = State.PROMPTING
            return self.state

        cmd = tokenize(line)
        if cmd is None:
            self.state = State.IDLE
        else:
            self.state = State.DISPATCHING
            result = dispatch(cmd, self.ctx)
            if result is DispatchResult.TERMINATE:
                self.state = State.TERMINATED
                return self.state
            if result is DispatchResult.EXTERNAL:
                self.run_command(cmd)

        self.state = State.PROMPTING
        return self.state

    def run_command(self, cmd: CommandLine) -> ProcessOutcome:
        """Execute a non-built-in command and print its summary line."""
        argv, dropped = build_argv(cmd, self.settings.max_args)
        if dropped:
            self.err_console.print(
                f"[yellow]Demasiados argumentos: {dropped} ignorado(s) "
                f"(máximo {self.settings.max_args})[/yellow]"
            )
        self.console.file.flush()
        outcome = run_external(argv, console=self.err_console)
        self.console.print(
            f"Terminou comando {cmd.command} com código {outcome.code}", markup=False
        )
        return outcome
