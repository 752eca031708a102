"""Line input for the interpreter.

Two readers share one interface, ``prompt(text) -> str | None``:

- LineReader reads newline-delimited lines from any text stream, the way
  ``fgets`` would. Used for pipes, files and tests.
- TerminalInput wraps a prompt_toolkit session when stdin is a TTY, adding
  persistent history and completion of the built-in keywords and paths.

Both return None on end of input and cut lines longer than
``max_line_length`` characters, setting ``truncated`` for that line.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import IO, Iterable, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion, PathCompleter, merge_completers
from prompt_toolkit.history import FileHistory, InMemoryHistory
from prompt_toolkit.styles import Style
from rich.console import Console

from .builtins import KEYWORDS
from .tokenizer import strip_newline

MAX_LINE_LENGTH = 1023


def _get_history_path() -> Path:
    """Get path to command history file."""
    if os.name == "nt":
        base = os.environ.get("APPDATA") or str(Path.home())
        return Path(base) / "sosh" / "history"
    return Path(os.environ.get("XDG_DATA_HOME", str(Path.home() / ".local" / "share"))) / "sosh" / "history"


class LineReader:
    """Plain line reader over a text stream."""

    def __init__(
        self,
        stream: Optional[IO[str]] = None,
        console: Optional[Console] = None,
        max_line_length: int = MAX_LINE_LENGTH,
    ):
        self.stream = stream if stream is not None else sys.stdin
        self.console = console
        self.max_line_length = max_line_length
        self.truncated = False

    def prompt(self, prompt_text: str = "% ") -> Optional[str]:
        if self.console is not None:
            self.console.print(prompt_text, end="", markup=False)
            self.console.file.flush()
        line = self.stream.readline()
        if not line:
            return None
        line = strip_newline(line)
        self.truncated = len(line) > self.max_line_length
        if self.truncated:
            line = line[: self.max_line_length]
        return line


class KeywordCompleter(Completer):
    """Completes built-in keywords in command position."""

    def __init__(self, keywords: Iterable[str] = KEYWORDS):
        self.keywords = list(keywords)

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if " " in text.lstrip(" "):
            return
        word = text.lstrip(" ")
        for kw in self.keywords:
            if kw.startswith(word):
                yield Completion(kw, start_position=-len(word))


class TerminalInput:
    """Interactive input with history and completion.

    Usage:
        terminal = TerminalInput()
        while True:
            line = terminal.prompt("% ")
            if line is None:  # EOF/Ctrl+D
                break
    """

    def __init__(self, history_enabled: bool = True, max_line_length: int = MAX_LINE_LENGTH):
        self.max_line_length = max_line_length
        self.truncated = False

        if history_enabled:
            history_path = _get_history_path()
            history_path.parent.mkdir(parents=True, exist_ok=True)
            history = FileHistory(str(history_path))
        else:
            history = InMemoryHistory()

        self._session = PromptSession(
            history=history,
            completer=merge_completers([KeywordCompleter(), PathCompleter(expanduser=True)]),
            complete_while_typing=False,  # Only complete on Tab
            style=Style.from_dict({"prompt": "bold"}),
            enable_history_search=True,  # Ctrl+R for reverse search
        )

    def prompt(self, prompt_text: str = "% ") -> Optional[str]:
        """Returns the line, or None on EOF (Ctrl+D) or Ctrl+C."""
        try:
            line = self._session.prompt(prompt_text)
        except (EOFError, KeyboardInterrupt):
            return None
        self.truncated = len(line) > self.max_line_length
        if self.truncated:
            line = line[: self.max_line_length]
        return line


def create_reader(
    stream: Optional[IO[str]] = None,
    console: Optional[Console] = None,
    history_enabled: bool = True,
    max_line_length: int = MAX_LINE_LENGTH,
):
    """Pick TerminalInput for an interactive stdin, LineReader otherwise."""
    stream = stream if stream is not None else sys.stdin
    if stream is sys.stdin and stream.isatty() and sys.stdout.isatty():
        return TerminalInput(history_enabled=history_enabled, max_line_length=max_line_length)
    return LineReader(stream, console=console, max_line_length=max_line_length)
