"""Split an input line into a command name and its arguments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

DELIMITER = " "


@dataclass(frozen=True)
class CommandLine:
    """One tokenized input line."""
    command: str
    args: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))

    def arg(self, index: int) -> Optional[str]:
        """Return the argument at ``index`` or None when absent."""
        if index < len(self.args):
            return self.args[index]
        return None


def strip_newline(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def tokenize(line: str) -> Optional[CommandLine]:
    """Tokenize ``line`` on runs of spaces.

    There is no quoting or escaping: a space always splits, even inside
    quotes. Returns None for empty or blank lines.
    """
    tokens = [t for t in strip_newline(line).split(DELIMITER) if t]
    if not tokens:
        return None
    return CommandLine(tokens[0], tuple(tokens[1:]))
