"""Built-in command table and dispatcher.

Built-ins are matched by exact, case-sensitive name before anything is
handed to the external runner. Each entry declares how many arguments it
needs; extra arguments are ignored.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Callable, Dict, List, Optional

from rich.console import Console
from rich.markup import escape

from . import files
from .files import FileKind, FileOperationError
from .tokenizer import CommandLine

TERMINATE = "termina"


class DispatchResult(str, Enum):
    """What the loop should do after dispatch."""
    HANDLED = "handled"
    TERMINATE = "terminate"
    EXTERNAL = "external"


class UsageError(Exception):
    """A built-in was invoked without its required arguments."""

    def __init__(self, usage: str):
        self.usage = usage
        super().__init__(f"Uso: {usage}")


@dataclass
class BuiltinContext:
    """Streams a built-in writes to."""
    console: Console
    err_console: Console
    binary_out: BinaryIO


Handler = Callable[[BuiltinContext, List[Optional[str]]], None]


@dataclass
class Builtin:
    name: str
    min_args: int
    max_args: int
    usage: str
    handler: Handler

    def bind_args(self, cmd: CommandLine) -> List[Optional[str]]:
        """Pick this built-in's arguments out of ``cmd``.

        Raises UsageError when a required argument is missing. Optional
        trailing arguments come back as None.
        """
        if len(cmd.args) < self.min_args:
            raise UsageError(self.usage)
        return [cmd.arg(i) for i in range(self.max_args)]


# Labels printed by informa
INFO_KIND_LABELS = {
    FileKind.REGULAR: "Ficheiro regular",
    FileKind.DIRECTORY: "Diretoria",
    FileKind.SYMLINK: "Link simbólico",
    FileKind.CHAR_DEVICE: "Dispositivo de caracteres",
    FileKind.BLOCK_DEVICE: "Dispositivo de blocos",
    FileKind.FIFO: "FIFO/pipe",
}

# Labels printed by lista
LIST_KIND_LABELS = {
    FileKind.REGULAR: "Ficheiro",
    FileKind.DIRECTORY: "Diretoria",
    FileKind.SYMLINK: "Link simbólico",
}


def _mostra(ctx: BuiltinContext, args: List[Optional[str]]) -> None:
    ctx.console.file.flush()
    files.show(args[0], ctx.binary_out)


def _copia(ctx: BuiltinContext, args: List[Optional[str]]) -> None:
    files.copy(args[0])


def _acrescenta(ctx: BuiltinContext, args: List[Optional[str]]) -> None:
    files.append(args[0], args[1])


def _conta(ctx: BuiltinContext, args: List[Optional[str]]) -> None:
    n = files.count_lines(args[0])
    ctx.console.print(f"Número de linhas: {n}", markup=False)


def _apaga(ctx: BuiltinContext, args: List[Optional[str]]) -> None:
    files.delete(args[0])


def _informa(ctx: BuiltinContext, args: List[Optional[str]]) -> None:
    info = files.stat_info(args[0])
    out = ctx.console
    out.print(f"Informação do ficheiro: {info.path}", markup=False)
    out.print(f"Tipo: {INFO_KIND_LABELS.get(info.kind, 'Desconhecido')}", markup=False)
    out.print(f"i-node: {info.inode}", markup=False)
    out.print(f"Dono: {info.owner}", markup=False)
    out.print(f"Último acesso: {time.ctime(info.accessed)}", markup=False)
    out.print(f"Última modificação: {time.ctime(info.modified)}", markup=False)
    out.print(f"Última alteração de estado: {time.ctime(info.changed)}", markup=False)


def _lista(ctx: BuiltinContext, args: List[Optional[str]]) -> None:
    path = args[0] or "."
    entries = files.list_dir(path)
    ctx.console.print(f"Conteúdo da diretoria {path}:", markup=False)
    for entry in entries:
        label = LIST_KIND_LABELS.get(entry.kind, "Outro tipo")
        ctx.console.print(f"{entry.name} - {label}", markup=False)


BUILTINS: Dict[str, Builtin] = {
    b.name: b
    for b in [
        Builtin("mostra", 1, 1, "mostra ficheiro", _mostra),
        Builtin("copia", 1, 1, "copia ficheiro", _copia),
        Builtin("acrescenta", 2, 2, "acrescenta origem destino", _acrescenta),
        Builtin("conta", 1, 1, "conta ficheiro", _conta),
        Builtin("apaga", 1, 1, "apaga ficheiro", _apaga),
        Builtin("informa", 1, 1, "informa ficheiro", _informa),
        Builtin("lista", 0, 1, "lista [diretoria]", _lista),
    ]
}

KEYWORDS = sorted([*BUILTINS, TERMINATE])


def is_builtin(name: str) -> bool:
    return name in BUILTINS or name == TERMINATE


def dispatch(cmd: CommandLine, ctx: BuiltinContext) -> DispatchResult:
    """Run ``cmd`` if it names a built-in.

    Usage and I/O errors are reported on the error console and the command
    counts as handled. Anything unknown is left for the external runner.
    """
    if cmd.command == TERMINATE:
        return DispatchResult.TERMINATE

    builtin = BUILTINS.get(cmd.command)
    if builtin is None:
        return DispatchResult.EXTERNAL

    try:
        builtin.handler(ctx, builtin.bind_args(cmd))
    except UsageError as e:
        ctx.err_console.print(f"[yellow]{escape(str(e))}[/yellow]")
    except FileOperationError as e:
        ctx.err_console.print(f"[red]{escape(str(e))}[/red]")
    return DispatchResult.HANDLED
