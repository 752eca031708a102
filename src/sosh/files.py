"""File and directory helpers behind the built-in commands.

Every helper scopes its file handles to the call and raises
FileOperationError on failure. Presentation is left to the dispatcher.
"""

from __future__ import annotations

import os
import pwd
import stat
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, List

CHUNK_SIZE = 1024
COPY_SUFFIX = ".copia"
UNKNOWN_OWNER = "Desconhecido"


class FileOperationError(Exception):
    """A built-in file operation failed.

    Renders like ``perror``: ``"<operation>: <cause>"``.
    """

    def __init__(self, operation: str, path: str, cause: OSError):
        self.operation = operation
        self.path = path
        self.cause = cause
        super().__init__(f"{operation}: {cause.strerror or cause}")


class FileKind(str, Enum):
    """File types reported by informa and lista."""
    REGULAR = "regular"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    CHAR_DEVICE = "char-device"
    BLOCK_DEVICE = "block-device"
    FIFO = "fifo"
    SOCKET = "socket"
    UNKNOWN = "unknown"


@dataclass
class FileInfo:
    path: str
    kind: FileKind
    inode: int
    owner: str
    accessed: float
    modified: float
    changed: float


@dataclass
class DirEntryInfo:
    name: str
    kind: FileKind


def kind_from_mode(mode: int) -> FileKind:
    if stat.S_ISREG(mode):
        return FileKind.REGULAR
    if stat.S_ISDIR(mode):
        return FileKind.DIRECTORY
    if stat.S_ISLNK(mode):
        return FileKind.SYMLINK
    if stat.S_ISCHR(mode):
        return FileKind.CHAR_DEVICE
    if stat.S_ISBLK(mode):
        return FileKind.BLOCK_DEVICE
    if stat.S_ISFIFO(mode):
        return FileKind.FIFO
    if stat.S_ISSOCK(mode):
        return FileKind.SOCKET
    return FileKind.UNKNOWN


def _pump(src: BinaryIO, dst: BinaryIO, write_error: str, path: str) -> None:
    """Copy ``src`` to ``dst`` chunk by chunk."""
    while True:
        try:
            chunk = src.read(CHUNK_SIZE)
        except OSError as e:
            raise FileOperationError("Erro de leitura", path, e) from e
        if not chunk:
            return
        try:
            dst.write(chunk)
        except OSError as e:
            raise FileOperationError(write_error, path, e) from e


def show(path: str, out: BinaryIO) -> None:
    """Write the bytes of ``path`` to ``out``."""
    try:
        src = open(path, "rb")
    except OSError as e:
        raise FileOperationError("Erro ao abrir ficheiro", path, e) from e
    with src:
        _pump(src, out, "Erro de escrita", path)
    out.flush()


def copy(path: str) -> str:
    """Copy ``path`` to ``path + ".copia"``, overwriting any previous copy."""
    dest = path + COPY_SUFFIX
    try:
        src = open(path, "rb")
    except OSError as e:
        raise FileOperationError("Erro ao abrir ficheiro origem", path, e) from e
    with src:
        try:
            dst = open(dest, "wb")
        except OSError as e:
            raise FileOperationError("Erro ao criar ficheiro destino", dest, e) from e
        with dst:
            _pump(src, dst, "Erro ao escrever no ficheiro destino", dest)
    return dest


def append(source: str, dest: str) -> None:
    """Append the bytes of ``source`` to the end of ``dest``.

    ``dest`` must already exist; it is opened for appending, never created.
    """
    try:
        src = open(source, "rb")
    except OSError as e:
        raise FileOperationError("Erro ao abrir ficheiro origem", source, e) from e
    with src:
        try:
            fd = os.open(dest, os.O_WRONLY | os.O_APPEND)
        except OSError as e:
            raise FileOperationError("Erro ao abrir ficheiro destino", dest, e) from e
        with os.fdopen(fd, "ab") as dst:
            if os.path.samefile(source, dest):
                # appending a file to itself must not chase its own growth
                try:
                    data = src.read()
                except OSError as e:
                    raise FileOperationError("Erro de leitura", source, e) from e
                try:
                    dst.write(data)
                except OSError as e:
                    raise FileOperationError("Erro ao escrever no ficheiro destino", dest, e) from e
                return
            _pump(src, dst, "Erro ao escrever no ficheiro destino", dest)


def count_lines(path: str) -> int:
    """Count lines in ``path``.

    Every newline ends a line. A non-empty final line without a trailing
    newline still counts. An empty file has zero lines.
    """
    try:
        src = open(path, "rb")
    except OSError as e:
        raise FileOperationError("Erro ao abrir ficheiro", path, e) from e
    count = 0
    last = b""
    with src:
        while True:
            try:
                chunk = src.read(CHUNK_SIZE)
            except OSError as e:
                raise FileOperationError("Erro de leitura", path, e) from e
            if not chunk:
                break
            count += chunk.count(b"\n")
            last = chunk[-1:]
    if last and last != b"\n":
        count += 1
    return count


def delete(path: str) -> None:
    try:
        os.unlink(path)
    except OSError as e:
        raise FileOperationError("Erro ao apagar ficheiro", path, e) from e


def owner_name(uid: int) -> str:
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return UNKNOWN_OWNER


def stat_info(path: str) -> FileInfo:
    """Return type, inode, owner and timestamps of ``path`` (symlinks followed)."""
    try:
        st = os.stat(path)
    except OSError as e:
        raise FileOperationError("Erro ao obter informação do ficheiro", path, e) from e
    return FileInfo(
        path=path,
        kind=kind_from_mode(st.st_mode),
        inode=st.st_ino,
        owner=owner_name(st.st_uid),
        accessed=st.st_atime,
        modified=st.st_mtime,
        changed=st.st_ctime,
    )


def list_dir(path: str = ".") -> List[DirEntryInfo]:
    """List the entries of ``path`` sorted by name.

    Entry types are taken without following symlinks.
    """
    entries: List[DirEntryInfo] = []
    try:
        with os.scandir(path) as it:
            for entry in it:
                try:
                    kind = kind_from_mode(entry.stat(follow_symlinks=False).st_mode)
                except OSError:
                    # entry vanished between readdir and stat
                    kind = FileKind.UNKNOWN
                entries.append(DirEntryInfo(entry.name, kind))
    except OSError as e:
        raise FileOperationError("Erro ao abrir diretoria", path, e) from e
    return sorted(entries, key=lambda d: d.name)
