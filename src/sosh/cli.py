"""sosh CLI - minimal interactive command shell.

Usage:
    sosh                  # Start the interpreter on stdin
    sosh config ...       # Write default settings to the config file
    sosh --version

Built-in commands inside the interpreter:
    mostra <ficheiro>                 # Print a file
    copia <ficheiro>                  # Copy to <ficheiro>.copia
    acrescenta <origem> <destino>     # Append origem to destino
    conta <ficheiro>                  # Count lines
    apaga <ficheiro>                  # Delete a file
    informa <ficheiro>                # Type, i-node, owner and timestamps
    lista [diretoria]                 # List a directory
    termina                           # Leave
Anything else runs as an external program.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

from rich.markup import escape

from . import __version__
from .config import Settings
from .interpreter import Interpreter
from .output import make_console

console = make_console()
err_console = make_console(stderr=True)


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    if args.prompt is not None:
        settings.prompt = args.prompt
    if args.no_banner:
        settings.show_banner = False
    if args.no_history:
        settings.history_enabled = False
    if args.max_args is not None:
        if args.max_args < 1:
            raise SystemExit("--max-args must be at least 1")
        settings.max_args = args.max_args
    return settings


def run_config(settings: Settings, path: Optional[Path]) -> int:
    """Persist ``settings`` and report where they went."""
    try:
        written = settings.save(path)
    except OSError as e:
        err_console.print(f"[red]Could not write config:[/red] {escape(str(e))}")
        return 2
    console.print(f"[green]✓ Wrote config:[/green] {escape(str(written))}")
    return 0


def _add_common_options(parser: argparse.ArgumentParser, **kwargs) -> None:
    parser.add_argument("--config", type=Path, help="Config file (default ~/.config/sosh/config.json)", **kwargs)
    parser.add_argument("--prompt", help="Prompt text (default '%% ')", **kwargs)
    parser.add_argument("--no-banner", action="store_true", help="Do not print the start banner", **kwargs)
    parser.add_argument("--no-history", action="store_true", help="Do not keep a history file", **kwargs)
    parser.add_argument("--max-args", type=int, help="Max argv entries for external commands", **kwargs)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sosh",
        description="sosh: minimal interactive command shell",
    )
    _add_common_options(parser)
    parser.add_argument("--version", action="version", version=f"sosh {__version__}")

    sub = parser.add_subparsers(dest="subcmd")
    p_config = sub.add_parser("config", help="Write settings to the config file")
    # Unset options must not overwrite values given before the subcommand
    _add_common_options(p_config, default=argparse.SUPPRESS)
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = _apply_overrides(Settings.load(args.config), args)

    if args.subcmd == "config":
        raise SystemExit(run_config(settings, args.config))

    try:
        rc = Interpreter(settings, console=console, err_console=err_console).run()
    except KeyboardInterrupt:
        console.print()
        raise SystemExit(130)
    raise SystemExit(rc)


if __name__ == "__main__":
    main()
