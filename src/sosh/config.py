from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from .env import load_env_files

APP = "sosh"


def config_dir() -> Path:
    """
    Cross-platform config directory:
      - Windows: %APPDATA%\\sosh
      - macOS/Linux: $XDG_CONFIG_HOME/sosh or ~/.config/sosh
    """
    if os.name == "nt":
        base = os.environ.get("APPDATA") or str(Path.home())
        return Path(base) / APP
    return Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config"))) / APP


def config_path() -> Path:
    return config_dir() / "config.json"


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in ("1", "true", "yes", "on", "sim"):
        return True
    if s in ("0", "false", "no", "off", "nao", "não"):
        return False
    return default


def _as_positive_int(value: Any, default: int) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        return default
    return n if n > 0 else default


@dataclass
class Settings:
    prompt: str = "% "
    show_banner: bool = True
    max_args: int = 63           # argv entries for external commands, name included
    max_line_length: int = 1023  # characters kept from one input line
    history_enabled: bool = True

    @staticmethod
    def from_mapping(data: Mapping[str, Any]) -> "Settings":
        return Settings(
            prompt=str(data.get("prompt", Settings.prompt)),
            show_banner=_as_bool(data.get("show_banner", Settings.show_banner), Settings.show_banner),
            max_args=_as_positive_int(data.get("max_args", Settings.max_args), Settings.max_args),
            max_line_length=_as_positive_int(
                data.get("max_line_length", Settings.max_line_length), Settings.max_line_length
            ),
            history_enabled=_as_bool(
                data.get("history_enabled", Settings.history_enabled), Settings.history_enabled
            ),
        )

    @staticmethod
    def load(path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        path = path or config_path()

        # Priority: config dir .env < current dir .env < existing env vars
        if environ is None:
            load_env_files(config_dir())
            environ = os.environ

        data: dict = {}
        if path.exists():
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError):
                data = {}
            if not isinstance(data, dict):
                data = {}

        s = Settings.from_mapping(data)

        # Environment overrides (highest priority)
        s.prompt = environ.get("SOSH_PROMPT", s.prompt)
        s.show_banner = _as_bool(environ.get("SOSH_BANNER", s.show_banner), s.show_banner)
        s.max_args = _as_positive_int(environ.get("SOSH_MAX_ARGS", s.max_args), s.max_args)
        s.max_line_length = _as_positive_int(environ.get("SOSH_MAX_LINE", s.max_line_length), s.max_line_length)
        s.history_enabled = _as_bool(environ.get("SOSH_HISTORY", s.history_enabled), s.history_enabled)
        return s

    def save(self, path: Optional[Path] = None) -> Path:
        path = path or config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(asdict(self), indent=2), encoding="utf-8")
        return path
