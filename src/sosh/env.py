"""Minimal .env support for sosh settings.

Only ``SOSH_*`` style ``KEY=value`` lines matter to sosh, but any key is
accepted. Variables already present in the environment always win; a .env
in the working directory beats the one in the config directory.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterable, MutableMapping, Optional


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_env_file(path: Path) -> Dict[str, str]:
    """Parse ``path`` into key/value pairs.

    Blank lines and ``#`` comments are skipped, an ``export`` prefix is
    allowed, and surrounding quotes are removed from values. A missing or
    unreadable file yields an empty mapping.
    """
    result: Dict[str, str] = {}
    try:
        content = path.read_text(encoding="utf-8")
    except OSError:
        return result

    for raw in content.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].strip()
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        result[key] = _unquote(value.strip())
    return result


def env_files(config_dir: Path) -> Iterable[Path]:
    """Candidate .env files, lowest priority first."""
    return (config_dir / ".env", Path.cwd() / ".env")


def load_env_files(config_dir: Path, environ: Optional[MutableMapping[str, str]] = None) -> Dict[str, str]:
    """Merge .env files into ``environ`` without overwriting existing keys.

    Returns the keys that were actually set.
    """
    environ = os.environ if environ is None else environ
    combined: Dict[str, str] = {}
    for env_file in env_files(config_dir):
        combined.update(parse_env_file(env_file))

    applied: Dict[str, str] = {}
    for key, value in combined.items():
        if key not in environ:
            environ[key] = value
            applied[key] = value
    return applied
