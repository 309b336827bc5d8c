from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Iterable, List


def _sep() -> str:
    return ';' if os.name == 'nt' else ':'


DEFAULT_REPL_HOST = "127.0.0.1"
DEFAULT_REPL_PORT = 8765
DEFAULT_HISTORY_LIMIT = 50


def paths_from_env(var: str, defaults: Iterable[Path]) -> List[Path]:
    raw = os.environ.get(var)
    if not raw:
        return [Path(p) for p in defaults]
    sep = _sep()
    return [Path(p.strip()) for p in raw.split(sep) if p.strip()]


def int_from_env(var: str, default: int) -> int:
    raw = os.environ.get(var, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{var} must be an integer, got {raw!r}") from None


def get_prelude_paths() -> List[Path]:
    """Source files evaluated before user code by the CLI (GOSP_PRELUDE_PATH)."""
    return paths_from_env('GOSP_PRELUDE_PATH', [])


def get_repl_host() -> str:
    return os.environ.get('GOSP_REPL_HOST') or DEFAULT_REPL_HOST


def get_repl_port() -> int:
    return int_from_env('GOSP_REPL_PORT', DEFAULT_REPL_PORT)


def get_history_limit() -> int:
    return int_from_env('GOSP_HISTORY_LIMIT', DEFAULT_HISTORY_LIMIT)


def get_log_level() -> int:
    name = os.environ.get('GOSP_LOG_LEVEL', 'WARNING').strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING
