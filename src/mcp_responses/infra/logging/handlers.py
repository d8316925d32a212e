from __future__ import annotations

import logging
from logging import Handler
from pathlib import Path

from .formatters import ConsoleFormatter, JSONFormatter


def session_log_path(logs_dir: Path, session_id: str) -> Path:
    return Path(logs_dir) / f"{session_id}.jsonl"


def build_session_file_handler(logs_dir: Path, session_id: str, level: int = logging.INFO) -> Handler:
    """Append JSON lines to `<logs_dir>/<session_id>.jsonl`.

    Reusing a session id continues the same file.
    """
    path = session_log_path(logs_dir, session_id)
    path.parent.mkdir(parents=True, exist_ok=True)
    h = logging.FileHandler(path, encoding="utf-8", mode="a")
    h.setLevel(level)
    h.setFormatter(JSONFormatter(session_id=session_id))
    return h


def build_console_handler(level: int = logging.INFO) -> Handler:
    # stderr, so --json output on stdout stays parseable
    h = logging.StreamHandler()
    h.setLevel(level)
    h.setFormatter(ConsoleFormatter())
    return h
