from __future__ import annotations

from .logger import ConversationLogger
from .handlers import build_console_handler, build_session_file_handler, session_log_path
from .formatters import ConsoleFormatter, JSONFormatter

__all__ = [
    "ConversationLogger",
    "build_console_handler",
    "build_session_file_handler",
    "session_log_path",
    "ConsoleFormatter",
    "JSONFormatter",
]
