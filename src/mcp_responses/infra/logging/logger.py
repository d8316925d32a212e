from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from dependency_injector.resources import Resource

from .handlers import build_console_handler, build_session_file_handler, session_log_path


class ConversationLogger(Resource):
    """Structured logger for conversation runs.

    Keyword arguments to the log methods become top-level fields of the JSON
    line. Without a session id nothing is written to disk.
    """

    def init(
        self,
        *,
        session_id: str | None = None,
        logs_dir: Path,
        logger_name: str = "mcp_responses",
        console_output: bool = False,
        level: str = "INFO",
    ) -> "ConversationLogger":
        """Attach the session file and console handlers.

        Args:
            session_id: Names the `<logs_dir>/<session_id>.jsonl` file (no file when None)
            logs_dir: Directory for session logs
            logger_name: stdlib logger to configure
            console_output: Mirror events to stderr
            level: Logging level name; unknown names fall back to INFO

        Returns:
            Self, as the provided resource
        """
        numeric_level = logging.getLevelName(level.upper())
        if not isinstance(numeric_level, int):
            numeric_level = logging.INFO

        self.session_id = session_id
        self.log_path = session_log_path(logs_dir, session_id) if session_id else None

        self._logger = logging.getLogger(logger_name)
        self._logger.setLevel(numeric_level)
        self._logger.propagate = False
        self._logger.handlers.clear()

        self._handlers: list[logging.Handler] = []
        if session_id:
            self._handlers.append(build_session_file_handler(logs_dir, session_id, level=numeric_level))
        if console_output:
            self._handlers.append(build_console_handler(level=numeric_level))
        for handler in self._handlers or [logging.NullHandler()]:
            self._logger.addHandler(handler)

        return self

    def shutdown(self, resource: "ConversationLogger") -> None:
        # Closing releases the session file so it can be read back right away
        for handler in self._handlers:
            handler.flush()
            handler.close()
        self._logger.handlers.clear()

    def _log(self, level: int, message: str, fields: dict[str, Any], exc_info: bool = False) -> None:
        self._logger.log(level, message, extra=fields or None, exc_info=exc_info)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs, exc_info=exc_info)

    def exception(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs, exc_info=True)
