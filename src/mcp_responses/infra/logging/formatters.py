from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter


# Fields shown inline on the console, in this order
CONSOLE_FIELDS = ("round_trip", "server_label", "tool_name", "request_id", "approved", "status")


class JSONFormatter(JsonFormatter):
    """JSON lines formatter for conversation logs.

    Structured fields passed through logging `extra` end up as top-level keys;
    every line also carries the session id of the file it is written to.
    """

    def __init__(self, *args, session_id: str | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._session_id = session_id

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['message'] = record.getMessage()
        log_record.setdefault('timestamp', self.formatTime(record, '%Y-%m-%d %H:%M:%S'))
        if self._session_id:
            log_record.setdefault('session_id', self._session_id)


class ConsoleFormatter(logging.Formatter):
    """One line per event: time, level, event name, then the interesting fields."""

    def __init__(self) -> None:
        super().__init__(fmt='%(asctime)s %(levelname)-7s %(message)s', datefmt='%H:%M:%S')

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = [
            f"{name}={getattr(record, name)}"
            for name in CONSOLE_FIELDS
            if getattr(record, name, None) is not None
        ]
        return f"{line} {' '.join(context)}" if context else line
