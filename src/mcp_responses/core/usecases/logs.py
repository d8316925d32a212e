from __future__ import annotations

from ..ports import LogStorePort


class LogsUseCase:
    def __init__(self, *, log_store: LogStorePort) -> None:
        self._log_store = log_store

    def execute(self, session_id: str | None, verbose: bool) -> list[str]:
        if session_id:
            return self._log_store.read_log(session_id, verbose)
        return self._log_store.summarize_all(verbose)
