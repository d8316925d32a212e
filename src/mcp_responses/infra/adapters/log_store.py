from __future__ import annotations

from pathlib import Path

from ..logging.log_summary import (
    format_single_summary,
    format_summary_table,
    parse_log_details,
    summarize_logs,
)


class LogStore:
    """Reads session JSONL logs written by ConversationLogger."""

    def __init__(self, *, logs_dir: Path) -> None:
        self._logs_dir = Path(logs_dir)

    def read_log(self, session_id: str, verbose: bool) -> list[str]:
        """Read and format log for a single session.

        Raises:
            FileNotFoundError: If log file doesn't exist
        """
        log_fp = self._logs_dir / f"{session_id}.jsonl"
        if not log_fp.exists():
            raise FileNotFoundError(f"Log file not found: {log_fp}")

        if verbose:
            return log_fp.read_text(encoding="utf-8").splitlines()

        return format_single_summary(parse_log_details(log_fp))

    def summarize_all(self, verbose: bool) -> list[str]:
        return format_summary_table(summarize_logs(self._logs_dir), verbose=verbose)
