import pytest

from mcp_responses.infra.adapters.log_store import LogStore


def _logs_dir(tmp_path):
    logs_dir = tmp_path / "logs"
    logs_dir.mkdir()
    (logs_dir / "sess-1.jsonl").write_text(
        '{"message":"conversation_started","model":"gpt-4","prompt":"hi"}\n'
        '{"message":"llm_request","round_trip":1}\n'
        '{"message":"final_result","result":{"status":"ok","raw_text":"hello"}}\n',
        encoding="utf-8",
    )
    return logs_dir


def test_read_log_verbose_returns_raw_lines(tmp_path):
    lines = LogStore(logs_dir=_logs_dir(tmp_path)).read_log("sess-1", verbose=True)

    assert len(lines) == 3
    assert "conversation_started" in lines[0]


def test_read_log_summary(tmp_path):
    lines = LogStore(logs_dir=_logs_dir(tmp_path)).read_log("sess-1", verbose=False)

    assert lines[0] == "Session: sess-1"
    assert "Status:  ok" in lines
    assert lines[-1] == "hello"


def test_read_log_not_found(tmp_path):
    with pytest.raises(FileNotFoundError):
        LogStore(logs_dir=_logs_dir(tmp_path)).read_log("nope", verbose=False)


def test_summarize_all(tmp_path):
    lines = LogStore(logs_dir=_logs_dir(tmp_path)).summarize_all(verbose=False)

    assert len(lines) == 2
    assert "sess-1" in lines[1]


def test_summarize_all_empty(tmp_path):
    empty = tmp_path / "empty"
    empty.mkdir()
    assert LogStore(logs_dir=empty).summarize_all(verbose=False) == ["No logs found."]
