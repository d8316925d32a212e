from mcp_responses.core.usecases.logs import LogsUseCase


class FakeLogStore:
    def __init__(self):
        self.calls = []

    def read_log(self, session_id, verbose=False):
        self.calls.append(("read", session_id, verbose))
        return [f"log {session_id}"]

    def summarize_all(self, verbose=False):
        self.calls.append(("summary", verbose))
        return ["table"]


def test_logs_for_one_session():
    store = FakeLogStore()
    assert LogsUseCase(log_store=store).execute("20250101-abc", True) == ["log 20250101-abc"]
    assert store.calls == [("read", "20250101-abc", True)]


def test_logs_summary_without_session():
    store = FakeLogStore()
    assert LogsUseCase(log_store=store).execute(None, False) == ["table"]
    assert store.calls == [("summary", False)]
