from pathlib import Path

import pytest
from helpers import mark_by_dir


TESTS = Path(__file__).parent


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path, monkeypatch):
    # Keep conversation logs out of the real user cache dir
    monkeypatch.setenv("MCP_RESPONSES_DIRECTORIES__HOME", str(tmp_path / "home"))
    yield


def pytest_collection_modifyitems(config, items):
    # Mark tests by directory structure
    mark_by_dir(items, TESTS / "mcp_responses" / "core", pytest.mark.unit)
    mark_by_dir(items, TESTS / "mcp_responses" / "shared", pytest.mark.unit)
    mark_by_dir(items, TESTS / "mcp_responses" / "infra", pytest.mark.integration)
    mark_by_dir(items, TESTS / "mcp_responses" / "app", pytest.mark.e2e)
