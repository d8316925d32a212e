from types import SimpleNamespace

import pytest

import mcp_responses.infra.llm_adapters.openai_adapter as adapter_mod


class FakeResponses:
    def __init__(self, owner):
        self._owner = owner

    async def create(self, **kwargs):
        self._owner.requests.append(kwargs)
        if not self._owner.replies:
            raise AssertionError("no scripted reply left")
        return self._owner.replies.pop(0)


class FakeOpenAI:
    """Stands in for AsyncOpenAI; replies are shared by every instance."""

    def __init__(self):
        self.replies: list[SimpleNamespace] = []
        self.requests: list[dict] = []
        self.clients: list[dict] = []

    def __call__(self, api_key=None, base_url=None):
        self.clients.append({"api_key": api_key, "base_url": base_url})
        return SimpleNamespace(responses=FakeResponses(self))

    def reply(self, *output, text=None):
        self.replies.append(SimpleNamespace(output=list(output), output_text=text, usage=None, id="resp_fake"))


@pytest.fixture
def fake_openai(monkeypatch):
    fake = FakeOpenAI()
    monkeypatch.setattr(adapter_mod, "AsyncOpenAI", fake)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("STRIPE_OAUTH_ACCESS_TOKEN", "rk_test")
    return fake
