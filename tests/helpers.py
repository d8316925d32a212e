from pathlib import Path
from typing import Any, Iterable, Optional

from mcp_responses.core.domain.models import ServiceResponse, TokenUsage


def mark_by_dir(items, base_dir, marker):
    base = Path(base_dir).resolve()
    for item in items:
        p = getattr(item, "path", None)
        p = Path(p) if p is not None else Path(str(getattr(item, "fspath")))
        try:
            p.resolve().relative_to(base)
        except ValueError:
            continue
        item.add_marker(marker)


class FakeLogger:
    """Collects structured log events as (level, message, fields)."""

    def __init__(self):
        self.events: list[tuple[str, str, dict[str, Any]]] = []

    def debug(self, message, **kwargs):
        self.events.append(("debug", message, kwargs))

    def info(self, message, **kwargs):
        self.events.append(("info", message, kwargs))

    def warning(self, message, **kwargs):
        self.events.append(("warning", message, kwargs))

    def error(self, message, exc_info=False, **kwargs):
        self.events.append(("error", message, kwargs))

    def exception(self, message, **kwargs):
        self.events.append(("exception", message, kwargs))

    def messages(self) -> list[str]:
        return [message for _, message, _ in self.events]

    def find(self, message: str) -> list[dict[str, Any]]:
        return [fields for _, m, fields in self.events if m == message]


def response(*items, text: str = "", usage: Optional[TokenUsage] = None) -> ServiceResponse:
    return ServiceResponse(items=tuple(items), output_text=text, response_id="resp_test", usage=usage)


class ScriptedClient:
    """Returns queued responses (or raises queued exceptions) in order."""

    def __init__(self, replies: Iterable[Any], model: str = "gpt-4"):
        self.model = model
        self._replies = list(replies)
        self.calls: list[dict[str, Any]] = []

    async def create_response(self, input, *, servers=(), extra_request_fields=None):  # noqa: A002
        self.calls.append({
            "input": input if isinstance(input, str) else list(input),
            "servers": list(servers),
            "extra_request_fields": extra_request_fields,
        })
        if not self._replies:
            raise AssertionError("no scripted reply left")
        reply = self._replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


class RecordingGate:
    """Approval gate answering from a list of decisions, recording every prompt."""

    def __init__(self, decisions: Iterable[bool] = ()):
        self._decisions = list(decisions)
        self.prompts: list[tuple[str, str]] = []

    async def request(self, title, message):
        self.prompts.append((title, message))
        return self._decisions.pop(0) if self._decisions else False


class DictSecrets:
    def __init__(self, values: dict[str, str]):
        self._values = dict(values)
        self.requested: list[str] = []

    async def get(self, name):
        self.requested.append(name)
        return self._values.get(name)


class FakeClientFactory:
    def __init__(
        self,
        client,
        *,
        provider="openai",
        api_key_name="OPENAI-API-KEY",
        api_key_subject="OpenAI API key",
        requires_api_key=True,
    ):
        self.client = client
        self.requires_api_key = requires_api_key
        self.provider = provider
        self.api_key_name = api_key_name
        self.api_key_subject = api_key_subject
        self.created_with: list[tuple[str, Optional[str]]] = []

    def create(self, api_key, *, model=None):
        self.created_with.append((api_key, model))
        if model:
            self.client.model = model
        return self.client


def message_payload(text: str) -> dict[str, Any]:
    return {"type": "message", "role": "assistant", "content": [{"type": "output_text", "text": text}]}
