from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Mapping, Union


class ApprovalPolicy(str, Enum):
    """Per-server rule for pausing tool calls on human confirmation."""

    NEVER = "never"
    ALWAYS = "always"

    @classmethod
    def parse(cls, value: "ApprovalPolicy | str") -> "ApprovalPolicy":
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        aliases = {
            "never": cls.NEVER,
            "neverrequireapproval": cls.NEVER,
            "always": cls.ALWAYS,
            "alwaysrequireapproval": cls.ALWAYS,
        }
        try:
            return aliases[normalized]
        except KeyError:
            raise ValueError(f"Unknown approval policy: {value!r}") from None


@dataclass(frozen=True)
class ToolServerConfig:
    """Remote tool server attached to every request.

    `allowed_tools` is the filter the reasoning service is asked to apply;
    an empty set means no filter.
    """

    label: str
    endpoint: str
    description: str | None = None
    auth_token: str | None = field(default=None, repr=False)
    auth_secret_name: str | None = None
    approval_policy: ApprovalPolicy = ApprovalPolicy.NEVER
    allowed_tools: frozenset[str] = frozenset()


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    annotations: str = ""


@dataclass(frozen=True)
class PlainItem:
    """Output item the driver carries forward without interpreting."""

    raw: Mapping[str, Any]


@dataclass(frozen=True)
class ToolDefinitionList:
    server_label: str
    tools: tuple[ToolDefinition, ...]
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class ToolCall:
    server_label: str
    tool_name: str
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class ApprovalRequest:
    id: str
    server_label: str
    tool_name: str
    arguments: str | None = None
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class ApprovalResponse:
    request_id: str
    approved: bool


ResponseItem = Union[PlainItem, ToolDefinitionList, ToolCall, ApprovalRequest]
ConversationItem = Union[ResponseItem, ApprovalResponse]


@dataclass(frozen=True, eq=False)
class ToolInfo:
    """Tool announced by a server. Identity is the tool name alone."""

    name: str
    annotations: str = ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ToolInfo):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)


@dataclass(frozen=True)
class TokenUsage:
    input_tokens: int | None = None
    output_tokens: int | None = None
    total_tokens: int | None = None


@dataclass(frozen=True)
class ServiceResponse:
    """One reasoning-service reply, decoded into domain items."""

    items: tuple[ResponseItem, ...]
    output_text: str
    response_id: str | None = None
    usage: TokenUsage | None = None


@dataclass(frozen=True)
class LedgerSnapshot:
    tools_listed: dict[str, list[ToolInfo]]
    tools_used: set[str]


ResultStatus = Literal["ok", "empty", "error", "not_configured", "turn_limit"]


@dataclass
class ConversationResult:
    text: str
    status: ResultStatus = "ok"
    round_trips: int = 0
    approvals: list[ApprovalResponse] = field(default_factory=list)
    ledger: LedgerSnapshot | None = None

    @property
    def succeeded(self) -> bool:
        return self.status in ("ok", "empty")
