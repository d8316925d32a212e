from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..domain.exceptions import TurnLimitExceededError
from ..domain.ledger import ToolUsageLedger
from ..domain.models import (
    ApprovalRequest,
    ApprovalResponse,
    ConversationItem,
    ConversationResult,
    PlainItem,
    ResponseItem,
    ServiceResponse,
    ToolCall,
    ToolDefinitionList,
    ToolServerConfig,
)
from ..domain.registry import ToolServerRegistry
from ..ports import ApprovalGatePort, LoggerPort, ResponsesClientPort


APPROVAL_TITLE = "Tool approval required"
DEFAULT_MAX_ROUND_TRIPS = 10


def approval_message(request: ApprovalRequest) -> str:
    message = f"Allow tool '{request.tool_name}' on server '{request.server_label}'?"
    if request.arguments:
        message += f"\nArguments: {request.arguments}"
    return message


def extra_request_fields(
    model: str,
    *,
    tier_model: Optional[str],
    tier_fields: Optional[Mapping[str, Any]],
) -> Optional[dict[str, Any]]:
    """Raw payload fields for the reasoning tier; None for every other model."""
    if not tier_model or model != tier_model or not tier_fields:
        return None
    return dict(tier_fields)


class ConversationDriver:
    """Runs one prompt through the reasoning service until no approvals remain.

    Each response is classified in item order into the next request buffer.
    Approval requests are resolved one at a time through the approval gate;
    any response with at least one request triggers exactly one resubmission.
    """

    def __init__(
        self,
        *,
        client: ResponsesClientPort,
        registry: ToolServerRegistry,
        ledger: ToolUsageLedger,
        approval_gate: ApprovalGatePort,
        logger: LoggerPort,
        max_round_trips: int = DEFAULT_MAX_ROUND_TRIPS,
        extra_fields: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if max_round_trips < 1:
            raise ValueError("max_round_trips must be at least 1")
        self._client = client
        self._registry = registry
        self._ledger = ledger
        self._approval_gate = approval_gate
        self._logger = logger
        self._max_round_trips = max_round_trips
        self._extra_fields = dict(extra_fields) if extra_fields else None

    async def send(
        self,
        prompt: str,
        *,
        servers: Optional[Sequence[ToolServerConfig]] = None,
    ) -> ConversationResult:
        """Drive the conversation to a final answer.

        Args:
            prompt: User prompt, passed through unmodified
            servers: Attachments for this call (defaults to every registered server)

        Returns:
            Result with the final output text, round-trip count and decisions

        Raises:
            TurnLimitExceededError: If approvals keep coming past the cap
        """
        attached = list(servers) if servers is not None else list(self._registry)
        request_input: str | list[ConversationItem] = prompt
        approvals: list[ApprovalResponse] = []
        round_trips = 0

        while True:
            if round_trips >= self._max_round_trips:
                self._logger.error(
                    "turn_limit_exceeded",
                    type="turn_limit_exceeded",
                    max_round_trips=self._max_round_trips,
                )
                raise TurnLimitExceededError(self._max_round_trips)

            round_trips += 1
            self._logger.info(
                "llm_request",
                type="llm_request",
                model=self._client.model,
                round_trip=round_trips,
                input_items=1 if isinstance(request_input, str) else len(request_input),
                servers=[s.label for s in attached],
                extra_fields=sorted(self._extra_fields) if self._extra_fields else [],
            )
            response = await self._client.create_response(
                request_input,
                servers=attached,
                extra_request_fields=self._extra_fields,
            )
            self._log_usage(response, round_trips)

            buffer, decisions = await self.classify(response.items)
            approvals.extend(decisions)
            if not decisions:
                self._logger.info(
                    "llm_output",
                    type="llm_output",
                    model=self._client.model,
                    round_trips=round_trips,
                    raw_text_len=len(response.output_text),
                    raw_text=response.output_text,
                )
                return ConversationResult(
                    text=response.output_text,
                    round_trips=round_trips,
                    approvals=approvals,
                    ledger=self._ledger.snapshot(),
                )
            request_input = buffer

    async def classify(
        self, items: Sequence[ResponseItem]
    ) -> tuple[list[ConversationItem], list[ApprovalResponse]]:
        """Build the next request buffer from response items, in order.

        Returns:
            (buffer, decisions) where every ApprovalRequest in the buffer is
            immediately followed by its ApprovalResponse
        """
        buffer: list[ConversationItem] = []
        decisions: list[ApprovalResponse] = []
        for item in items:
            match item:
                case ToolDefinitionList():
                    self.on_tool_definition_list(item)
                    buffer.append(item)
                case ToolCall():
                    self.on_tool_call(item)
                    buffer.append(item)
                case ApprovalRequest():
                    decision = await self._resolve_approval(item)
                    buffer.append(item)
                    buffer.append(decision)
                    decisions.append(decision)
                case PlainItem():
                    buffer.append(item)
                case _:
                    raise TypeError(f"Unsupported response item: {type(item).__name__}")
        return buffer, decisions

    def on_tool_definition_list(self, item: ToolDefinitionList) -> None:
        added = self._ledger.record_definitions(item.server_label, item.tools)
        self._logger.info(
            "tool_definitions",
            type="tool_definitions",
            server_label=item.server_label,
            announced=[t.name for t in item.tools],
            added=[t.name for t in added],
        )

    def on_tool_call(self, item: ToolCall) -> None:
        is_new = self._ledger.record_call(item.server_label, item.tool_name)
        self._logger.info(
            "tool_called",
            type="tool_called",
            server_label=item.server_label,
            tool_name=item.tool_name,
            first_use=is_new,
        )

    async def _resolve_approval(self, request: ApprovalRequest) -> ApprovalResponse:
        if request.server_label in self._registry and not self._registry.needs_approval(
            request.server_label, request.tool_name
        ):
            self._logger.warning(
                "unexpected_approval_request",
                type="unexpected_approval_request",
                request_id=request.id,
                server_label=request.server_label,
                tool_name=request.tool_name,
            )

        self._logger.info(
            "approval_requested",
            type="approval_requested",
            request_id=request.id,
            server_label=request.server_label,
            tool_name=request.tool_name,
        )
        approved = bool(await self._approval_gate.request(APPROVAL_TITLE, approval_message(request)))
        self._logger.info(
            "approval_decided",
            type="approval_decided",
            request_id=request.id,
            server_label=request.server_label,
            tool_name=request.tool_name,
            approved=approved,
        )
        return ApprovalResponse(request_id=request.id, approved=approved)

    def _log_usage(self, response: ServiceResponse, round_trip: int) -> None:
        usage = response.usage
        if usage is None:
            return
        self._logger.info(
            "llm_usage",
            type="llm_usage",
            model=self._client.model,
            round_trip=round_trip,
            response_id=response.response_id,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            total_tokens=usage.total_tokens,
        )
