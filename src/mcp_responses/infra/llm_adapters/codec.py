"""Mapping between Responses API payloads and domain response items."""

from __future__ import annotations

import json
from typing import Any, Iterable, Mapping

from ...core.domain.exceptions import MalformedResponseError
from ...core.domain.models import (
    ApprovalRequest,
    ApprovalResponse,
    ConversationItem,
    PlainItem,
    ResponseItem,
    ToolCall,
    ToolDefinition,
    ToolDefinitionList,
    ToolServerConfig,
)
from ...shared.to_jsonable import to_jsonable


def encode_server(server: ToolServerConfig) -> dict[str, Any]:
    """Build a `{"type": "mcp", ...}` tools entry for one server."""
    tool_obj: dict[str, Any] = {
        "type": "mcp",
        "server_label": server.label,
        "server_url": server.endpoint,
        "require_approval": server.approval_policy.value,
    }
    if server.description:
        tool_obj["server_description"] = server.description
    if server.allowed_tools:
        tool_obj["allowed_tools"] = sorted(server.allowed_tools)
    if server.auth_token:
        tool_obj["headers"] = {"Authorization": f"Bearer {server.auth_token}"}
    return tool_obj


def as_dict(item: Any) -> dict[str, Any]:
    if isinstance(item, Mapping):
        return dict(item)
    if hasattr(item, "model_dump"):
        return item.model_dump(mode="json", exclude_none=True)
    converted = to_jsonable(item)
    if not isinstance(converted, dict):
        raise MalformedResponseError(f"Output item is not an object: {item!r}")
    return converted


def _require(raw: Mapping[str, Any], key: str) -> Any:
    value = raw.get(key)
    if value is None:
        raise MalformedResponseError(f"{raw.get('type')} item is missing '{key}'")
    return value


def _annotations(tool: Mapping[str, Any]) -> str:
    annotations = tool.get("annotations")
    if annotations:
        return json.dumps(annotations, ensure_ascii=False, sort_keys=True)
    return tool.get("description") or ""


def decode_item(item: Any) -> ResponseItem:
    """Classify one output item by its `type` tag."""
    raw = as_dict(item)
    kind = raw.get("type")

    if kind == "mcp_list_tools":
        tools = tuple(
            ToolDefinition(name=_require(tool, "name"), annotations=_annotations(tool))
            for tool in raw.get("tools") or []
        )
        return ToolDefinitionList(server_label=_require(raw, "server_label"), tools=tools, raw=raw)
    if kind == "mcp_call":
        return ToolCall(server_label=_require(raw, "server_label"), tool_name=_require(raw, "name"), raw=raw)
    if kind == "mcp_approval_request":
        return ApprovalRequest(
            id=_require(raw, "id"),
            server_label=_require(raw, "server_label"),
            tool_name=_require(raw, "name"),
            arguments=raw.get("arguments"),
            raw=raw,
        )
    return PlainItem(raw=raw)


def decode_items(items: Iterable[Any]) -> tuple[ResponseItem, ...]:
    return tuple(decode_item(item) for item in items)


def encode_item(item: ConversationItem) -> dict[str, Any]:
    """Serialize a buffer entry back into a request input item."""
    if isinstance(item, ApprovalResponse):
        return {
            "type": "mcp_approval_response",
            "approval_request_id": item.request_id,
            "approve": item.approved,
        }
    if item.raw:
        return dict(item.raw)
    # Items built locally (tests, replays) carry no raw payload.
    if isinstance(item, ToolDefinitionList):
        return {
            "type": "mcp_list_tools",
            "server_label": item.server_label,
            "tools": [{"name": t.name} for t in item.tools],
        }
    if isinstance(item, ToolCall):
        return {"type": "mcp_call", "server_label": item.server_label, "name": item.tool_name}
    if isinstance(item, ApprovalRequest):
        encoded: dict[str, Any] = {
            "type": "mcp_approval_request",
            "id": item.id,
            "server_label": item.server_label,
            "name": item.tool_name,
        }
        if item.arguments is not None:
            encoded["arguments"] = item.arguments
        return encoded
    raise MalformedResponseError("Plain item has no payload to forward")


def extract_output_text(raw_items: Iterable[Mapping[str, Any]]) -> str:
    """Join `output_text` parts of message items, as the SDK's `output_text` does."""
    texts: list[str] = []
    for raw in raw_items:
        if raw.get("type") != "message":
            continue
        for part in raw.get("content") or []:
            if isinstance(part, Mapping) and part.get("type") == "output_text":
                texts.append(part.get("text") or "")
    return "".join(texts)
