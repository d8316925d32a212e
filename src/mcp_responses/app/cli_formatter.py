"""CLI output formatting utilities for human-readable display."""

from __future__ import annotations

from ..core.domain.models import ConversationResult


def result_to_dict(result: ConversationResult) -> dict[str, object]:
    ledger = result.ledger
    return {
        "status": result.status,
        "text": result.text,
        "round_trips": result.round_trips,
        "approvals": [
            {"request_id": a.request_id, "approved": a.approved} for a in result.approvals
        ],
        "tools_listed": {
            label: [{"name": t.name, "annotations": t.annotations} for t in tools]
            for label, tools in (ledger.tools_listed.items() if ledger else [])
        },
        "tools_used": sorted(ledger.tools_used) if ledger else [],
    }


def format_conversation_result(result: ConversationResult) -> str:
    """Format a conversation result for human-readable CLI output.

    The answer text comes first; tool activity follows when there was any.
    """
    lines = [result.text]

    ledger = result.ledger
    has_activity = bool(result.approvals) or bool(ledger and (ledger.tools_listed or ledger.tools_used))
    if not has_activity:
        return "\n".join(lines)

    lines.append("")
    lines.append("-" * 80)
    lines.append(f"Round-trips: {result.round_trips}")

    if result.approvals:
        granted = sum(1 for a in result.approvals if a.approved)
        lines.append(f"Approvals: {granted} approved, {len(result.approvals) - granted} denied")

    if ledger:
        for label, tools in sorted(ledger.tools_listed.items()):
            names = ", ".join(t.name for t in tools) or "(none)"
            lines.append(f"Tools listed by {label}: {names}")
        if ledger.tools_used:
            lines.append(f"Tools used: {', '.join(sorted(ledger.tools_used))}")

    return "\n".join(lines)


def format_server_list(servers: list[dict[str, object]]) -> str:
    if not servers:
        return "No tool servers configured."

    lines = [f"Found {len(servers)} tool servers:", ""]
    for server in servers:
        lines.append(f"{server['label']}  {server['endpoint']}")
        if server.get("description"):
            lines.append(f"  {server['description']}")
        lines.append(f"  Approval: {server['approval_policy']}")
        allowed = server.get("allowed_tools") or []
        lines.append(f"  Allowed tools: {', '.join(allowed) if allowed else 'all'}")  # type: ignore[arg-type]
        if server.get("auth_secret_name"):
            lines.append(f"  Auth secret: {server['auth_secret_name']}")
    return "\n".join(lines)
