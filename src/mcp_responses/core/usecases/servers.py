from __future__ import annotations

from ..domain.ledger import ToolUsageLedger
from ..domain.registry import ToolServerRegistry


class ServersUseCase:
    """Describe configured tool servers together with what the ledger knows about them."""

    def __init__(self, *, registry: ToolServerRegistry, ledger: ToolUsageLedger) -> None:
        self._registry = registry
        self._ledger = ledger

    def execute(self) -> list[dict[str, object]]:
        used = self._ledger.tools_used
        rows: list[dict[str, object]] = []
        for server in self._registry:
            rows.append({
                "label": server.label,
                "endpoint": server.endpoint,
                "description": server.description,
                "approval_policy": server.approval_policy.value,
                "allowed_tools": sorted(server.allowed_tools),
                "auth_secret_name": server.auth_secret_name,
                "tools_listed": [t.name for t in self._ledger.tools_for(server.label)],
                "tools_used": sorted(
                    marker.split(".", 1)[1] for marker in used if marker.startswith(f"{server.label}.")
                ),
            })
        return rows
