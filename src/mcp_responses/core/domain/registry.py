from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping

from .exceptions import ServerNotFoundError
from .models import ApprovalPolicy, ToolServerConfig


class ToolServerRegistry:
    """Static set of remote tool servers keyed by label."""

    def __init__(self, servers: Iterable[ToolServerConfig]) -> None:
        self._servers: dict[str, ToolServerConfig] = {}
        for server in servers:
            if server.label in self._servers:
                raise ValueError(f"Duplicate tool server label: {server.label}")
            self._servers[server.label] = server

    @classmethod
    def from_mappings(cls, entries: Iterable[Mapping[str, Any]] | None) -> "ToolServerRegistry":
        """Build from plain mappings, as produced by the settings container."""
        servers = []
        for entry in entries or []:
            servers.append(
                ToolServerConfig(
                    label=entry["label"],
                    endpoint=str(entry["endpoint"]),
                    description=entry.get("description"),
                    auth_secret_name=entry.get("auth_secret_name"),
                    approval_policy=ApprovalPolicy.parse(entry.get("approval_policy", ApprovalPolicy.NEVER)),
                    allowed_tools=frozenset(entry.get("allowed_tools") or ()),
                )
            )
        return cls(servers)

    def __iter__(self) -> Iterator[ToolServerConfig]:
        return iter(self._servers.values())

    def __len__(self) -> int:
        return len(self._servers)

    def __contains__(self, label: object) -> bool:
        return label in self._servers

    def get(self, label: str) -> ToolServerConfig:
        try:
            return self._servers[label]
        except KeyError:
            raise ServerNotFoundError(label) from None

    def needs_approval(self, server_label: str, tool_name: str) -> bool:
        """Whether a call to `tool_name` pauses for human confirmation.

        Names outside a non-empty allow-list are never called by the service,
        so they never need approval either.
        """
        server = self.get(server_label)
        if server.allowed_tools and tool_name not in server.allowed_tools:
            return False
        return server.approval_policy is ApprovalPolicy.ALWAYS
