from __future__ import annotations

import threading
from typing import Iterable

from .models import LedgerSnapshot, ToolDefinition, ToolInfo


class ToolUsageLedger:
    """Tools announced per server and tools actually invoked.

    Grows monotonically. Safe to share between conversations running on
    different threads; every insert-if-absent happens under one lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listed: dict[str, dict[str, ToolInfo]] = {}
        self._used: set[str] = set()

    def record_definitions(self, server_label: str, definitions: Iterable[ToolDefinition]) -> list[ToolInfo]:
        """Insert unseen tool names for a server; returns the newly added entries.

        A re-announced name keeps its first annotations.
        """
        added: list[ToolInfo] = []
        with self._lock:
            known = self._listed.setdefault(server_label, {})
            for definition in definitions:
                if definition.name in known:
                    continue
                info = ToolInfo(name=definition.name, annotations=definition.annotations)
                known[definition.name] = info
                added.append(info)
        return added

    def record_call(self, server_label: str, tool_name: str) -> bool:
        """Add the `server.tool` usage marker; False if it was already there."""
        marker = f"{server_label}.{tool_name}"
        with self._lock:
            if marker in self._used:
                return False
            self._used.add(marker)
            return True

    def tools_for(self, server_label: str) -> list[ToolInfo]:
        with self._lock:
            return list(self._listed.get(server_label, {}).values())

    @property
    def tools_listed(self) -> dict[str, list[ToolInfo]]:
        with self._lock:
            return {label: list(tools.values()) for label, tools in self._listed.items()}

    @property
    def tools_used(self) -> set[str]:
        with self._lock:
            return set(self._used)

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(tools_listed=self.tools_listed, tools_used=self.tools_used)
