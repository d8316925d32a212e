from __future__ import annotations

import asyncio
import inspect
from typing import Awaitable, Callable, Optional, Union

from ..core.ports import ApprovalGatePort, LoggerPort


ApprovalHandler = Callable[[str, str], Union[bool, Awaitable[bool]]]


class ApprovalNotifier:
    """Approval gate that forwards to whichever UI handler is subscribed.

    With no handler attached every request is denied.
    """

    def __init__(self) -> None:
        self._handler: Optional[ApprovalHandler] = None

    @property
    def has_handler(self) -> bool:
        return self._handler is not None

    def subscribe(self, handler: ApprovalHandler) -> None:
        self._handler = handler

    def unsubscribe(self, handler: Optional[ApprovalHandler] = None) -> None:
        if handler is None or handler is self._handler:
            self._handler = None

    async def request(self, title: str, message: str) -> bool:
        handler = self._handler
        if handler is None:
            return False
        result = handler(title, message)
        if inspect.isawaitable(result):
            result = await result
        return bool(result)


class TimeoutApprovalGate:
    """Denies a request when nobody answers within `timeout` seconds.

    `timeout=None` waits forever.
    """

    def __init__(
        self,
        *,
        inner: ApprovalGatePort,
        timeout: Optional[float],
        logger: LoggerPort,
    ) -> None:
        self._inner = inner
        self._timeout = timeout
        self._logger = logger

    async def request(self, title: str, message: str) -> bool:
        if self._timeout is None:
            return await self._inner.request(title, message)
        try:
            return await asyncio.wait_for(self._inner.request(title, message), timeout=self._timeout)
        except asyncio.TimeoutError:
            self._logger.warning(
                "approval_timeout",
                type="approval_timeout",
                timeout_seconds=self._timeout,
                approval_message=message,
            )
            return False


def auto_approve(title: str, message: str) -> bool:  # noqa: ARG001
    return True
