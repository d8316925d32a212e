import asyncio

import pytest

from helpers import FakeLogger
from mcp_responses.infra.approval import ApprovalNotifier, TimeoutApprovalGate, auto_approve


@pytest.mark.asyncio
async def test_no_handler_denies():
    notifier = ApprovalNotifier()

    assert notifier.has_handler is False
    assert await notifier.request("Tool approval required", "Allow?") is False


@pytest.mark.asyncio
async def test_sync_handler():
    seen = []

    def handler(title, message):
        seen.append((title, message))
        return True

    notifier = ApprovalNotifier()
    notifier.subscribe(handler)

    assert await notifier.request("t", "m") is True
    assert seen == [("t", "m")]


@pytest.mark.asyncio
async def test_async_handler():
    async def handler(title, message):
        await asyncio.sleep(0)
        return "yes"

    notifier = ApprovalNotifier()
    notifier.subscribe(handler)

    assert await notifier.request("t", "m") is True


@pytest.mark.asyncio
async def test_unsubscribe_only_removes_matching_handler():
    notifier = ApprovalNotifier()
    notifier.subscribe(auto_approve)

    notifier.unsubscribe(lambda t, m: False)
    assert notifier.has_handler

    notifier.unsubscribe(auto_approve)
    assert await notifier.request("t", "m") is False


@pytest.mark.asyncio
async def test_timeout_gate_denies_and_logs():
    async def never_answers(title, message):
        await asyncio.sleep(10)
        return True

    notifier = ApprovalNotifier()
    notifier.subscribe(never_answers)
    logger = FakeLogger()
    gate = TimeoutApprovalGate(inner=notifier, timeout=0.01, logger=logger)

    assert await gate.request("Tool approval required", "Allow tool 'x'?") is False
    assert logger.find("approval_timeout") == [{
        "type": "approval_timeout",
        "timeout_seconds": 0.01,
        "approval_message": "Allow tool 'x'?",
    }]


@pytest.mark.asyncio
async def test_timeout_gate_passes_answers_through():
    notifier = ApprovalNotifier()
    notifier.subscribe(auto_approve)
    logger = FakeLogger()

    assert await TimeoutApprovalGate(inner=notifier, timeout=5, logger=logger).request("t", "m") is True
    assert await TimeoutApprovalGate(inner=notifier, timeout=None, logger=logger).request("t", "m") is True
    assert logger.events == []
