from __future__ import annotations

import asyncio

from .config import AppConfig
from .container import Container
from ..core.domain.models import ConversationResult
from ..infra.approval import ApprovalHandler


def _create_container(config: AppConfig | None = None) -> Container:
    """Create and initialize a container.

    Args:
        config: Optional config. If None, loads from environment variables.

    Returns:
        Initialized container instance
    """
    container = Container()

    if config is None:
        config = AppConfig()

    container.config.from_pydantic(config)
    container.init_resources()

    return container


async def send_async(
    prompt: str,
    *,
    model: str | None = None,
    approval_handler: ApprovalHandler | None = None,
    container: Container | None = None,
) -> ConversationResult:
    """Run a prompt with the configured tool servers attached.

    Pass a long-lived `container` to keep one secret cache and one tool
    usage ledger across calls.

    Args:
        prompt: User prompt
        model: Model override (optional)
        approval_handler: Callable(title, message) -> bool or awaitable bool;
            without one every approval request is denied
        container: Initialized container (optional, created from env otherwise)

    Returns:
        Conversation result; failures are reported in `status`/`text`, never raised
    """
    owns_container = container is None
    if container is None:
        container = _create_container()

    notifier = container.approval_notifier()
    if approval_handler is not None:
        notifier.subscribe(approval_handler)
    try:
        uc = container.send_uc()
        return await uc.execute(prompt, model=model)
    finally:
        if approval_handler is not None:
            notifier.unsubscribe(approval_handler)
        if owns_container:
            container.shutdown_resources()


def send(
    prompt: str,
    *,
    model: str | None = None,
    approval_handler: ApprovalHandler | None = None,
    config: AppConfig | None = None,
) -> ConversationResult:
    """Blocking wrapper around `send_async` with a fresh container.

    Args:
        config: Optional config for testing. If None, loads from env vars.
    """
    container = _create_container(config)
    try:
        return asyncio.run(
            send_async(prompt, model=model, approval_handler=approval_handler, container=container)
        )
    finally:
        container.shutdown_resources()


def ask(
    prompt: str,
    *,
    model: str | None = None,
    config: AppConfig | None = None,
) -> ConversationResult:
    """Single round-trip without tool servers."""
    container = _create_container(config)
    try:
        uc = container.ask_uc()
        return asyncio.run(uc.execute(prompt, model=model))
    finally:
        container.shutdown_resources()


def list_servers(config: AppConfig | None = None) -> list[dict[str, object]]:
    """Describe configured tool servers."""
    container = _create_container(config)
    try:
        return container.servers_uc().execute()
    finally:
        container.shutdown_resources()


def logs(
    session_id: str | None = None,
    verbose: bool = False,
    config: AppConfig | None = None,
) -> list[str]:
    """Show conversation logs.

    Args:
        session_id: Optional session id. If None, shows summary of all runs.
        verbose: Show raw lines for one session, per-tool counts for the table
        config: Optional config for testing. If None, loads from env vars.

    Returns:
        List of log lines
    """
    container = _create_container(config)
    try:
        return container.logs_uc().execute(session_id, verbose)
    finally:
        container.shutdown_resources()
