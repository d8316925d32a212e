from __future__ import annotations

from dependency_injector import containers, providers

from .config import AppConfig
from ..core.domain.ledger import ToolUsageLedger
from ..core.domain.registry import ToolServerRegistry
from ..core.usecases.ask import AskUseCase
from ..core.usecases.logs import LogsUseCase
from ..core.usecases.send import SendPromptUseCase
from ..core.usecases.servers import ServersUseCase
from ..infra.adapters.log_store import LogStore
from ..infra.approval import ApprovalNotifier, TimeoutApprovalGate
from ..infra.llm_adapters import ResponsesClientFactory
from ..infra.logging import ConversationLogger
from ..infra.secrets import CachedSecretProvider, EnvSecretProvider


class Container(containers.DeclarativeContainer):
    """DI container with Pydantic BaseSettings support."""

    config = providers.Configuration(pydantic_settings=[AppConfig()])

    # Logger (Resource: manages lifecycle with init/shutdown)
    logger = providers.Resource(
        ConversationLogger,
        session_id=config.runtime.session_id,
        logs_dir=config.directories.logs_dir,
        logger_name=config.logging.logger_name,
        console_output=config.logging.console_output,
        level=config.logging.level,
    )

    # Secrets, cached for the lifetime of the container
    secret_source = providers.Singleton(
        EnvSecretProvider,
        prefix=config.secrets.env_prefix,
    )

    secrets = providers.Singleton(
        CachedSecretProvider,
        inner=secret_source,
        default_ttl=config.secrets.default_ttl_seconds,
        ttl_overrides=config.secrets.ttl_seconds,
    )

    client_factory = providers.Singleton(
        ResponsesClientFactory,
        provider=config.llm.provider_name,
        openai_api_key_name=config.secrets.openai_api_key_name,
        azure_api_key_name=config.secrets.azure_api_key_name,
        azure_endpoint=config.azure.endpoint,
        azure_deployment_name=config.azure.deployment_name,
        azure_use_entra_id=config.azure.use_entra_id,
        azure_scope=config.azure.scope,
    )

    # Tool servers (immutable) and the ledger (shared, grows for the container's life)
    registry = providers.Singleton(
        ToolServerRegistry.from_mappings,
        config.servers,
    )

    ledger = providers.Singleton(ToolUsageLedger)

    # Approvals: UI code subscribes a handler on the notifier
    approval_notifier = providers.Singleton(ApprovalNotifier)

    approval_gate = providers.Singleton(
        TimeoutApprovalGate,
        inner=approval_notifier,
        timeout=config.conversation.approval_timeout_seconds,
        logger=logger,
    )

    log_store = providers.Singleton(
        LogStore,
        logs_dir=config.directories.logs_dir,
    )

    # Use cases
    send_uc = providers.Factory(
        SendPromptUseCase,
        secrets=secrets,
        client_factory=client_factory,
        registry=registry,
        ledger=ledger,
        approval_gate=approval_gate,
        logger=logger,
        model=config.llm.model_name,
        max_round_trips=config.conversation.max_round_trips,
        reasoning_tier_model=config.llm.reasoning_tier_model,
        reasoning_tier_fields=config.llm.reasoning_tier_fields,
    )

    ask_uc = providers.Factory(
        AskUseCase,
        secrets=secrets,
        client_factory=client_factory,
        logger=logger,
        model=config.llm.model_name,
    )

    servers_uc = providers.Factory(
        ServersUseCase,
        registry=registry,
        ledger=ledger,
    )

    logs_uc = providers.Factory(
        LogsUseCase,
        log_store=log_store,
    )
