from __future__ import annotations

import asyncio
import dataclasses
from typing import Any, Mapping, Optional

from ..domain.exceptions import SecretNotConfiguredError, TurnLimitExceededError
from ..domain.ledger import ToolUsageLedger
from ..domain.models import ConversationResult, ToolServerConfig
from ..domain.registry import ToolServerRegistry
from ..ports import (
    ApprovalGatePort,
    LoggerPort,
    ResponsesClientFactoryPort,
    SecretProviderPort,
)
from ..services.conversation_driver import (
    DEFAULT_MAX_ROUND_TRIPS,
    ConversationDriver,
    extra_request_fields,
)


EMPTY_RESPONSE_TEXT = "Response was empty or null"


class SendPromptUseCase:
    """Use case for a prompt that may call remote tool servers.

    Resolves credentials, runs the conversation driver and turns every
    failure into a textual result instead of raising.
    """

    def __init__(
        self,
        *,
        secrets: SecretProviderPort,
        client_factory: ResponsesClientFactoryPort,
        registry: ToolServerRegistry,
        ledger: ToolUsageLedger,
        approval_gate: ApprovalGatePort,
        logger: LoggerPort,
        model: str,
        max_round_trips: int = DEFAULT_MAX_ROUND_TRIPS,
        reasoning_tier_model: Optional[str] = None,
        reasoning_tier_fields: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._secrets = secrets
        self._client_factory = client_factory
        self._registry = registry
        self._ledger = ledger
        self._approval_gate = approval_gate
        self._logger = logger
        self._model = model
        self._max_round_trips = max_round_trips
        self._tier_model = reasoning_tier_model
        self._tier_fields = reasoning_tier_fields

    async def execute(self, prompt: str, *, model: Optional[str] = None) -> ConversationResult:
        model_name = model or self._model
        self._logger.info(
            "conversation_started",
            type="conversation_started",
            provider=self._client_factory.provider,
            model=model_name,
            prompt_len=len(prompt),
            prompt=prompt,
            servers=[s.label for s in self._registry],
        )

        try:
            api_key, servers = await self._resolve_credentials()
            client = self._client_factory.create(api_key, model=model_name)
            # Deployments may rename the model; the tier check uses what is actually sent
            driver = ConversationDriver(
                client=client,
                registry=self._registry,
                ledger=self._ledger,
                approval_gate=self._approval_gate,
                logger=self._logger,
                max_round_trips=self._max_round_trips,
                extra_fields=extra_request_fields(
                    client.model,
                    tier_model=self._tier_model,
                    tier_fields=self._tier_fields,
                ),
            )
            result = await driver.send(prompt, servers=servers)
        except SecretNotConfiguredError as e:
            return self._finish(ConversationResult(text=f"Error: {e}", status="not_configured"))
        except TurnLimitExceededError as e:
            return self._finish(
                ConversationResult(
                    text=f"Error: {e}",
                    status="turn_limit",
                    round_trips=e.max_round_trips,
                    ledger=self._ledger.snapshot(),
                )
            )
        except Exception as e:
            self._logger.exception("conversation_failed", type="conversation_failed", error=str(e))
            return self._finish(
                ConversationResult(text=f"Error: {e}", status="error", ledger=self._ledger.snapshot())
            )

        if not result.text:
            result.text = EMPTY_RESPONSE_TEXT
            result.status = "empty"
        return self._finish(result)

    async def _resolve_credentials(self) -> tuple[Optional[str], list[ToolServerConfig]]:
        """Fetch the service key and every server token concurrently.

        The key is skipped when the provider signs in without one (Entra ID).
        """
        needs_key = self._client_factory.requires_api_key
        with_secret = [s for s in self._registry if s.auth_secret_name]
        names = [s.auth_secret_name for s in with_secret]
        if needs_key:
            names.insert(0, self._client_factory.api_key_name)
        values = await asyncio.gather(*(self._secrets.get(name) for name in names))  # type: ignore[arg-type]

        api_key = values.pop(0) if needs_key else None
        tokens = dict(zip((s.label for s in with_secret), values))

        if needs_key and not api_key:
            raise SecretNotConfiguredError(
                self._client_factory.api_key_subject,
                self._client_factory.api_key_name,
            )

        servers: list[ToolServerConfig] = []
        for server in self._registry:
            if server.auth_secret_name is None:
                servers.append(server)
                continue
            token = tokens.get(server.label)
            if not token:
                raise SecretNotConfiguredError(
                    f"{server.label} authorization token",
                    server.auth_secret_name,
                )
            servers.append(dataclasses.replace(server, auth_token=token))
        return api_key, servers

    def _finish(self, result: ConversationResult) -> ConversationResult:
        ledger = result.ledger
        self._logger.info(
            "final_result",
            type="final_result",
            result={
                "status": result.status,
                "round_trips": result.round_trips,
                "approvals": [
                    {"request_id": a.request_id, "approved": a.approved} for a in result.approvals
                ],
                "tools_used": sorted(ledger.tools_used) if ledger else [],
                "raw_text": result.text,
            },
        )
        return result
