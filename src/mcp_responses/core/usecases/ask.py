from __future__ import annotations

from typing import Optional

from ..domain.exceptions import SecretNotConfiguredError
from ..domain.models import ConversationResult
from ..ports import LoggerPort, ResponsesClientFactoryPort, SecretProviderPort


class AskUseCase:
    """Single round-trip without tool servers.

    Empty output is returned as-is; only the tool-calling conversation maps
    it to a dedicated message.
    """

    def __init__(
        self,
        *,
        secrets: SecretProviderPort,
        client_factory: ResponsesClientFactoryPort,
        logger: LoggerPort,
        model: str,
    ) -> None:
        self._secrets = secrets
        self._client_factory = client_factory
        self._logger = logger
        self._model = model

    async def execute(self, prompt: str, *, model: Optional[str] = None) -> ConversationResult:
        model_name = model or self._model
        try:
            api_key = None
            if self._client_factory.requires_api_key:
                api_key = await self._secrets.get(self._client_factory.api_key_name)
                if not api_key:
                    raise SecretNotConfiguredError(
                        self._client_factory.api_key_subject,
                        self._client_factory.api_key_name,
                    )
            client = self._client_factory.create(api_key, model=model_name)
            self._logger.info(
                "llm_request",
                type="llm_request",
                model=client.model,
                round_trip=1,
                input_items=1,
                servers=[],
            )
            response = await client.create_response(prompt)
        except SecretNotConfiguredError as e:
            return ConversationResult(text=f"Error: {e}", status="not_configured")
        except Exception as e:
            self._logger.exception("ask_failed", type="ask_failed", error=str(e))
            return ConversationResult(text=f"Error: {e}", status="error")

        self._logger.info(
            "llm_output",
            type="llm_output",
            model=client.model,
            round_trips=1,
            raw_text_len=len(response.output_text),
            raw_text=response.output_text,
        )
        return ConversationResult(text=response.output_text, round_trips=1)
