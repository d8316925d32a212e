from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from azure.identity import DefaultAzureCredential, get_bearer_token_provider

from ...core.domain.exceptions import SecretNotConfiguredError
from .openai_adapter import OpenAIResponsesAdapter


DEFAULT_OPENAI_KEY_NAME = "OPENAI-API-KEY"
DEFAULT_AZURE_KEY_NAME = "AZURE-OPENAI-API-KEY"
DEFAULT_AZURE_SCOPE = "https://cognitiveservices.azure.com/.default"


def entra_id_token_provider(scope: str) -> Callable[[], Awaitable[str]]:
    """Async bearer token callable backed by DefaultAzureCredential.

    azure-identity caches the token and refreshes it before expiry; the
    blocking refresh runs in a worker thread.
    """
    get_token = get_bearer_token_provider(DefaultAzureCredential(), scope)

    async def token() -> str:
        return await asyncio.to_thread(get_token)

    return token


class ResponsesClientFactory:
    """Creates a Responses API client for the configured provider.

    - openai: api.openai.com, model name from settings
    - azure:  `{endpoint}/openai/v1/`, deployment name used as the model,
              API key or Entra ID (`use_entra_id`) sign-in
    """

    def __init__(
        self,
        *,
        provider: str = "openai",
        openai_api_key_name: str = DEFAULT_OPENAI_KEY_NAME,
        azure_api_key_name: str = DEFAULT_AZURE_KEY_NAME,
        azure_endpoint: Optional[str] = None,
        azure_deployment_name: Optional[str] = None,
        azure_use_entra_id: bool = False,
        azure_scope: str = DEFAULT_AZURE_SCOPE,
    ) -> None:
        if provider not in ("openai", "azure"):
            raise ValueError("provider must be 'openai' or 'azure'")
        self.provider = provider
        self._openai_api_key_name = openai_api_key_name
        self._azure_api_key_name = azure_api_key_name
        self._azure_endpoint = azure_endpoint
        self._azure_deployment_name = azure_deployment_name
        self._azure_use_entra_id = azure_use_entra_id
        self._azure_scope = azure_scope
        self._token_provider: Optional[Callable[[], Awaitable[str]]] = None

    @property
    def api_key_name(self) -> str:
        if self.provider == "azure":
            return self._azure_api_key_name
        return self._openai_api_key_name

    @property
    def api_key_subject(self) -> str:
        if self.provider == "azure":
            return "Azure OpenAI API key"
        return "OpenAI API key"

    @property
    def requires_api_key(self) -> bool:
        return not (self.provider == "azure" and self._azure_use_entra_id)

    def create(self, api_key: Optional[str], *, model: Optional[str] = None) -> OpenAIResponsesAdapter:
        if self.provider == "openai":
            if not model:
                raise ValueError("model is required for the openai provider")
            if not api_key:
                raise SecretNotConfiguredError(self.api_key_subject, self.api_key_name)
            return OpenAIResponsesAdapter(model, api_key)

        if not self._azure_endpoint:
            raise SecretNotConfiguredError("Azure OpenAI endpoint")
        deployment = self._azure_deployment_name or model
        if not deployment:
            raise SecretNotConfiguredError("Azure OpenAI deployment name")
        base_url = f"{self._azure_endpoint.rstrip('/')}/openai/v1/"

        if self._azure_use_entra_id:
            if not self._azure_scope:
                raise SecretNotConfiguredError("Azure OpenAI token scope")
            # One credential per factory so its token cache is shared across clients
            if self._token_provider is None:
                self._token_provider = entra_id_token_provider(self._azure_scope)
            return OpenAIResponsesAdapter(deployment, self._token_provider, base_url=base_url)

        if not api_key:
            raise SecretNotConfiguredError(self.api_key_subject, self.api_key_name)
        return OpenAIResponsesAdapter(deployment, api_key, base_url=base_url)
