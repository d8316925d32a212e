from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence, Union

from .domain.models import ConversationItem, ServiceResponse, ToolServerConfig


class SecretProviderPort(Protocol):
    """Port for named secret lookup.

    Implementations may cache; a missing or blank secret is reported as None.
    """

    async def get(self, name: str) -> Optional[str]:
        ...


class ApprovalGatePort(Protocol):
    """Port for asking a human to approve a tool call.

    Must resolve to False when nobody is listening.
    """

    async def request(self, title: str, message: str) -> bool:
        ...


class ResponsesClientPort(Protocol):
    """Port for one round-trip against the reasoning service."""

    model: str

    async def create_response(
        self,
        input: Union[str, Sequence[ConversationItem]],  # noqa: A002
        *,
        servers: Sequence[ToolServerConfig] = (),
        extra_request_fields: Optional[Mapping[str, Any]] = None,
    ) -> ServiceResponse:
        """Send the prompt or rebuilt item buffer and decode the reply.

        Raises:
            MalformedResponseError: If the reply cannot be decoded
        """
        ...


class ResponsesClientFactoryPort(Protocol):
    """Builds a client once the API key has been resolved."""

    provider: str
    api_key_name: str
    api_key_subject: str
    requires_api_key: bool

    def create(self, api_key: str | None, *, model: str | None = None) -> ResponsesClientPort:
        """Create a client for the configured provider.

        `api_key` is None only when `requires_api_key` is False.

        Raises:
            SecretNotConfiguredError: If provider settings (e.g. endpoint) are missing
        """
        ...


class LogStorePort(Protocol):
    """Port for reading conversation log files."""

    def read_log(self, session_id: str, verbose: bool) -> list[str]:
        """Read and format log for a single session."""
        ...

    def summarize_all(self, verbose: bool) -> list[str]:
        """Summarize all logs as table."""
        ...


class LoggerPort(Protocol):
    """Port for structured logging.

    Keyword arguments become structured fields on the log record.
    """

    def debug(self, message: str, **kwargs: Any) -> None:
        ...

    def info(self, message: str, **kwargs: Any) -> None:
        ...

    def warning(self, message: str, **kwargs: Any) -> None:
        ...

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        ...

    def exception(self, message: str, **kwargs: Any) -> None:
        ...
