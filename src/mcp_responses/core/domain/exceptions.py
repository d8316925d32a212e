"""Domain exceptions for mcp_responses."""

from __future__ import annotations


class ServerNotFoundError(KeyError):
    """Raised when a server label is not present in the tool server registry."""

    def __init__(self, label: str) -> None:
        self.label = label
        super().__init__(label)

    def __str__(self) -> str:
        return f"Unknown tool server: {self.label}"


class SecretNotConfiguredError(Exception):
    """Raised when a required secret is absent from the secret provider.

    `subject` is the human name used in the error result, e.g. "OpenAI API key".
    """

    def __init__(self, subject: str, secret_name: str | None = None) -> None:
        self.subject = subject
        self.secret_name = secret_name
        super().__init__(f"{subject} not configured")


class TurnLimitExceededError(Exception):
    """Raised when the service keeps asking for approvals past the round-trip cap."""

    def __init__(self, max_round_trips: int) -> None:
        self.max_round_trips = max_round_trips
        super().__init__(f"Exceeded turn limit of {max_round_trips} round-trips")


class MalformedResponseError(Exception):
    """Raised when a service response cannot be decoded into response items."""
