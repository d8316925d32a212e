from __future__ import annotations

from pathlib import Path
from typing import Any

from platformdirs import PlatformDirs
from pydantic import BaseModel, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.domain.models import ApprovalPolicy


APP_NAME = "mcp_responses"


def _default_home() -> Path:
    """Get default home directory using platformdirs."""
    return Path(PlatformDirs(appname=APP_NAME, appauthor=False).user_cache_dir)


class DirectoryConfig(BaseModel):
    """Directory configuration with computed paths."""

    home: Path = Field(
        default_factory=_default_home,
        description="Base directory for all mcp_responses data",
    )

    @computed_field
    @property
    def logs_dir(self) -> Path:
        """Logs directory for conversation logs."""
        path = self.home / "logs"
        path.mkdir(parents=True, exist_ok=True)
        return path


class LLMConfig(BaseModel):
    """Reasoning service configuration."""

    provider_name: str = Field(
        default="openai",
        description="Responses API provider (openai, azure)",
    )

    model_name: str = Field(
        default="gpt-4",
        description="Model name (for azure, used when no deployment name is set)",
    )

    reasoning_tier_model: str | None = Field(
        default="gpt-5-mini",
        description="Model that receives the raw reasoning_tier_fields on every request",
    )

    reasoning_tier_fields: dict[str, Any] = Field(
        default_factory=lambda: {
            "reasoning": {"effort": "minimal"},
            "text": {"verbosity": "low"},
        },
        description="Extra payload fields merged into requests for the reasoning tier model",
    )

    @field_validator("provider_name")
    @classmethod
    def check_provider(cls, v: str) -> str:
        v = v.lower()
        if v not in ("openai", "azure"):
            raise ValueError("provider_name must be 'openai' or 'azure'")
        return v


class AzureOpenAIConfig(BaseModel):
    """Azure OpenAI deployment settings."""

    endpoint: str | None = Field(
        default=None,
        description="Resource endpoint, e.g. https://my-resource.openai.azure.com",
    )

    deployment_name: str | None = Field(
        default=None,
        description="Deployment name used as the model",
    )

    use_entra_id: bool = Field(
        default=False,
        description="Sign in with DefaultAzureCredential instead of the API key secret",
    )

    scope: str = Field(
        default="https://cognitiveservices.azure.com/.default",
        description="Token scope requested when use_entra_id is set",
    )


class SecretsConfig(BaseModel):
    """Secret lookup and caching."""

    env_prefix: str = Field(
        default="",
        description="Prefix for environment variables holding secrets",
    )

    openai_api_key_name: str = Field(default="OPENAI-API-KEY")

    azure_api_key_name: str = Field(default="AZURE-OPENAI-API-KEY")

    default_ttl_seconds: float = Field(
        default=7 * 24 * 60 * 60,
        description="Cache lifetime for secrets without an override",
    )

    ttl_seconds: dict[str, float] = Field(
        default_factory=lambda: {"AZURE-OPENAI-API-KEY": 60 * 60},
        description="Per-secret cache lifetime overrides",
    )


class ToolServerSettings(BaseModel):
    """One remote tool server."""

    label: str
    endpoint: str
    description: str | None = None
    auth_secret_name: str | None = None
    approval_policy: ApprovalPolicy = ApprovalPolicy.NEVER
    allowed_tools: list[str] = Field(default_factory=list)

    @field_validator("approval_policy", mode="before")
    @classmethod
    def parse_policy(cls, v: Any) -> ApprovalPolicy:
        return ApprovalPolicy.parse(v)


def _default_servers() -> list[ToolServerSettings]:
    return [
        ToolServerSettings(
            label="stripe",
            endpoint="https://mcp.stripe.com",
            description="Stripe payments",
            auth_secret_name="STRIPE-OAUTH-ACCESS-TOKEN",
            approval_policy=ApprovalPolicy.NEVER,
        )
    ]


class ConversationConfig(BaseModel):
    """Conversation loop limits."""

    max_round_trips: int = Field(
        default=10,
        ge=1,
        description="Maximum reasoning-service round-trips per prompt",
    )

    approval_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Deny an approval nobody answered within this many seconds (None = wait forever)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    logger_name: str = Field(default=APP_NAME)

    console_output: bool = Field(
        default=False,
        description="Mirror log events to stderr",
    )

    level: str = Field(default="INFO")


class RuntimeConfig(BaseModel):
    """Per-run values set by the CLI or facade."""

    session_id: str | None = Field(
        default=None,
        description="Names the JSONL conversation log; no file log when unset",
    )


class AppConfig(BaseSettings):
    """Root application configuration.

    All configuration is loaded from environment variables with MCP_RESPONSES_ prefix.
    Use double underscore for nested config: MCP_RESPONSES_LLM__MODEL_NAME

    Example env vars:
        # Secrets (looked up by name, dashes become underscores)
        export OPENAI_API_KEY=sk-xxxxxxxxxxxxx
        export STRIPE_OAUTH_ACCESS_TOKEN=rk_xxxxxxxxxxxxx

        # Optional (with defaults)
        export MCP_RESPONSES_LLM__PROVIDER_NAME=openai
        export MCP_RESPONSES_LLM__MODEL_NAME=gpt-4
        export MCP_RESPONSES_AZURE__ENDPOINT=https://my-resource.openai.azure.com
        export MCP_RESPONSES_AZURE__USE_ENTRA_ID=true
        export MCP_RESPONSES_CONVERSATION__MAX_ROUND_TRIPS=10
        export MCP_RESPONSES_SERVERS='[{"label": "stripe", "endpoint": "https://mcp.stripe.com"}]'
    """

    model_config = SettingsConfigDict(
        env_prefix="MCP_RESPONSES_",
        env_nested_delimiter="__",
        frozen=True,
        extra="forbid",
    )

    directories: DirectoryConfig = Field(default_factory=DirectoryConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    azure: AzureOpenAIConfig = Field(default_factory=AzureOpenAIConfig)
    secrets: SecretsConfig = Field(default_factory=SecretsConfig)
    servers: list[ToolServerSettings] = Field(default_factory=_default_servers)
    conversation: ConversationConfig = Field(default_factory=ConversationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)

    @field_validator("servers")
    @classmethod
    def unique_labels(cls, v: list[ToolServerSettings]) -> list[ToolServerSettings]:
        labels = [s.label for s in v]
        duplicates = sorted({label for label in labels if labels.count(label) > 1})
        if duplicates:
            raise ValueError(f"Duplicate tool server labels: {', '.join(duplicates)}")
        return v
