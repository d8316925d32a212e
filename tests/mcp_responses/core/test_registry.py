import pytest

from mcp_responses.core.domain.exceptions import ServerNotFoundError
from mcp_responses.core.domain.models import ApprovalPolicy, ToolServerConfig
from mcp_responses.core.domain.registry import ToolServerRegistry


def _registry() -> ToolServerRegistry:
    return ToolServerRegistry([
        ToolServerConfig(
            label="stripe",
            endpoint="https://mcp.stripe.com",
            approval_policy=ApprovalPolicy.NEVER,
            allowed_tools=frozenset({"list_products", "list_prices", "create_payment_link"}),
        ),
        ToolServerConfig(
            label="currency-conversion",
            endpoint="https://currency.example.com/mcp",
            approval_policy=ApprovalPolicy.ALWAYS,
        ),
        ToolServerConfig(
            label="filtered-always",
            endpoint="https://filtered.example.com/mcp",
            approval_policy=ApprovalPolicy.ALWAYS,
            allowed_tools=frozenset({"convert"}),
        ),
    ])


def test_get_returns_config():
    registry = _registry()
    assert registry.get("stripe").endpoint == "https://mcp.stripe.com"
    assert "stripe" in registry
    assert len(registry) == 3


def test_get_unknown_server():
    with pytest.raises(ServerNotFoundError) as exc:
        _registry().get("github")
    assert exc.value.label == "github"
    assert "Unknown tool server: github" in str(exc.value)


def test_needs_approval_follows_policy():
    registry = _registry()
    assert registry.needs_approval("stripe", "list_products") is False
    assert registry.needs_approval("currency-conversion", "convert_currency") is True


def test_needs_approval_false_outside_allow_list():
    registry = _registry()
    assert registry.needs_approval("filtered-always", "convert") is True
    assert registry.needs_approval("filtered-always", "delete_everything") is False


def test_needs_approval_unknown_server():
    with pytest.raises(ServerNotFoundError):
        _registry().needs_approval("nope", "tool")


def test_duplicate_labels_rejected():
    server = ToolServerConfig(label="a", endpoint="https://a")
    with pytest.raises(ValueError, match="Duplicate"):
        ToolServerRegistry([server, server])


def test_from_mappings_parses_policy_and_allow_list():
    registry = ToolServerRegistry.from_mappings([
        {
            "label": "currency-conversion",
            "endpoint": "https://currency.example.com/mcp",
            "approval_policy": "always",
            "allowed_tools": ["convert_currency"],
            "auth_secret_name": "CURRENCY-TOKEN",
        },
        {"label": "open", "endpoint": "https://open.example.com"},
    ])

    server = registry.get("currency-conversion")
    assert server.approval_policy is ApprovalPolicy.ALWAYS
    assert server.allowed_tools == frozenset({"convert_currency"})
    assert server.auth_secret_name == "CURRENCY-TOKEN"
    assert server.auth_token is None
    assert registry.get("open").approval_policy is ApprovalPolicy.NEVER
    assert registry.get("open").allowed_tools == frozenset()


def test_from_mappings_none():
    assert len(ToolServerRegistry.from_mappings(None)) == 0
