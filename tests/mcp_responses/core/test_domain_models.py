import pytest

from mcp_responses.core.domain.models import (
    ApprovalPolicy,
    ApprovalRequest,
    ConversationResult,
    ToolCall,
    ToolInfo,
    ToolServerConfig,
)


def test_tool_info_equality_ignores_annotations():
    a = ToolInfo(name="list_products", annotations='{"readOnlyHint": true}')
    b = ToolInfo(name="list_products", annotations="something else")

    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b}) == 1


def test_tool_info_differs_by_name():
    assert ToolInfo(name="list_products") != ToolInfo(name="list_prices")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("never", ApprovalPolicy.NEVER),
        ("ALWAYS", ApprovalPolicy.ALWAYS),
        ("NeverRequireApproval", ApprovalPolicy.NEVER),
        ("AlwaysRequireApproval", ApprovalPolicy.ALWAYS),
        (ApprovalPolicy.ALWAYS, ApprovalPolicy.ALWAYS),
    ],
)
def test_approval_policy_parse(raw, expected):
    assert ApprovalPolicy.parse(raw) is expected


def test_approval_policy_parse_rejects_unknown():
    with pytest.raises(ValueError, match="Unknown approval policy"):
        ApprovalPolicy.parse("sometimes")


def test_tool_server_config_is_immutable_and_hides_token():
    server = ToolServerConfig(label="stripe", endpoint="https://mcp.stripe.com", auth_token="rk_secret")

    with pytest.raises(Exception):
        server.label = "other"  # type: ignore[misc]
    assert "rk_secret" not in repr(server)


def test_response_items_compare_without_raw_payload():
    assert ToolCall("stripe", "list_products", raw={"id": "a"}) == ToolCall("stripe", "list_products")
    assert ApprovalRequest("1", "s", "t", raw={"x": 1}) == ApprovalRequest("1", "s", "t")


def test_conversation_result_succeeded():
    assert ConversationResult(text="hi").succeeded
    assert ConversationResult(text="Response was empty or null", status="empty").succeeded
    assert not ConversationResult(text="Error: boom", status="error").succeeded
    assert not ConversationResult(text="Error: x", status="turn_limit").succeeded
