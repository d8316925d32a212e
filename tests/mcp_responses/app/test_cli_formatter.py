from mcp_responses.app.cli_formatter import format_conversation_result, format_server_list, result_to_dict
from mcp_responses.core.domain.models import ApprovalResponse, ConversationResult, LedgerSnapshot, ToolInfo


def _result():
    return ConversationResult(
        text="10 USD is 9.2 EUR",
        round_trips=2,
        approvals=[ApprovalResponse("mcpr_1", True), ApprovalResponse("mcpr_2", False)],
        ledger=LedgerSnapshot(
            tools_listed={"currency-conversion": [ToolInfo("convert_currency", "{}")]},
            tools_used={"currency-conversion.convert_currency"},
        ),
    )


def test_plain_answer_without_activity():
    assert format_conversation_result(ConversationResult(text="Hello")) == "Hello"


def test_answer_with_activity():
    text = format_conversation_result(_result())

    assert text.startswith("10 USD is 9.2 EUR\n")
    assert "Round-trips: 2" in text
    assert "Approvals: 1 approved, 1 denied" in text
    assert "Tools listed by currency-conversion: convert_currency" in text
    assert "Tools used: currency-conversion.convert_currency" in text


def test_result_to_dict():
    payload = result_to_dict(_result())

    assert payload["status"] == "ok"
    assert payload["approvals"] == [
        {"request_id": "mcpr_1", "approved": True},
        {"request_id": "mcpr_2", "approved": False},
    ]
    assert payload["tools_listed"] == {"currency-conversion": [{"name": "convert_currency", "annotations": "{}"}]}
    assert payload["tools_used"] == ["currency-conversion.convert_currency"]


def test_result_to_dict_without_ledger():
    payload = result_to_dict(ConversationResult(text="Error: x", status="error"))

    assert payload["tools_listed"] == {}
    assert payload["tools_used"] == []


def test_format_server_list():
    assert format_server_list([]) == "No tool servers configured."

    text = format_server_list([{
        "label": "stripe",
        "endpoint": "https://mcp.stripe.com",
        "description": "Stripe payments",
        "approval_policy": "never",
        "allowed_tools": [],
        "auth_secret_name": "STRIPE-OAUTH-ACCESS-TOKEN",
    }])
    assert text.splitlines()[0] == "Found 1 tool servers:"
    assert "stripe  https://mcp.stripe.com" in text
    assert "Allowed tools: all" in text
    assert "Auth secret: STRIPE-OAUTH-ACCESS-TOKEN" in text
