from __future__ import annotations

from .conversation_driver import (
    APPROVAL_TITLE,
    ConversationDriver,
    approval_message,
    extra_request_fields,
)

__all__ = [
    "APPROVAL_TITLE",
    "ConversationDriver",
    "approval_message",
    "extra_request_fields",
]
