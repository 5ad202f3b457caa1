"""Canonical message contract."""

from switchboard.messages.models import (
    Attachment,
    ChannelContext,
    ChannelUser,
    ContentType,
    NormalizedMessage,
    ProcessedResponse,
    QuickReply,
    ReplyReference,
    ResponseContentType,
)
from switchboard.messages.validation import (
    could_not_process_response,
    ensure_valid,
    is_valid_message,
    validate_message,
)

__all__ = [
    "Attachment",
    "ChannelContext",
    "ChannelUser",
    "ContentType",
    "NormalizedMessage",
    "ProcessedResponse",
    "QuickReply",
    "ReplyReference",
    "ResponseContentType",
    "could_not_process_response",
    "ensure_valid",
    "is_valid_message",
    "validate_message",
]
