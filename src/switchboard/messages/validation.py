"""Validation predicate for normalized messages.

Adapters run this before handing a message to the processor; it has no
dependency on any particular channel.
"""

from __future__ import annotations

from switchboard.errors import ValidationError
from switchboard.messages.models import NormalizedMessage, ProcessedResponse

COULD_NOT_PROCESS_TEXT = "Sorry, I couldn't process that message. Please try sending it again."


def validate_message(message: NormalizedMessage, max_length: int) -> list[str]:
    """Return a list of problems with the message (empty = valid)."""
    problems: list[str] = []

    content = message.content or ""
    if not content.strip():
        problems.append("content is empty")
    if not (message.sender.id or "").strip():
        problems.append("sender id is missing")
    if len(content) > max_length:
        problems.append(f"content length {len(content)} exceeds maximum {max_length}")

    return problems


def is_valid_message(message: NormalizedMessage, max_length: int) -> bool:
    return not validate_message(message, max_length)


def ensure_valid(message: NormalizedMessage, max_length: int) -> None:
    """Raise ValidationError if the message is not valid."""
    problems = validate_message(message, max_length)
    if problems:
        raise ValidationError(problems)


def could_not_process_response(problems: list[str] | None = None) -> ProcessedResponse:
    """Canned reply an adapter sends instead of calling the processor."""
    return ProcessedResponse(
        content=COULD_NOT_PROCESS_TEXT,
        metadata={"validation_failed": True, "problems": list(problems or [])},
    )
