"""Core channel abstractions."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import TYPE_CHECKING, Any

import structlog

from switchboard.channels.capabilities import ChannelCapabilities, get_capabilities
from switchboard.errors import ChannelSendError, NormalizationError
from switchboard.messages.models import (
    ChannelContext,
    ChannelUser,
    ContentType,
    NormalizedMessage,
    ProcessedResponse,
)
from switchboard.messages.validation import could_not_process_response, validate_message

if TYPE_CHECKING:
    from switchboard.processor.service import MessageProcessor

logger = structlog.get_logger()

UNSUPPORTED_MESSAGE_TEXT = "[Unsupported message type]"


def unsupported_message(channel_id: str, error: NormalizationError) -> NormalizedMessage:
    """Low-information text message standing in for an unreadable payload."""
    sender = error.sender
    if isinstance(sender, ChannelUser):
        if not sender.id:
            sender = replace(sender, id="unknown")
    else:
        sender = ChannelUser(id=str(sender) if sender else "unknown")
    channel = error.channel
    if not isinstance(channel, ChannelContext):
        channel = ChannelContext(channel_id=channel_id)

    return NormalizedMessage(
        id=error.message_id or uuid.uuid4().hex,
        content=UNSUPPORTED_MESSAGE_TEXT,
        content_type=ContentType.TEXT,
        sender=sender,
        channel=channel,
        metadata={"unsupported": True, "reason": error.reason},
    )


def chunk_text(text: str, max_length: int) -> list[str]:
    """Split outbound text into pieces no longer than `max_length`.

    Splits on the last newline before the limit when there is one.
    """
    content = (text or "").strip() or "(empty response)"
    if len(content) <= max_length:
        return [content]

    chunks: list[str] = []
    while content:
        if len(content) <= max_length:
            chunks.append(content)
            break
        split_at = content.rfind("\n", 0, max_length)
        if split_at <= 0:
            split_at = max_length
        chunks.append(content[:split_at])
        content = content[split_at:].lstrip("\n")
    return chunks


class ChannelAdapter(ABC):
    """Interface implemented by all channel adapters.

    Concrete adapters translate their channel's wire format. Adapters that
    hold connections may also define ``async def teardown(self) -> None``;
    the registry calls it on shutdown when present.
    """

    @property
    @abstractmethod
    def channel_id(self) -> str:
        ...

    @property
    def channel_type(self) -> str:
        """Key into the capability table. Defaults to the channel id."""
        return self.channel_id

    @property
    def capabilities(self) -> ChannelCapabilities:
        return get_capabilities(self.channel_type)

    @abstractmethod
    def normalize_inbound(self, raw: Any) -> NormalizedMessage:
        """Translate a raw channel payload.

        Raises NormalizationError if the payload carries no recognizable content.
        """
        ...

    @abstractmethod
    async def send_outbound(self, response: ProcessedResponse, original: NormalizedMessage) -> None:
        """Deliver a response to the thread the original message came from.

        Raises ChannelSendError on failure.
        """
        ...

    def normalize(self, raw: Any) -> NormalizedMessage:
        """Normalize a raw payload, degrading unreadable input instead of raising."""
        try:
            return self.normalize_inbound(raw)
        except NormalizationError as exc:
            logger.info(
                "channels.message.unsupported",
                channel=self.channel_id,
                reason=exc.reason,
            )
            return unsupported_message(self.channel_id, exc)

    def resolve_target(self, original: NormalizedMessage) -> str:
        """Thread id of the original message, falling back to the sender id."""
        thread_id = original.channel.thread_id
        if thread_id:
            return str(thread_id)
        sender_id = original.sender.id
        if sender_id:
            return str(sender_id)
        raise ChannelSendError(self.channel_id, "no thread or sender id to reply to")

    async def handle(
        self,
        raw: Any,
        processor: MessageProcessor,
        *,
        queued: bool = False,
    ) -> ProcessedResponse:
        """Run one raw payload through normalize → validate → process → send."""
        message = self.normalize(raw)
        problems = validate_message(message, self.capabilities.max_message_length)

        if problems:
            logger.info(
                "channels.message.rejected",
                channel=self.channel_id,
                message_id=message.id,
                problems=problems,
            )
            response = could_not_process_response(problems)
        elif queued:
            response = await processor.queue_message(message)
        else:
            response = await processor.process_message(message)

        try:
            await self.send_outbound(response, message)
        except ChannelSendError as exc:
            logger.warning("channels.send_failed", channel=self.channel_id, error=str(exc))
            raise
        except Exception as exc:
            logger.warning("channels.send_failed", channel=self.channel_id, error=str(exc))
            raise ChannelSendError(self.channel_id, str(exc)) from exc

        return response
