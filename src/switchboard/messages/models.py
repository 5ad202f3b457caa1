"""Canonical message types shared by every channel and the processor."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ContentType(str, Enum):
    """Content types a normalized inbound message can carry."""

    TEXT = "text"
    IMAGE = "image"
    DOCUMENT = "document"
    AUDIO = "audio"
    VIDEO = "video"
    LOCATION = "location"
    CONTACT = "contact"


class ResponseContentType(str, Enum):
    """Content types a processed response can carry."""

    TEXT = "text"
    IMAGE = "image"
    DOCUMENT = "document"
    QUICK_REPLY = "quick_reply"
    CAROUSEL = "carousel"


@dataclass
class ChannelUser:
    """Sender identity. `id` is only unique within its own channel."""

    id: str
    username: str | None = None
    display_name: str | None = None
    phone_number: str | None = None
    email: str | None = None


@dataclass
class ChannelContext:
    """Where a message came from and where its reply must go."""

    channel_id: str
    channel_message_id: str | None = None
    thread_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class Attachment:
    url: str
    type: str
    filename: str | None = None


@dataclass
class ReplyReference:
    id: str
    content: str


@dataclass
class QuickReply:
    title: str
    payload: str


@dataclass
class NormalizedMessage:
    """Channel-agnostic inbound message.

    Built once per inbound event by an adapter and consumed once by the
    processor. Attachments keep the order the channel reported them in.
    """

    id: str
    content: str
    content_type: ContentType
    sender: ChannelUser
    channel: ChannelContext
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    reply_to_message: ReplyReference | None = None
    attachments: list[Attachment] | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class ProcessedResponse:
    """Channel-agnostic reply produced by the processor."""

    content: str
    content_type: ResponseContentType = ResponseContentType.TEXT
    attachments: list[Attachment] | None = None
    quick_replies: list[QuickReply] | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
