"""Static per-channel capability table."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True)
class ChannelSupports:
    text: bool = True
    images: bool = False
    documents: bool = False
    audio: bool = False
    video: bool = False
    quick_replies: bool = False
    carousel: bool = False


@dataclass(frozen=True)
class RateLimits:
    messages_per_second: float | None = None
    messages_per_minute: int | None = None


@dataclass(frozen=True)
class ChannelCapabilities:
    """What a channel type can carry. Never mutated at runtime."""

    supports: ChannelSupports = field(default_factory=ChannelSupports)
    max_message_length: int = 4096
    rate_limits: RateLimits | None = None


DEFAULT_CAPABILITIES = ChannelCapabilities()

CHANNEL_CAPABILITIES = MappingProxyType(
    {
        "telegram": ChannelCapabilities(
            supports=ChannelSupports(
                images=True, documents=True, audio=True, video=True, quick_replies=True
            ),
            max_message_length=4096,
            rate_limits=RateLimits(messages_per_second=30, messages_per_minute=20),
        ),
        "whatsapp": ChannelCapabilities(
            supports=ChannelSupports(
                images=True, documents=True, audio=True, video=True, quick_replies=True
            ),
            max_message_length=4096,
            rate_limits=RateLimits(messages_per_second=80),
        ),
        "web": ChannelCapabilities(
            supports=ChannelSupports(
                images=True,
                documents=True,
                audio=True,
                video=True,
                quick_replies=True,
                carousel=True,
            ),
            max_message_length=10_000,
        ),
        "line": ChannelCapabilities(
            supports=ChannelSupports(
                images=True, audio=True, video=True, quick_replies=True, carousel=True
            ),
            max_message_length=5000,
            rate_limits=RateLimits(messages_per_second=100),
        ),
        "slack": ChannelCapabilities(
            supports=ChannelSupports(images=True, documents=True, quick_replies=True),
            max_message_length=40_000,
            rate_limits=RateLimits(messages_per_second=1),
        ),
        "discord": ChannelCapabilities(
            supports=ChannelSupports(images=True, documents=True, audio=True, video=True),
            max_message_length=2000,
            rate_limits=RateLimits(messages_per_second=5),
        ),
    }
)


def get_capabilities(channel_type: str) -> ChannelCapabilities:
    """Capabilities for a channel type; unknown types get the text-only default."""
    return CHANNEL_CAPABILITIES.get((channel_type or "").strip().lower(), DEFAULT_CAPABILITIES)
