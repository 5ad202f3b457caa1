"""Channel adapter contract, capability table and registry."""

from switchboard.channels.base import ChannelAdapter, chunk_text, unsupported_message
from switchboard.channels.capabilities import ChannelCapabilities, get_capabilities
from switchboard.channels.registry import ChannelRegistry

__all__ = [
    "ChannelAdapter",
    "ChannelCapabilities",
    "ChannelRegistry",
    "chunk_text",
    "get_capabilities",
    "unsupported_message",
]
