from __future__ import annotations

from typing import Any

import pytest

from switchboard import build_runtime
from switchboard.channels.base import ChannelAdapter
from switchboard.config import InvocationDefaults, LLMConfig, SwitchboardConfig
from switchboard.llm.invoker import ClientShape
from switchboard.messages import (
    ChannelContext,
    ChannelUser,
    ContentType,
    NormalizedMessage,
    ProcessedResponse,
)


class _EchoClient:
    async def create_completion(self, *, messages, model):
        return {"choices": [{"message": {"content": messages[-1]["content"].upper()}}]}


class _WebAdapter(ChannelAdapter):
    def __init__(self) -> None:
        self.outbox: list[tuple[str, ProcessedResponse]] = []
        self.closed = False

    @property
    def channel_id(self) -> str:
        return "web"

    def normalize_inbound(self, raw: dict[str, Any]) -> NormalizedMessage:
        return NormalizedMessage(
            id=raw["id"],
            content=raw["text"],
            content_type=ContentType.TEXT,
            sender=ChannelUser(id=raw["session"]),
            channel=ChannelContext(channel_id="web"),
        )

    async def send_outbound(self, response: ProcessedResponse, original: NormalizedMessage) -> None:
        self.outbox.append((self.resolve_target(original), response))

    async def teardown(self) -> None:
        self.closed = True


def _config() -> SwitchboardConfig:
    return SwitchboardConfig(
        llm=LLMConfig(default=InvocationDefaults(timeout_ms=1000, retries=0, backoff_ms=0))
    )


def test_runtimes_are_independent() -> None:
    first = build_runtime(_config(), client=_EchoClient())
    second = build_runtime(_config(), client=_EchoClient())

    assert first.processor is not second.processor
    assert first.registry is not second.registry
    assert first.invoker.shape is ClientShape.CREATE_COMPLETION


@pytest.mark.asyncio
async def test_end_to_end_message_flow_and_shutdown() -> None:
    runtime = build_runtime(_config(), client=_EchoClient())
    adapter = _WebAdapter()
    runtime.registry.register(adapter.channel_id, adapter)

    response = await adapter.handle({"id": "1", "text": "hello web", "session": "s-1"}, runtime.processor)

    assert response.content == "HELLO WEB"
    assert adapter.outbox[0][0] == "s-1"

    await runtime.shutdown()

    assert adapter.closed is True
    assert len(runtime.registry) == 0
