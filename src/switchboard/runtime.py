"""Runtime context: everything a channel entrypoint needs, built once."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

import structlog

from switchboard.channels.registry import ChannelRegistry
from switchboard.config import SwitchboardConfig
from switchboard.llm.invoker import ModelInvoker
from switchboard.logging import bind_runtime_context, setup_logging
from switchboard.processor.service import MessageProcessor

logger = structlog.get_logger()


@dataclass
class SwitchboardRuntime:
    """Explicit replacement for process-wide processor/registry singletons."""

    config: SwitchboardConfig
    invoker: ModelInvoker
    processor: MessageProcessor
    registry: ChannelRegistry
    runtime_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    async def shutdown(self) -> None:
        logger.info("switchboard.shutting_down", channels=len(self.registry))
        await self.registry.shutdown_all()
        logger.info("switchboard.stopped")


def build_runtime(
    config: SwitchboardConfig | None = None,
    *,
    client: Any = None,
    configure_logging: bool = False,
) -> SwitchboardRuntime:
    """Wire config, invoker, processor and registry together.

    Without an explicit ``client`` the LiteLLM gateway is used.
    """
    config = config or SwitchboardConfig.load()
    if configure_logging:
        setup_logging(config)

    if client is None:
        from switchboard.llm.gateway import LiteLLMClient

        client = LiteLLMClient(config.llm)

    invoker = ModelInvoker(client, config.llm)
    processor = MessageProcessor(invoker, config.processor)
    runtime = SwitchboardRuntime(
        config=config,
        invoker=invoker,
        processor=processor,
        registry=ChannelRegistry(),
    )
    if configure_logging:
        bind_runtime_context(runtime_id=runtime.runtime_id, client_shape=invoker.shape.value)
    logger.info(
        "switchboard.ready",
        runtime_id=runtime.runtime_id,
        client_shape=invoker.shape.value,
        models=config.llm.models.model_dump(),
    )
    return runtime
