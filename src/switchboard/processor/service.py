"""Central message processor: single entrypoint for normalized messages.

Per message: received → dispatched by content type → model invoked (text
path only) → responded. Any failure along the way ends in an apology
response instead of an exception.
"""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass
from typing import Any

import structlog

from switchboard.config import ProcessorConfig
from switchboard.llm.invoker import ModelInvoker
from switchboard.messages.models import (
    ContentType,
    NormalizedMessage,
    ProcessedResponse,
    ResponseContentType,
)
from switchboard.processor.tiers import select_model_tier

logger = structlog.get_logger()

APOLOGY_TEXT = "Sorry, I ran into a problem processing your message. Please try again in a moment."

_MEDIA_TYPES = {
    ContentType.IMAGE: ResponseContentType.IMAGE,
    ContentType.DOCUMENT: ResponseContentType.DOCUMENT,
}


@dataclass
class _QueueEntry:
    message: NormalizedMessage
    future: asyncio.Future[ProcessedResponse]


def _media_response_type(content_type: ContentType | str) -> ResponseContentType | None:
    # Adapters may hand over plain strings; unknown values take the text path.
    try:
        return _MEDIA_TYPES.get(ContentType(content_type))
    except ValueError:
        return None


def _log_context(message: Any) -> dict[str, Any]:
    # Tolerates malformed messages; they still get the apology response
    content_type = getattr(message, "content_type", None)
    return {
        "message_id": getattr(message, "id", None),
        "channel": getattr(getattr(message, "channel", None), "channel_id", None),
        "content_type": str(getattr(content_type, "value", content_type)),
    }


def error_response(error: BaseException) -> ProcessedResponse:
    return ProcessedResponse(
        content=APOLOGY_TEXT,
        content_type=ResponseContentType.TEXT,
        metadata={"error": True, "error_type": type(error).__name__},
    )


class MessageProcessor:
    """Dispatches normalized messages and owns the single-flight queue."""

    def __init__(self, invoker: ModelInvoker, config: ProcessorConfig | None = None) -> None:
        self.invoker = invoker
        self.config = config or ProcessorConfig()
        self._queue: deque[_QueueEntry] = deque()
        self._drain_task: asyncio.Task[None] | None = None

    async def process_message(self, message: NormalizedMessage) -> ProcessedResponse:
        """Produce a response for one message. Never raises."""
        log = logger.bind(**_log_context(message))
        log.info("processor.message.received")

        try:
            media_type = _media_response_type(message.content_type)
            if media_type is not None:
                response = self._acknowledge_media(message, media_type)
            else:
                response = await self._process_text(message)
        except Exception as e:
            log.error("processor.message.failed", error=str(e), error_type=type(e).__name__)
            return error_response(e)

        log.info("processor.message.responded", response_type=response.content_type.value)
        return response

    def queue_message(self, message: NormalizedMessage) -> asyncio.Future[ProcessedResponse]:
        """Enqueue a message; the returned future resolves in submission order.

        Must be called from inside the running event loop.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[ProcessedResponse] = loop.create_future()
        self._queue.append(_QueueEntry(message=message, future=future))
        logger.debug("processor.queue.enqueued", message_id=message.id, pending=len(self._queue))

        if self._drain_task is None or self._drain_task.done():
            self._drain_task = loop.create_task(self._drain(), name="switchboard-queue-drain")
        return future

    @property
    def pending(self) -> int:
        """Messages waiting in the queue (excludes the one in flight)."""
        return len(self._queue)

    @property
    def is_draining(self) -> bool:
        return self._drain_task is not None and not self._drain_task.done()

    async def _drain(self) -> None:
        while self._queue:
            entry = self._queue.popleft()
            if entry.future.cancelled():
                continue

            try:
                response = await self.process_message(entry.message)
            except Exception as e:
                if not entry.future.done():
                    entry.future.set_exception(e)
            else:
                if not entry.future.done():
                    entry.future.set_result(response)

            await asyncio.sleep(self.config.queue_yield_ms / 1000)

    async def _process_text(self, message: NormalizedMessage) -> ProcessedResponse:
        tier = select_model_tier(message.content)
        messages = [
            {"role": "system", "content": self._system_prompt(message.channel.channel_id)},
            {"role": "user", "content": message.content},
        ]
        result = await self.invoker.call_model(messages, tier)
        return ProcessedResponse(
            content=result.text,
            content_type=ResponseContentType.TEXT,
            metadata={"model": result.model, "tier": tier, "attempts": result.attempts},
        )

    def _acknowledge_media(
        self,
        message: NormalizedMessage,
        media_type: ResponseContentType,
    ) -> ProcessedResponse:
        # Media is echoed back untouched; there is no media pipeline.
        return ProcessedResponse(
            content=f"I received your {media_type.value}, but I can't look inside it yet.",
            content_type=media_type,
            attachments=list(message.attachments) if message.attachments else None,
            metadata={"processed": False},
        )

    def _system_prompt(self, channel_id: str) -> str:
        return self.config.system_prompt.replace("{channel}", channel_id)
