"""Model invoker: bounded-latency, bounded-retry calls to an opaque client.

The client is duck-typed. Its invocation shape is probed once, at
construction, in priority order:

1. ``client.generate(messages=..., model=...)``
2. ``client.do_generate(messages=..., model=...)``
3. ``client.create_completion(messages=..., model=...)``
4. ``client(messages=..., model=...)``

The whole call, retries included, runs under one ``asyncio.timeout``
deadline; the in-flight coroutine is cancelled when it expires.
Synchronous clients run in a worker thread, which cannot be interrupted,
so a timed-out sync call is abandoned and runs to completion.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

from switchboard.config import LLMConfig
from switchboard.errors import ModelInvocationError, ModelTimeoutError, UnsupportedClientError
from switchboard.llm.extraction import extract_text

logger = structlog.get_logger()


class ClientShape(str, Enum):
    GENERATE = "generate"
    DO_GENERATE = "do_generate"
    CREATE_COMPLETION = "create_completion"
    CALLABLE = "callable"


_METHOD_SHAPES = (
    ClientShape.GENERATE,
    ClientShape.DO_GENERATE,
    ClientShape.CREATE_COMPLETION,
)


@dataclass
class ModelResult:
    """Uniform result of a model call."""

    text: str
    raw: Any
    model: str
    attempts: int = 1


def detect_client_shape(client: Any) -> tuple[ClientShape, Callable[..., Any]]:
    """Find the client's invocation method. Raises UnsupportedClientError."""
    for shape in _METHOD_SHAPES:
        method = getattr(client, shape.value, None)
        if callable(method):
            return shape, method
    if callable(client):
        return ClientShape.CALLABLE, client
    raise UnsupportedClientError(
        f"{type(client).__name__} exposes none of generate, do_generate, "
        "create_completion, or __call__"
    )


class ModelInvoker:
    """Wraps a model client with timeout, linear-backoff retry and text extraction."""

    def __init__(self, client: Any, config: LLMConfig) -> None:
        self.client = client
        self.config = config
        self.shape, self._method = detect_client_shape(client)
        self._is_async = inspect.iscoroutinefunction(self._method) or (
            self.shape is ClientShape.CALLABLE
            and inspect.iscoroutinefunction(getattr(client, "__call__", None))
        )
        self.request_count = 0

        logger.info("llm.invoker.ready", shape=self.shape.value, is_async=self._is_async)

    async def call_model(
        self,
        messages: Sequence[dict[str, Any]],
        tier: str = "default",
        *,
        timeout_ms: int | None = None,
        retries: int | None = None,
        backoff_ms: int | None = None,
    ) -> ModelResult:
        """Call the model, retrying on any failure until the deadline.

        A single ``timeout_ms`` deadline covers every attempt and every
        backoff pause. Attempt *k* is followed by a pause of
        ``backoff_ms * k`` before attempt *k + 1*. The last error propagates
        once retries run out.
        """
        defaults = self.config.default
        timeout_ms = defaults.timeout_ms if timeout_ms is None else timeout_ms
        retries = defaults.retries if retries is None else retries
        backoff_ms = defaults.backoff_ms if backoff_ms is None else backoff_ms
        model = self.config.models.resolve(tier)
        payload = [dict(message) for message in messages]

        self.request_count += 1
        request_id = self.request_count
        started = time.monotonic()

        deadline = asyncio.timeout(timeout_ms / 1000)
        try:
            async with deadline:
                return await self._call_with_retries(
                    payload, model, tier, request_id, retries, backoff_ms
                )
        except TimeoutError as e:
            # A client's own TimeoutError is just its last error
            if not deadline.expired():
                raise
            logger.error(
                "llm.timeout",
                request_id=request_id,
                model=model,
                timeout_ms=timeout_ms,
                elapsed=f"{time.monotonic() - started:.2f}s",
            )
            raise ModelTimeoutError(timeout_ms) from e

    async def _call_with_retries(
        self,
        payload: list[dict[str, Any]],
        model: str,
        tier: str,
        request_id: int,
        retries: int,
        backoff_ms: int,
    ) -> ModelResult:
        last_error: Exception | None = None

        for attempt in range(1, retries + 2):
            start = time.monotonic()
            logger.info(
                "llm.request",
                request_id=request_id,
                attempt=attempt,
                model=model,
                tier=tier,
                message_count=len(payload),
            )
            try:
                raw = await self._invoke(payload, model)
            except Exception as e:
                last_error = e
                logger.warning(
                    "llm.attempt.failed",
                    request_id=request_id,
                    attempt=attempt,
                    model=model,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                if attempt <= retries:
                    await asyncio.sleep(backoff_ms * attempt / 1000)
                continue

            logger.info(
                "llm.response",
                request_id=request_id,
                attempt=attempt,
                duration=f"{time.monotonic() - start:.2f}s",
            )
            return ModelResult(text=extract_text(raw), raw=raw, model=model, attempts=attempt)

        logger.error("llm.error", request_id=request_id, model=model, attempts=retries + 1)
        if last_error is None:
            raise ModelInvocationError("model call failed without an error")
        raise last_error

    async def _invoke(self, messages: list[dict[str, Any]], model: str) -> Any:
        if self._is_async:
            result = self._method(messages=messages, model=model)
        else:
            result = await asyncio.to_thread(self._method, messages=messages, model=model)
        if inspect.isawaitable(result):
            result = await result
        return result
