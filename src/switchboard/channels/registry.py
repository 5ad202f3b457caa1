"""Channel registry: live adapter instances and coordinated shutdown."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable
from typing import Any

import structlog

from switchboard.channels.base import ChannelAdapter
from switchboard.errors import ChannelShutdownError

logger = structlog.get_logger()


async def _run_teardown(teardown: Callable[[], Any]) -> None:
    result = teardown()
    if inspect.isawaitable(result):
        await result


class ChannelRegistry:
    """Tracks adapters by channel id. Owned by the runtime, not global."""

    def __init__(self) -> None:
        self._adapters: dict[str, ChannelAdapter] = {}

    def register(
        self,
        adapter_or_id: ChannelAdapter | str,
        adapter: ChannelAdapter | None = None,
    ) -> None:
        """Register an adapter, keyed by its own ``channel_id`` or an explicit id.

        A later registration for the same id wins.
        """
        if adapter is None:
            if isinstance(adapter_or_id, str):
                raise TypeError("register(channel_id) needs an adapter")
            adapter = adapter_or_id
            channel_id = adapter.channel_id
        else:
            channel_id = str(adapter_or_id)

        if channel_id in self._adapters:
            logger.warning("channels.registry.replaced", channel=channel_id)
        self._adapters[channel_id] = adapter
        logger.info("channels.registry.registered", channel=channel_id)

    def unregister(self, channel_id: str) -> bool:
        removed = self._adapters.pop(channel_id, None) is not None
        if removed:
            logger.info("channels.registry.unregistered", channel=channel_id)
        return removed

    def get(self, channel_id: str) -> ChannelAdapter | None:
        return self._adapters.get(channel_id)

    @property
    def channel_ids(self) -> list[str]:
        return list(self._adapters)

    def __contains__(self, channel_id: object) -> bool:
        return channel_id in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)

    async def shutdown_all(self) -> None:
        """Tear down every adapter concurrently, then drop them from the registry.

        All teardowns run to completion even if some fail. Failures are
        raised together as ChannelShutdownError once the torn-down entries
        are removed.
        """
        snapshot = list(self._adapters.items())
        pending: list[tuple[str, Callable[[], Any]]] = []
        for channel_id, adapter in snapshot:
            teardown = getattr(adapter, "teardown", None)
            if callable(teardown):
                pending.append((channel_id, teardown))

        logger.info(
            "channels.registry.shutdown.start",
            channels=len(snapshot),
            teardowns=len(pending),
        )
        results = await asyncio.gather(
            *(_run_teardown(teardown) for _, teardown in pending),
            return_exceptions=True,
        )

        failures: dict[str, BaseException] = {}
        for (channel_id, _), result in zip(pending, results, strict=True):
            if isinstance(result, BaseException):
                failures[channel_id] = result
                logger.error(
                    "channels.registry.teardown_failed",
                    channel=channel_id,
                    error=str(result),
                )
            else:
                logger.info("channels.registry.teardown_done", channel=channel_id)

        # Adapters registered while teardowns ran stay registered
        for channel_id, adapter in snapshot:
            if self._adapters.get(channel_id) is adapter:
                del self._adapters[channel_id]
        logger.info("channels.registry.shutdown.done", failed=len(failures))

        if failures:
            raise ChannelShutdownError(failures)
