from __future__ import annotations

import asyncio

import pytest

from switchboard.channels.base import ChannelAdapter
from switchboard.channels.registry import ChannelRegistry
from switchboard.errors import ChannelShutdownError
from switchboard.messages import NormalizedMessage, ProcessedResponse


class _Adapter(ChannelAdapter):
    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def channel_id(self) -> str:
        return self._name

    def normalize_inbound(self, raw) -> NormalizedMessage:  # pragma: no cover - unused
        raise NotImplementedError

    async def send_outbound(self, response: ProcessedResponse, original: NormalizedMessage) -> None:
        return None  # pragma: no cover - unused


class _ConnectedAdapter(_Adapter):
    def __init__(self, name: str, log: list[str], *, delay: float = 0.0, fail: bool = False) -> None:
        super().__init__(name)
        self.log = log
        self.delay = delay
        self.fail = fail

    async def teardown(self) -> None:
        self.log.append(f"start:{self.channel_id}")
        await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError(f"{self.channel_id} refused to close")
        self.log.append(f"done:{self.channel_id}")


def test_register_last_wins() -> None:
    registry = ChannelRegistry()
    first = _Adapter("telegram")
    second = _Adapter("telegram")

    registry.register("telegram", first)
    registry.register("telegram", second)

    assert registry.get("telegram") is second
    assert len(registry) == 1


def test_unregister_reports_whether_entry_existed() -> None:
    registry = ChannelRegistry()
    registry.register("web", _Adapter("web"))

    assert registry.unregister("web") is True
    assert registry.unregister("web") is False
    assert "web" not in registry


@pytest.mark.asyncio
async def test_shutdown_tears_down_concurrently_and_clears() -> None:
    log: list[str] = []
    registry = ChannelRegistry()
    registry.register("telegram", _ConnectedAdapter("telegram", log, delay=0.05))
    registry.register("line", _ConnectedAdapter("line", log, delay=0.01))
    registry.register("web", _Adapter("web"))

    await registry.shutdown_all()

    # Both teardowns start before either finishes
    assert log[:2] == ["start:telegram", "start:line"]
    assert set(log[2:]) == {"done:telegram", "done:line"}
    assert registry.channel_ids == []


@pytest.mark.asyncio
async def test_one_failed_teardown_does_not_stop_others() -> None:
    log: list[str] = []
    registry = ChannelRegistry()
    registry.register("whatsapp", _ConnectedAdapter("whatsapp", log, fail=True))
    registry.register("telegram", _ConnectedAdapter("telegram", log, delay=0.02))

    with pytest.raises(ChannelShutdownError) as exc_info:
        await registry.shutdown_all()

    assert "done:telegram" in log
    assert list(exc_info.value.failures) == ["whatsapp"]
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_sync_teardown_is_supported() -> None:
    closed: list[str] = []

    class _SyncAdapter(_Adapter):
        def teardown(self) -> None:
            closed.append(self.channel_id)

    registry = ChannelRegistry()
    registry.register("slack", _SyncAdapter("slack"))

    await registry.shutdown_all()

    assert closed == ["slack"]


@pytest.mark.asyncio
async def test_registration_during_shutdown_survives_it() -> None:
    log: list[str] = []
    registry = ChannelRegistry()
    late = _ConnectedAdapter("late", log)

    class _Registering(_ConnectedAdapter):
        async def teardown(self) -> None:
            registry.register(late)
            await super().teardown()

    registry.register(_Registering("early", log))

    await registry.shutdown_all()

    assert "start:late" not in log
    assert registry.channel_ids == ["late"]
    assert registry.get("late") is late


def test_register_uses_adapter_channel_id() -> None:
    registry = ChannelRegistry()
    adapter = _Adapter("discord")

    registry.register(adapter)

    assert registry.get("discord") is adapter
    assert registry.channel_ids == ["discord"]


def test_register_with_id_only_is_rejected() -> None:
    registry = ChannelRegistry()

    with pytest.raises(TypeError):
        registry.register("discord")

    assert len(registry) == 0
