"""Exception taxonomy shared by adapters, the invoker and the processor."""

from __future__ import annotations

from typing import Any


class SwitchboardError(Exception):
    """Base class for all Switchboard errors."""


class ValidationError(SwitchboardError):
    """A normalized message failed validation. Handled by the adapter."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        super().__init__("; ".join(self.problems) or "invalid message")


class NormalizationError(SwitchboardError):
    """A raw channel payload carried no recognizable content.

    Adapters may attach whatever they did manage to read so the degraded
    fallback message still targets the right user and thread.
    """

    def __init__(
        self,
        reason: str,
        *,
        sender: Any = None,
        channel: Any = None,
        message_id: str | None = None,
    ) -> None:
        self.reason = reason
        self.sender = sender
        self.channel = channel
        self.message_id = message_id
        super().__init__(reason)


class ChannelSendError(SwitchboardError):
    """Outbound delivery failed or had no resolvable target."""

    def __init__(self, channel_id: str, reason: str) -> None:
        self.channel_id = channel_id
        self.reason = reason
        super().__init__(f"{channel_id}: {reason}")


class ChannelShutdownError(SwitchboardError):
    """One or more adapters failed to tear down."""

    def __init__(self, failures: dict[str, BaseException]) -> None:
        self.failures = dict(failures)
        names = ", ".join(sorted(self.failures))
        super().__init__(f"teardown failed for: {names}")


class ModelInvocationError(SwitchboardError):
    """The model backend could not produce a response."""


class ModelTimeoutError(ModelInvocationError, TimeoutError):
    """A model call exceeded its deadline."""

    def __init__(self, timeout_ms: int) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(f"model call timed out after {timeout_ms}ms")


class UnsupportedClientError(ModelInvocationError):
    """The model client exposes none of the supported invocation shapes."""
