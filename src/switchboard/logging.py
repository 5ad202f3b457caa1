"""Structured logging for the switchboard runtime.

Records from structlog and from plain stdlib loggers (LiteLLM, httpx) go
through the same processor chain. Each one carries ``service`` plus any
runtime context bound with :func:`bind_runtime_context`, and secret-looking
fields are masked before rendering.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from switchboard.config import SwitchboardConfig

SERVICE_NAME = "switchboard"

_SECRET_KEYS = frozenset({"api_key", "authorization", "password", "token"})

# LiteLLM and its HTTP stack log every request at INFO
_NOISY_LOGGERS = ("httpcore", "httpx", "litellm", "LiteLLM")


def add_service_name(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def redact_secrets(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key in _SECRET_KEYS.intersection(event_dict):
        if event_dict[key]:
            event_dict[key] = "***"
    return event_dict


def _renderer(fmt: str) -> structlog.types.Processor:
    if fmt == "console":
        return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    return structlog.processors.JSONRenderer()


def setup_logging(config: SwitchboardConfig, **context: Any) -> None:
    """Route all logging through structlog using ``config.log_level`` and ``config.log_format``.

    Keyword arguments are bound as context on every later record.
    """
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
    ]

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(config.log_format),
            ],
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.contextvars.clear_contextvars()
    bind_runtime_context(**context)


def bind_runtime_context(**context: Any) -> None:
    """Attach key/value context (client shape, runtime id) to subsequent records."""
    if context:
        structlog.contextvars.bind_contextvars(**context)
