"""LiteLLM gateway: default model client for the invoker."""

from __future__ import annotations

from typing import Any

import litellm
import structlog

from switchboard.config import LLMConfig

logger = structlog.get_logger()

# Suppress litellm's noisy logging
litellm.suppress_debug_info = True
litellm.drop_params = True


class LiteLLMClient:
    """Async wrapper around LiteLLM exposing the ``generate`` client shape.

    Retries and timeouts are the invoker's job, so LiteLLM's own retry is
    turned off here.
    """

    def __init__(self, config: LLMConfig) -> None:
        self.config = config
        self.total_tokens_used = 0
        self.total_cost = 0.0
        self.request_count = 0

    async def generate(
        self,
        *,
        messages: list[dict[str, Any]],
        model: str | None = None,
        **options: Any,
    ) -> Any:
        model = model or self.config.models.generate
        kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "num_retries": 0,
            **options,
        }
        if self.config.api_key:
            kwargs["api_key"] = self.config.api_key
        if self.config.base_url:
            kwargs["api_base"] = self.config.base_url

        self.request_count += 1
        response = await litellm.acompletion(**kwargs)

        usage = getattr(response, "usage", None)
        if usage:
            tokens = getattr(usage, "total_tokens", 0) or 0
            self.total_tokens_used += tokens
            try:
                cost = litellm.completion_cost(completion_response=response)
            except Exception:
                cost = 0.0  # Self-hosted models have no price table entry
            self.total_cost += cost
            logger.info("llm.usage", model=model, tokens=tokens, cost=f"${cost:.6f}")

        return response

    @property
    def stats(self) -> dict[str, Any]:
        """Return usage statistics."""
        return {
            "total_tokens": self.total_tokens_used,
            "total_cost": f"${self.total_cost:.6f}",
            "request_count": self.request_count,
        }
