"""Content-driven model tier selection."""

from __future__ import annotations

from switchboard.config import ModelTier

REASONING_MIN_LENGTH = 500
SMALL_MAX_LENGTH = 50


def select_model_tier(content: str) -> ModelTier:
    """Pick a tier from the message text alone.

    Long text or any question goes to ``reasoning``; that check runs first,
    so a short question is still ``reasoning``. Otherwise short text goes to
    ``small`` and everything else to ``generate``.
    """
    if len(content) > REASONING_MIN_LENGTH or "?" in content:
        return "reasoning"
    if len(content) < SMALL_MAX_LENGTH:
        return "small"
    return "generate"
