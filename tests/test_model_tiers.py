import pytest

from switchboard.config import ModelTiers
from switchboard.processor.tiers import select_model_tier


def test_short_greeting_uses_small_tier() -> None:
    assert select_model_tier("Hi") == "small"


def test_long_message_uses_reasoning_tier() -> None:
    assert select_model_tier("a" * 600) == "reasoning"
    assert select_model_tier("a" * 599 + "?") == "reasoning"


def test_short_question_uses_reasoning_tier() -> None:
    question = "What time does the shop open?"
    assert len(question) < 50
    assert select_model_tier(question) == "reasoning"


@pytest.mark.parametrize(
    ("length", "expected"),
    [(49, "small"), (50, "generate"), (500, "generate"), (501, "reasoning")],
)
def test_length_boundaries(length: int, expected: str) -> None:
    assert select_model_tier("x" * length) == expected


def test_tier_names_resolve_to_configured_models() -> None:
    tiers = ModelTiers(generate="g", reasoning="r", small="s")

    assert tiers.resolve("reasoning") == "r"
    assert tiers.resolve("small") == "s"
    assert tiers.resolve("generate") == "g"
    assert tiers.resolve("default") == "g"
