import json
from types import SimpleNamespace

from switchboard.llm.extraction import extract_text


def test_bare_string() -> None:
    assert extract_text("plain reply") == "plain reply"


def test_text_attribute_and_key() -> None:
    assert extract_text(SimpleNamespace(text="from attr")) == "from attr"
    assert extract_text({"text": "from key"}) == "from key"


def test_data_sequence() -> None:
    response = {"data": [{"text": "first"}, {"text": "second"}]}
    assert extract_text(response) == "first"


def test_choices_text_completion_style() -> None:
    response = SimpleNamespace(choices=[SimpleNamespace(text="legacy completion")])
    assert extract_text(response) == "legacy completion"


def test_choices_chat_message_content() -> None:
    message = SimpleNamespace(role="assistant", content="chat reply")
    response = SimpleNamespace(choices=[SimpleNamespace(message=message, finish_reason="stop")])
    assert extract_text(response) == "chat reply"


def test_text_takes_priority_over_choices() -> None:
    response = {"text": "top-level", "choices": [{"text": "nested"}]}
    assert extract_text(response) == "top-level"


def test_unrecognized_shape_falls_back_to_json() -> None:
    response = {"output": [{"content": "somewhere"}], "id": 3}
    assert json.loads(extract_text(response)) == response


def test_empty_sequences_fall_through() -> None:
    response = {"data": [], "choices": []}
    assert json.loads(extract_text(response)) == response


def test_unserializable_object_uses_default_str() -> None:
    class Opaque:
        def __str__(self) -> str:
            return "opaque-response"

    assert extract_text(Opaque()) == '"opaque-response"'
