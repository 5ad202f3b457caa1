"""Pull reply text out of whatever a model client returned.

Matchers run in a fixed order; the first that finds text wins. Each accepts
attribute access (SDK objects) and mapping access (decoded JSON) alike.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from typing import Any

_MISSING = object()


def _field(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name, _MISSING)
    return getattr(value, name, _MISSING)


def _first(value: Any) -> Any:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)) and value:
        return value[0]
    return _MISSING


def _as_text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _match_string(response: Any) -> str | None:
    return _as_text(response)


def _match_text(response: Any) -> str | None:
    return _as_text(_field(response, "text"))


def _match_data(response: Any) -> str | None:
    item = _first(_field(response, "data"))
    if item is _MISSING:
        return None
    return _as_text(_field(item, "text"))


def _match_choices(response: Any) -> str | None:
    choice = _first(_field(response, "choices"))
    if choice is _MISSING:
        return None
    text = _as_text(_field(choice, "text"))
    if text is not None:
        return text
    message = _field(choice, "message")
    if message is _MISSING or message is None:
        return None
    return _as_text(_field(message, "content"))


MATCHERS: tuple[Callable[[Any], str | None], ...] = (
    _match_string,
    _match_text,
    _match_data,
    _match_choices,
)


def _serialize(response: Any) -> str:
    for dump in ("model_dump", "dict"):
        method = getattr(response, dump, None)
        if callable(method):
            try:
                response = method()
                break
            except Exception:
                continue
    try:
        return json.dumps(response, default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(response)


def extract_text(response: Any) -> str:
    """Return the reply text. Falls back to serializing the whole response."""
    for matcher in MATCHERS:
        text = matcher(response)
        if text is not None:
            return text
    return _serialize(response)
