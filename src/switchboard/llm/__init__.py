"""Model invocation layer."""

from switchboard.llm.extraction import extract_text
from switchboard.llm.invoker import ClientShape, ModelInvoker, ModelResult, detect_client_shape

__all__ = [
    "ClientShape",
    "ModelInvoker",
    "ModelResult",
    "detect_client_shape",
    "extract_text",
]
