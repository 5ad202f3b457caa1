"""Central message processor."""

from switchboard.processor.service import MessageProcessor, error_response
from switchboard.processor.tiers import select_model_tier

__all__ = ["MessageProcessor", "error_response", "select_model_tier"]
