"""Switchboard, channel-agnostic message routing to a language-model backend."""

from switchboard.runtime import SwitchboardRuntime, build_runtime

__all__ = ["SwitchboardRuntime", "build_runtime"]

__version__ = "0.1.0"
