"""Switchboard configuration: loads from switchboard.yaml + env vars."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ModelTier = Literal["generate", "reasoning", "small", "default"]


def _load_yaml_config() -> dict[str, Any]:
    """Load switchboard.yaml from SWITCHBOARD_CONFIG_PATH or default locations."""
    config_path = os.getenv("SWITCHBOARD_CONFIG_PATH")
    search_paths = (
        [Path(config_path)]
        if config_path
        else [
            Path("/etc/switchboard/switchboard.yaml"),
            Path("switchboard.yaml"),
        ]
    )
    for path in search_paths:
        if path.exists():
            with open(path) as f:
                return yaml.safe_load(f) or {}
    return {}


class ModelTiers(BaseModel):
    """Model identifiers per selection tier."""

    generate: str = Field(default="openai/gpt-4o-mini", description="Default/general tier")
    reasoning: str = Field(default="openai/o4-mini", description="Long or question-style input")
    small: str = Field(default="openai/gpt-4.1-nano", description="Short chit-chat")

    def resolve(self, tier: str) -> str:
        """Map a tier name to its model identifier. Unknown tiers use `generate`."""
        if tier == "reasoning":
            return self.reasoning
        if tier == "small":
            return self.small
        return self.generate


class InvocationDefaults(BaseModel):
    """Default timeout/retry policy for model calls."""

    timeout_ms: int = Field(default=30_000, gt=0)
    retries: int = Field(default=2, ge=0, le=10)
    backoff_ms: int = Field(default=500, ge=0)


class LLMConfig(BaseSettings):
    """Model backend configuration."""

    base_url: str | None = Field(default=None, description="Custom API base URL")
    api_key: str = Field(default="", description="API key for the model backend")
    models: ModelTiers = Field(default_factory=ModelTiers)
    default: InvocationDefaults = Field(default_factory=InvocationDefaults)

    @field_validator("base_url", mode="before")
    @classmethod
    def _blank_base_url(cls, value: Any) -> str | None:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    model_config = SettingsConfigDict(env_prefix="SWITCHBOARD_LLM_", env_nested_delimiter="__")


class ProcessorConfig(BaseSettings):
    """Central processor behavior."""

    queue_yield_ms: int = Field(
        default=10,
        ge=0,
        description="Pause between queued messages so the drain loop yields the event loop",
    )
    system_prompt: str = Field(
        default="You are a helpful assistant responding to a user on {channel}.",
        description="Priming message; {channel} is replaced with the originating channel id",
    )

    model_config = SettingsConfigDict(env_prefix="SWITCHBOARD_PROCESSOR_")


class SwitchboardConfig(BaseSettings):
    """Root configuration."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    processor: ProcessorConfig = Field(default_factory=ProcessorConfig)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json", description="'json' or 'console'")

    model_config = SettingsConfigDict(
        env_prefix="SWITCHBOARD_",
        env_nested_delimiter="__",
    )

    @classmethod
    def load(cls) -> SwitchboardConfig:
        """Load config from YAML + env vars (env takes precedence)."""
        yaml_cfg = _load_yaml_config()

        llm_data = yaml_cfg.pop("llm", {})
        processor_data = yaml_cfg.pop("processor", {})

        # Only pass YAML sub-configs if they have data;
        # otherwise let pydantic-settings pick up env vars
        kwargs: dict[str, Any] = {**yaml_cfg}
        if llm_data:
            kwargs["llm"] = LLMConfig(**llm_data)
        if processor_data:
            kwargs["processor"] = ProcessorConfig(**processor_data)

        return cls(**kwargs)
