"""Configuration models for the browser tool adapter."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_FALSE_STRINGS = frozenset({"", "0", "false", "no", "off"})


class LLMConfig(BaseModel):
    """Settings for the LLM provider used by the automation engine."""

    provider: str = Field(default="openai")
    model: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    parameters: dict[str, Any] = Field(default_factory=dict)


class EngineConfig(BaseModel):
    """Fixed construction parameters of the automation engine."""

    env: str = Field(default="LOCAL")
    headless: bool = True
    verbose: int = 2
    debug_dom: bool = True
    model_name: str = "claude-3-5-sonnet-20241022"
    dom_settle_timeout: float = Field(
        default=3.0,
        description="Seconds to wait for the DOM to settle after navigation or actions.",
    )
    viewport_width: int = 1280
    viewport_height: int = 720


class AdapterConfig(BaseSettings):
    """Top-level configuration for running the adapter."""

    model_config = SettingsConfigDict(
        env_prefix="BROWSER_TOOL_ADAPTER_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    server_name: str = Field(default="stagehand")
    debug: bool = Field(
        default=False,
        validation_alias=AliasChoices("debug", "BROWSER_TOOL_ADAPTER_DEBUG", "DEBUG"),
        description="Mirror every log line to stderr in addition to the log file.",
    )
    log_dir: Path = Field(default=Path("logs"))
    engine: EngineConfig = Field(default_factory=EngineConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)

    @field_validator("debug", mode="before")
    @classmethod
    def _parse_debug(cls, value: object) -> object:
        # DEBUG often carries a namespace filter such as "stagehand:*".
        if isinstance(value, str):
            return value.strip().lower() not in _FALSE_STRINGS
        return value


def load_config(
    path: Path | None = None,
    *,
    env_file: Path | None = None,
    **overrides: object,
) -> AdapterConfig:
    """Load configuration from an optional YAML file and overrides."""

    data: dict[str, Any] = {}
    if path:
        import yaml

        data = yaml.safe_load(path.read_text()) or {}
    if overrides:
        _deep_update(data, overrides)
    settings_kwargs: dict[str, object] = {}
    if env_file is not None:
        settings_kwargs["_env_file"] = env_file
    config = AdapterConfig(**data, **settings_kwargs)
    if not data:
        return config

    merged = config.model_dump(mode="python")
    _deep_update(merged, data)
    return AdapterConfig.model_validate(merged)


def _deep_update(target: dict[str, Any], updates: Mapping[str, Any]) -> None:
    """Recursively merge ``updates`` into ``target`` in-place."""

    for key, value in updates.items():
        if (
            isinstance(value, Mapping)
            and isinstance(existing := target.get(key), Mapping)
        ):
            nested: dict[str, Any]
            if isinstance(existing, dict):
                nested = existing
            else:
                nested = dict(existing)
            _deep_update(nested, value)
            target[key] = nested
        else:
            target[key] = value
