"""Application settings from env vars and YAML config."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings


def _load_yaml_config() -> dict[str, Any]:
    """Load convwindow.yaml from CWD or project root."""
    for candidate in [Path("convwindow.yaml"), Path(__file__).parents[3] / "convwindow.yaml"]:
        if candidate.exists():
            with open(candidate) as f:
                return yaml.safe_load(f) or {}
    return {}


class WindowSettings(BaseSettings):
    model_config = {"env_prefix": "CONVWINDOW_"}

    max_window: int = Field(default=20, ge=1)
    minimum_useful_batch: int = Field(default=3, ge=1)


class SummarizerSettings(BaseSettings):
    model_config = {"env_prefix": "CONVWINDOW_SUMMARIZER_"}

    model: str = "claude-3-5-haiku-latest"
    max_tokens: int = 1000
    temperature: float = 0.1
    timeout: float = 30.0
    max_transcript_chars: int = 12_000
    max_observations: int = 8
    local_base_url: str = ""


class Settings(BaseSettings):
    model_config = {"env_prefix": "CONVWINDOW_"}

    anthropic_api_key: str = Field(default="", alias="ANTHROPIC_API_KEY")
    log_level: str = "INFO"
    window: WindowSettings = Field(default_factory=WindowSettings)
    summarizer: SummarizerSettings = Field(default_factory=SummarizerSettings)

    def model_post_init(self, __context: Any) -> None:
        # Overlay YAML config for nested fields
        yaml_cfg = _load_yaml_config()
        for section in ("window", "summarizer"):
            if section in yaml_cfg and isinstance(yaml_cfg[section], dict):
                target = getattr(self, section)
                for k, v in yaml_cfg[section].items():
                    if hasattr(target, k):
                        object.__setattr__(target, k, v)


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
