"""Runtime settings for the VibeFlow service.

Values come from environment variables first, then from
``~/.config/vibeflow/config.toml``.
"""

from __future__ import annotations

import logging
import os
import tomllib
from functools import lru_cache
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)

CONFIG_PATH = "~/.config/vibeflow/config.toml"

DEEPSEEK_BASE_URL = "https://api.deepseek.com/v1"


class Settings(BaseModel):
    provider: str = "anthropic"  # "anthropic" or "chat-completions"
    anthropic_api_key: str = ""
    chat_api_key: str = ""
    chat_base_url: str = DEEPSEEK_BASE_URL
    model: str | None = None
    request_timeout: float = 60.0
    rate_per_minute: int = 10
    rate_per_day: int = 500
    cors_origins: list[str] = ["*"]
    jury_api_url: str = "http://localhost:3001"


# Environment variable -> settings field.
_ENV_FIELDS = {
    "VIBEFLOW_PROVIDER": "provider",
    "ANTHROPIC_API_KEY": "anthropic_api_key",
    "VIBEFLOW_CHAT_API_KEY": "chat_api_key",
    "VIBEFLOW_CHAT_BASE_URL": "chat_base_url",
    "VIBEFLOW_MODEL": "model",
    "VIBEFLOW_REQUEST_TIMEOUT": "request_timeout",
    "VIBEFLOW_RATE_PER_MINUTE": "rate_per_minute",
    "VIBEFLOW_RATE_PER_DAY": "rate_per_day",
    "VIBEFLOW_CORS_ORIGINS": "cors_origins",
    "VIBEFLOW_JURY_API_URL": "jury_api_url",
}


def _read_config_file(path: str) -> dict[str, Any]:
    config_path = os.path.expanduser(path)
    if not os.path.exists(config_path):
        return {}
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Ignoring unreadable config file {config_path}: {e}")
        return {}
    return {key: value for key, value in data.items() if key in Settings.model_fields}


def load_settings(
    environ: dict[str, str] | None = None,
    config_path: str = CONFIG_PATH,
) -> Settings:
    """Build settings from the config file overlaid with environment variables."""
    env = os.environ if environ is None else environ
    values = _read_config_file(config_path)

    for var, field in _ENV_FIELDS.items():
        raw = env.get(var)
        if not raw:
            continue
        if field == "cors_origins":
            values[field] = [origin.strip() for origin in raw.split(",") if origin.strip()]
        else:
            values[field] = raw

    return Settings(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
