"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

from vibeflow.config import Settings, load_settings


def test_defaults_without_env_or_file(tmp_path: Path) -> None:
    settings = load_settings(environ={}, config_path=str(tmp_path / "missing.toml"))
    assert settings == Settings()
    assert settings.rate_per_minute == 10
    assert settings.rate_per_day == 500


def test_config_file_values(tmp_path: Path) -> None:
    config = tmp_path / "config.toml"
    config.write_text(
        'provider = "chat-completions"\nchat_api_key = "file-key"\nrate_per_minute = 3\nunknown = 1\n',
        encoding="utf-8",
    )

    settings = load_settings(environ={}, config_path=str(config))

    assert settings.provider == "chat-completions"
    assert settings.chat_api_key == "file-key"
    assert settings.rate_per_minute == 3


def test_environment_overrides_file(tmp_path: Path) -> None:
    config = tmp_path / "config.toml"
    config.write_text('rate_per_day = 50\nmodel = "from-file"\n', encoding="utf-8")
    env = {
        "VIBEFLOW_RATE_PER_DAY": "75",
        "VIBEFLOW_REQUEST_TIMEOUT": "12.5",
        "VIBEFLOW_CORS_ORIGINS": "http://localhost:5173, https://vibeflow.dev",
        "ANTHROPIC_API_KEY": "sk-test",
    }

    settings = load_settings(environ=env, config_path=str(config))

    assert settings.rate_per_day == 75
    assert settings.request_timeout == 12.5
    assert settings.model == "from-file"
    assert settings.anthropic_api_key == "sk-test"
    assert settings.cors_origins == ["http://localhost:5173", "https://vibeflow.dev"]


def test_broken_config_file_is_ignored(tmp_path: Path) -> None:
    config = tmp_path / "config.toml"
    config.write_text("this is = = not toml", encoding="utf-8")

    settings = load_settings(environ={}, config_path=str(config))

    assert settings == Settings()
