"""Tests for Settings.from_env()."""

from __future__ import annotations

import pytest

from stackscan.core.config import Settings
from stackscan.exceptions import ConfigError


class TestSettingsFromEnv:
    def test_defaults_when_unset(self):
        settings = Settings.from_env({})
        assert settings == Settings()
        assert settings.max_depth == 5
        assert settings.queue_capacity == 100
        assert settings.worker_concurrency == 2
        assert settings.max_retries == 3
        assert settings.insight_host == "http://localhost:11434"
        assert settings.insight_model == "llama3.2"

    def test_overrides(self):
        env = {
            "STACKSCAN_MAX_DEPTH": "2",
            "STACKSCAN_ALLOWED_ROOT": "/srv/projects",
            "STACKSCAN_QUEUE_CAPACITY": "10",
            "STACKSCAN_WORKER_CONCURRENCY": "4",
            "STACKSCAN_MAX_RETRIES": "5",
            "STACKSCAN_REGISTRY_TIMEOUT": "2.5",
            "STACKSCAN_INSIGHT_MAX_TOKENS": "2000",
            "STACKSCAN_DATABASE_URL": "sqlite+aiosqlite:///scan.db",
        }
        settings = Settings.from_env(env)
        assert settings.max_depth == 2
        assert settings.allowed_root == "/srv/projects"
        assert settings.queue_capacity == 10
        assert settings.worker_concurrency == 4
        assert settings.max_retries == 5
        assert settings.registry_timeout == 2.5
        assert settings.insight_max_tokens == 2000
        assert settings.database_url == "sqlite+aiosqlite:///scan.db"

    def test_ollama_variables_take_precedence(self):
        env = {
            "OLLAMA_HOST": "http://gpu-box:11434/",
            "OLLAMA_MODEL": "mistral",
            "STACKSCAN_INSIGHT_HOST": "http://ignored:1",
            "STACKSCAN_INSIGHT_MODEL": "ignored",
        }
        settings = Settings.from_env(env)
        assert settings.insight_host == "http://gpu-box:11434"
        assert settings.insight_model == "mistral"

    def test_insight_fallback_variables(self):
        env = {"STACKSCAN_INSIGHT_HOST": "http://llm:8080", "STACKSCAN_INSIGHT_MODEL": "phi3"}
        settings = Settings.from_env(env)
        assert settings.insight_host == "http://llm:8080"
        assert settings.insight_model == "phi3"

    def test_zero_depth_allowed(self):
        assert Settings.from_env({"STACKSCAN_MAX_DEPTH": "0"}).max_depth == 0

    def test_blank_value_uses_default(self):
        assert Settings.from_env({"STACKSCAN_QUEUE_CAPACITY": " "}).queue_capacity == 100

    @pytest.mark.parametrize(
        "key, value",
        [
            ("STACKSCAN_QUEUE_CAPACITY", "lots"),
            ("STACKSCAN_QUEUE_CAPACITY", "0"),
            ("STACKSCAN_WORKER_CONCURRENCY", "-1"),
            ("STACKSCAN_MAX_DEPTH", "-1"),
            ("STACKSCAN_REGISTRY_TIMEOUT", "soon"),
            ("STACKSCAN_INSIGHT_TIMEOUT", "0"),
        ],
    )
    def test_invalid_values(self, key, value):
        with pytest.raises(ConfigError):
            Settings.from_env({key: value})

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            Settings.from_env({"STACKSCAN_MAX_RETRIES": "x"})
