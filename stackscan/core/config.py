"""Runtime settings read from environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from stackscan.exceptions import ConfigError

_PREFIX = "STACKSCAN_"


@dataclass(frozen=True)
class Settings:
    """Values consumed by the scan pipeline.

    Build from the process environment with :meth:`from_env`; tests construct
    it directly with keyword overrides.
    """

    # scanning
    max_depth: int = 5
    allowed_root: str | None = None

    # queue / workers
    queue_capacity: int = 100
    worker_concurrency: int = 2
    max_retries: int = 3

    # outdated checker
    registry_timeout: float = 10.0

    # insight generator (Ollama-compatible endpoint)
    insight_host: str = "http://localhost:11434"
    insight_model: str = "llama3.2"
    insight_max_tokens: int = 1000
    insight_timeout: float = 60.0

    # persistence
    database_url: str = "postgresql+asyncpg://localhost/stackscan"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Read settings from *environ* (defaults to ``os.environ``).

        ``OLLAMA_HOST`` / ``OLLAMA_MODEL`` take precedence over the
        ``STACKSCAN_INSIGHT_*`` variables so an existing Ollama setup is
        picked up unchanged.

        Raises :class:`ConfigError` for unparseable or non-positive numbers.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        return cls(
            max_depth=_env_int(env, "MAX_DEPTH", defaults.max_depth, minimum=0),
            allowed_root=env.get(f"{_PREFIX}ALLOWED_ROOT") or None,
            queue_capacity=_env_int(env, "QUEUE_CAPACITY", defaults.queue_capacity),
            worker_concurrency=_env_int(
                env, "WORKER_CONCURRENCY", defaults.worker_concurrency
            ),
            max_retries=_env_int(env, "MAX_RETRIES", defaults.max_retries),
            registry_timeout=_env_float(env, "REGISTRY_TIMEOUT", defaults.registry_timeout),
            insight_host=(
                env.get("OLLAMA_HOST")
                or env.get(f"{_PREFIX}INSIGHT_HOST")
                or defaults.insight_host
            ).rstrip("/"),
            insight_model=(
                env.get("OLLAMA_MODEL")
                or env.get(f"{_PREFIX}INSIGHT_MODEL")
                or defaults.insight_model
            ),
            insight_max_tokens=_env_int(
                env, "INSIGHT_MAX_TOKENS", defaults.insight_max_tokens
            ),
            insight_timeout=_env_float(env, "INSIGHT_TIMEOUT", defaults.insight_timeout),
            database_url=env.get(f"{_PREFIX}DATABASE_URL", defaults.database_url),
        )


def _env_int(env: Mapping[str, str], key: str, default: int, *, minimum: int = 1) -> int:
    raw = env.get(_PREFIX + key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{_PREFIX}{key} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise ConfigError(f"{_PREFIX}{key} must be >= {minimum}, got {value}")
    return value


def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(_PREFIX + key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{_PREFIX}{key} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{_PREFIX}{key} must be positive, got {value}")
    return value
