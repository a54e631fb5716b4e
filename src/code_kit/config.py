# src/code_kit/config.py

import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from dotenv import find_dotenv, load_dotenv

from code_kit.errors import ConfigurationError
from code_kit.retry import RetryPolicy

logger = logging.getLogger(__name__)

API_KEY_ENV = "ANTHROPIC_API_KEY"
ENV_PREFIX = "CODE_KIT_"

DEFAULT_MODEL = "claude-sonnet-4-20250514"

_T = TypeVar("_T", int, float)


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for code clients.

    Immutable. Build it explicitly, or with `from_env` at process start.
    """

    api_key: str = field(repr=False)
    model: str = DEFAULT_MODEL
    max_tokens: int = 4000
    temperature: float = 0.1
    timeout: float = 60.0
    max_retries: int = 3

    def __post_init__(self) -> None:
        if self.max_tokens < 1:
            raise ConfigurationError(
                f"max_tokens must be at least 1, got {self.max_tokens}"
            )
        if not 0.0 <= self.temperature <= 1.0:
            raise ConfigurationError(
                f"temperature must be between 0 and 1, got {self.temperature}"
            )
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
        if self.max_retries < 1:
            raise ConfigurationError(
                f"max_retries must be at least 1, got {self.max_retries}"
            )

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.max_retries)

    @classmethod
    def from_env(
        cls,
        env_file: Path | str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "ClientConfig":
        """Load configuration from the environment.

        Reads a `.env` file first without overriding variables already set:
        `env_file` if given, otherwise the nearest `.env` found by walking up
        from the current working directory. `environ` replaces `os.environ`
        and skips `.env` loading.

        Raises:
            ConfigurationError: ANTHROPIC_API_KEY is missing, or a numeric
                setting cannot be parsed or is out of range.
        """
        if environ is None:
            dotenv_path = env_file or find_dotenv(usecwd=True)
            if dotenv_path:
                load_dotenv(dotenv_path)
                logger.debug("Loaded environment from %s", dotenv_path)
            environ = os.environ

        api_key = environ.get(API_KEY_ENV, "").strip()
        if not api_key:
            raise ConfigurationError(
                f"{API_KEY_ENV} environment variable is required. "
                "Set it in your .env file or environment."
            )

        config = cls(
            api_key=api_key,
            model=environ.get(f"{ENV_PREFIX}MODEL", DEFAULT_MODEL),
            max_tokens=_read(environ, "MAX_TOKENS", int, 4000),
            temperature=_read(environ, "TEMPERATURE", float, 0.1),
            timeout=_read(environ, "TIMEOUT", float, 60.0),
            max_retries=_read(environ, "MAX_RETRIES", int, 3),
        )
        logger.info(
            "Loaded configuration: model=%s, max_tokens=%d, timeout=%s, max_retries=%d",
            config.model,
            config.max_tokens,
            config.timeout,
            config.max_retries,
        )
        return config


def _read(
    environ: Mapping[str, str], name: str, parse: Callable[[str], _T], default: _T
) -> _T:
    raw = environ.get(f"{ENV_PREFIX}{name}")
    if raw is None or raw == "":
        return default
    try:
        return parse(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid value for {ENV_PREFIX}{name}: {raw!r}"
        ) from exc
