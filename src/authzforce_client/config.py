"""Client configuration for authzforce-client.

Configuration comes from (in increasing precedence) model defaults, a JSON
config file, environment variables, and CLI flags. The client itself only
ever receives an immutable ClientConfig; nothing here is process-wide state.

Environment variables:
    AUTHZFORCE_URL      Base URL of the AuthzForce REST API
    AUTHZFORCE_TIMEOUT  Per-request HTTP timeout in seconds
    LOG_LEVEL           ERROR, WARN, INFO or DEBUG

Example usage:
    config = ClientConfig.load_from_file(Path("authzforce.json"))
    config = ClientConfig.from_env()
    client = PdpClient.from_config(config)
"""

from __future__ import annotations

__all__ = [
    "ClientConfig",
    "ENV_PDP_URL",
    "ENV_LOG_LEVEL",
    "ENV_TIMEOUT",
]

import json
import os
from pathlib import Path
from typing import Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from authzforce_client.constants import (
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PDP_URL,
    DEFAULT_READINESS_INTERVAL_SECONDS,
    DEFAULT_READINESS_TIMEOUT_SECONDS,
    MAX_HTTP_TIMEOUT_SECONDS,
    MIN_HTTP_TIMEOUT_SECONDS,
)
from authzforce_client.exceptions import ConfigurationError

ENV_PDP_URL = "AUTHZFORCE_URL"
ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_TIMEOUT = "AUTHZFORCE_TIMEOUT"

LogLevel = Literal["ERROR", "WARN", "INFO", "DEBUG"]


class ClientConfig(BaseModel):
    """Connection and behavior settings for the PDP client.

    Attributes:
        pdp_url: Base URL of the AuthzForce REST API (no trailing slash).
        timeout_seconds: Per-request HTTP timeout.
        log_level: Verbosity for the console logger.
        readiness_timeout_seconds: Upper bound for waiting on PDP startup.
        readiness_interval_seconds: Delay between readiness polls.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    pdp_url: str = DEFAULT_PDP_URL
    timeout_seconds: float = Field(
        default=DEFAULT_HTTP_TIMEOUT_SECONDS,
        ge=MIN_HTTP_TIMEOUT_SECONDS,
        le=MAX_HTTP_TIMEOUT_SECONDS,
    )
    log_level: LogLevel = DEFAULT_LOG_LEVEL  # type: ignore[assignment]
    readiness_timeout_seconds: float = Field(default=DEFAULT_READINESS_TIMEOUT_SECONDS, gt=0)
    readiness_interval_seconds: float = Field(default=DEFAULT_READINESS_INTERVAL_SECONDS, gt=0)

    @field_validator("pdp_url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"pdp_url must be an http(s) URL, got {value!r}")
        return value.rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip().upper()
            if value == "WARNING":
                return "WARN"
        return value

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        base: ClientConfig | None = None,
    ) -> ClientConfig:
        """Build config from environment variables over a base config.

        Unset or empty variables keep the base value.

        Args:
            environ: Mapping to read from (default: os.environ).
            base: Config to override (default: model defaults).

        Returns:
            New ClientConfig.

        Raises:
            ConfigurationError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ
        data = (base or cls()).model_dump()

        if env.get(ENV_PDP_URL):
            data["pdp_url"] = env[ENV_PDP_URL]
        if env.get(ENV_LOG_LEVEL):
            data["log_level"] = env[ENV_LOG_LEVEL]
        if env.get(ENV_TIMEOUT):
            data["timeout_seconds"] = env[ENV_TIMEOUT]

        return _validate(data, source="environment")

    @classmethod
    def load_from_file(cls, path: Path) -> ClientConfig:
        """Load config from a JSON file.

        Args:
            path: Path to the JSON config file.

        Returns:
            Validated ClientConfig.

        Raises:
            ConfigurationError: If the file is missing, unreadable, not JSON,
                or fails validation.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config file {path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Could not read config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a JSON object")

        return _validate(data, source=f"config file {path}")

    def with_overrides(self, **overrides: object) -> ClientConfig:
        """Return a copy with the non-None overrides applied and validated."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return _validate(data, source="overrides")


def _validate(data: dict[str, object], source: str) -> ClientConfig:
    """Validate raw data into ClientConfig with readable error messages."""
    try:
        return ClientConfig.model_validate(data)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            errors.append(f"{loc}: {error['msg']}")
        raise ConfigurationError(f"Invalid configuration from {source}: " + "; ".join(errors)) from e
