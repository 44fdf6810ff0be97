"""
Engine endpoint configuration.

Read from the environment (the server loads `.env.local` through python-dotenv
before importing this package):

    OPENCLAW_ENGINE_URL: Base URL of the OpenClaw gateway (required at call time)
    OPENCLAW_API_KEY: Optional bearer credential
    OPENCLAW_REQUEST_TIMEOUT: Seconds allowed for goal submission (default: 30)

A missing base URL is not an error until something actually needs to talk to
the engine; at that point require_base_url() fails before any network call.
"""

import os
from dataclasses import dataclass

from loguru import logger

from .errors import ConfigurationError


DEFAULT_REQUEST_TIMEOUT = 30.0


def _read_timeout(raw: str | None) -> float:
    if raw is None:
        return DEFAULT_REQUEST_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        logger.warning(f"[CONFIG] Invalid OPENCLAW_REQUEST_TIMEOUT={raw!r}, using default")
        return DEFAULT_REQUEST_TIMEOUT
    if timeout <= 0:
        logger.warning(f"[CONFIG] Non-positive OPENCLAW_REQUEST_TIMEOUT={raw!r}, using default")
        return DEFAULT_REQUEST_TIMEOUT
    return timeout


@dataclass(frozen=True)
class EngineConfig:
    """Connection settings for the OpenClaw engine endpoints."""

    base_url: str | None = None
    api_key: str | None = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @classmethod
    def from_env(cls) -> "EngineConfig":
        return cls(
            base_url=os.getenv("OPENCLAW_ENGINE_URL") or None,
            api_key=os.getenv("OPENCLAW_API_KEY") or None,
            request_timeout=_read_timeout(os.getenv("OPENCLAW_REQUEST_TIMEOUT")),
        )

    def require_base_url(self) -> str:
        """
        Return the base URL without a trailing slash.

        Raises:
            ConfigurationError: If no base URL is configured
        """
        if not self.base_url or not self.base_url.strip():
            msg = "OPENCLAW_ENGINE_URL is not configured"
            raise ConfigurationError(msg)
        return self.base_url.strip().rstrip("/")

    def headers(self) -> dict[str, str]:
        """JSON request headers, with bearer auth when an API key is set."""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers
