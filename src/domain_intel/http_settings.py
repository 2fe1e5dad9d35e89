"""
Shared outbound HTTP settings.

The settings are built once, on first use, from the environment-aware
configuration and then shared read-only by every pricing collector.
Concurrent first calls are serialized by a lock so the configuration is
only materialized once.
"""

import threading
from dataclasses import dataclass
from typing import Optional

import httpx

from .config import HTTPConfig, SystemConfig, load_config_from_env


@dataclass(frozen=True)
class HTTPSettings:
    """Immutable client defaults: identifying headers and request timeout."""

    user_agent: str
    accept: str
    timeout_seconds: float

    @classmethod
    def from_config(cls, config: HTTPConfig) -> "HTTPSettings":
        return cls(
            user_agent=config.user_agent,
            accept=config.accept,
            timeout_seconds=config.timeout_seconds,
        )

    @property
    def headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept": self.accept}

    def build_client(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> httpx.AsyncClient:
        """Create an AsyncClient carrying these defaults."""
        return httpx.AsyncClient(
            headers=self.headers,
            timeout=httpx.Timeout(self.timeout_seconds),
            follow_redirects=True,
            transport=transport,
        )


_settings: Optional[HTTPSettings] = None
_settings_lock = threading.Lock()


def get_http_settings(config: Optional[SystemConfig] = None) -> HTTPSettings:
    """
    Return the process-wide HTTP settings, creating them on first call.

    Args:
        config: Configuration to build from on first call; ignored once the
            settings exist. Defaults to the environment configuration.
    """
    global _settings
    if _settings is not None:
        return _settings

    with _settings_lock:
        if _settings is None:
            source = config if config is not None else load_config_from_env()
            _settings = HTTPSettings.from_config(source.http)
        return _settings


def reset_http_settings() -> None:
    """Drop the cached settings so the next call rebuilds them (for tests)."""
    global _settings
    with _settings_lock:
        _settings = None
