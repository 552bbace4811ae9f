"""Settings loaded from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping

from pkgintel import __version__
from pkgintel.adapters import CratesAdapter, NpmAdapter, PyPiAdapter
from pkgintel.models.schemas import Ecosystem

logger = logging.getLogger(__name__)

REGISTRY_URLS: dict[Ecosystem, str] = {
    Ecosystem.NPM: NpmAdapter.REGISTRY_URL,
    Ecosystem.PYPI: PyPiAdapter.REGISTRY_URL,
    Ecosystem.CRATES: CratesAdapter.REGISTRY_URL,
}

# Environment variables overriding each registry's base URL
REGISTRY_URL_ENV = {
    Ecosystem.NPM: "NPM_REGISTRY_URL",
    Ecosystem.PYPI: "PYPI_REGISTRY_URL",
    Ecosystem.CRATES: "CRATES_REGISTRY_URL",
}

DEFAULT_USER_AGENT = f"pkgintel/{__version__}"
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_CACHE_TTL = 300

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass(frozen=True)
class EngineConfig:
    """Per-query inputs the engine needs from its surroundings."""

    timeout: float = DEFAULT_TIMEOUT_MS / 1000
    user_agent: str = DEFAULT_USER_AGENT
    registry_urls: Mapping[Ecosystem, str] = field(
        default_factory=lambda: dict(REGISTRY_URLS)
    )

    def base_url(self, ecosystem: Ecosystem) -> str:
        return self.registry_urls.get(ecosystem) or REGISTRY_URLS[ecosystem]


@dataclass(frozen=True)
class Settings:
    """Process settings.

    ``cache_ttl`` is declared for an external caching layer; nothing in
    this package enforces it.
    """

    request_timeout_ms: int = DEFAULT_TIMEOUT_MS
    user_agent: str = DEFAULT_USER_AGENT
    cache_ttl: int = DEFAULT_CACHE_TTL
    log_level: str = "info"
    registry_urls: Mapping[Ecosystem, str] = field(
        default_factory=lambda: dict(REGISTRY_URLS)
    )

    @property
    def logging_level(self) -> int:
        return LOG_LEVELS.get(self.log_level.lower(), logging.INFO)

    def engine_config(self) -> EngineConfig:
        return EngineConfig(
            timeout=self.request_timeout_ms / 1000,
            user_agent=self.user_agent,
            registry_urls=dict(self.registry_urls),
        )


def _int_setting(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {key}={raw!r}, using {default}")
        return default
    if value <= 0:
        logger.warning(f"Ignoring non-positive {key}={raw!r}, using {default}")
        return default
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from an environment mapping.

    Args:
        environ: Variables to read. Defaults to ``os.environ``.

    Returns:
        Settings with defaults filled in for anything unset or invalid.
    """
    if environ is None:
        environ = os.environ

    log_level = environ.get("LOG_LEVEL", "info").lower()
    if log_level not in LOG_LEVELS:
        logger.warning(f"Unknown LOG_LEVEL={log_level!r}, using info")
        log_level = "info"

    registry_urls = {
        ecosystem: (environ.get(REGISTRY_URL_ENV[ecosystem]) or url).rstrip("/")
        for ecosystem, url in REGISTRY_URLS.items()
    }

    return Settings(
        request_timeout_ms=_int_setting(environ, "REQUEST_TIMEOUT", DEFAULT_TIMEOUT_MS),
        user_agent=environ.get("USER_AGENT") or DEFAULT_USER_AGENT,
        cache_ttl=_int_setting(environ, "CACHE_TTL", DEFAULT_CACHE_TTL),
        log_level=log_level,
        registry_urls=registry_urls,
    )
