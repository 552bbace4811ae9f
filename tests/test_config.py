"""Tests for environment-driven settings."""

import logging

from pkgintel.config import (
    DEFAULT_CACHE_TTL,
    DEFAULT_TIMEOUT_MS,
    DEFAULT_USER_AGENT,
    REGISTRY_URLS,
    EngineConfig,
    load_settings,
)
from pkgintel.models.schemas import Ecosystem


def test_defaults():
    settings = load_settings({})

    assert settings.request_timeout_ms == DEFAULT_TIMEOUT_MS == 30_000
    assert settings.user_agent == DEFAULT_USER_AGENT
    assert settings.user_agent.startswith("pkgintel/")
    assert settings.cache_ttl == DEFAULT_CACHE_TTL == 300
    assert settings.log_level == "info"
    assert settings.logging_level == logging.INFO
    assert settings.registry_urls == REGISTRY_URLS


def test_reads_environment():
    settings = load_settings(
        {
            "REQUEST_TIMEOUT": "5000",
            "USER_AGENT": "my-agent/2.0",
            "CACHE_TTL": "60",
            "LOG_LEVEL": "DEBUG",
        }
    )

    assert settings.request_timeout_ms == 5000
    assert settings.user_agent == "my-agent/2.0"
    assert settings.cache_ttl == 60
    assert settings.logging_level == logging.DEBUG


def test_invalid_values_fall_back(caplog):
    with caplog.at_level(logging.WARNING, logger="pkgintel.config"):
        settings = load_settings(
            {"REQUEST_TIMEOUT": "soon", "CACHE_TTL": "-5", "LOG_LEVEL": "loud"}
        )

    assert settings.request_timeout_ms == DEFAULT_TIMEOUT_MS
    assert settings.cache_ttl == DEFAULT_CACHE_TTL
    assert settings.log_level == "info"
    assert "REQUEST_TIMEOUT" in caplog.text


def test_warn_is_an_accepted_level():
    assert load_settings({"LOG_LEVEL": "warn"}).logging_level == logging.WARNING


def test_registry_url_overrides():
    settings = load_settings({"NPM_REGISTRY_URL": "https://npm.internal.example/"})

    assert settings.registry_urls[Ecosystem.NPM] == "https://npm.internal.example"
    assert settings.registry_urls[Ecosystem.PYPI] == "https://pypi.org/pypi"


def test_engine_config_converts_milliseconds():
    config = load_settings({"REQUEST_TIMEOUT": "2500"}).engine_config()

    assert config.timeout == 2.5
    assert config.base_url(Ecosystem.CRATES) == "https://crates.io/api/v1/crates"


def test_engine_config_defaults():
    config = EngineConfig()
    assert config.timeout == 30.0
    assert config.base_url(Ecosystem.NPM) == "https://registry.npmjs.org"
