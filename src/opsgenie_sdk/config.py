# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Client configuration for the Opsgenie SDK.

This module provides the immutable settings bundle consumed when a client
is constructed, the region to base-URL mapping and log level parsing.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any

import httpx

from .exceptions import ConfigurationError
from .transport.http import DEFAULT_TIMEOUT
from .transport.retry import (
    DEFAULT_RETRY_COUNT,
    DEFAULT_RETRY_WAIT_MAX,
    DEFAULT_RETRY_WAIT_MIN,
    Backoff,
    RetryPolicy,
)

logger = logging.getLogger(__name__)

API_URL = "https://api.opsgenie.com"
API_URL_EU = "https://api.eu.opsgenie.com"

DEFAULT_LOG_LEVEL = "info"

# Accepted level names, including the aliases other Opsgenie SDKs use.
LOG_LEVELS: dict[str, int] = {
    "panic": logging.CRITICAL,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}

ENV_PREFIX = "OPSGENIE_"


def resolve_base_url(api_url: str) -> str:
    """
    Map a region selector to its base URL.

    Only the EU constant selects the EU region. Every other value, including
    an empty string, selects the default region.
    """
    if api_url == API_URL_EU:
        return API_URL_EU
    return API_URL


def parse_log_level(name: str, log: logging.Logger | None = None) -> int:
    """
    Parse a log level name case-insensitively.

    Args:
        name: Level name such as "debug" or "WARN". Empty means info.
        log: Logger that receives the fallback warning

    Returns:
        The numeric logging level. Unknown names fall back to INFO after a
        one-line warning.
    """
    if not name:
        return logging.INFO
    level = LOG_LEVELS.get(name.strip().lower())
    if level is None:
        (log or logger).warning(
            f"Unknown log level {name!r}. Setting log level as {DEFAULT_LOG_LEVEL}"
        )
        return logging.INFO
    return level


def effective_level_name(name: str) -> str:
    """
    Return the level name written back on the client's config.

    Known names keep the alias the caller chose, lower-cased; empty and
    unknown names become the default.
    """
    normalized = name.strip().lower()
    if normalized in LOG_LEVELS:
        return normalized
    return DEFAULT_LOG_LEVEL


@dataclass(frozen=True)
class Config:
    """
    Settings bundle for an Opsgenie client.

    The client keeps its own copy; the effective log level name is written
    back on that copy.
    """

    api_key: str = ""
    """API key sent as ``Authorization: GenieKey <api_key>``. Required."""

    api_url: str = ""
    """Region selector: empty or API_URL for the default region, API_URL_EU for EU."""

    transport: httpx.AsyncBaseTransport | None = None
    """Custom inner HTTP transport. Replaced when proxy_url is set."""

    proxy_url: str = ""
    """Route every request through this proxy."""

    log_level: str = ""
    """Log level name. Unknown names fall back to info."""

    logger: logging.Logger | None = None
    """Log sink for client records. Defaults to the package logger."""

    retry_count: int = 0
    """Maximum number of retries. 0 selects the default of 4."""

    backoff: Backoff | None = None
    """Custom backoff: (min, max, attempt, last response) -> seconds."""

    retry_policy: RetryPolicy | None = None
    """Custom retry predicate: (last response, exception) -> retry?"""

    retry_wait_min: float = DEFAULT_RETRY_WAIT_MIN
    """Lower backoff bound in seconds."""

    retry_wait_max: float = DEFAULT_RETRY_WAIT_MAX
    """Upper backoff bound in seconds."""

    timeout: float = DEFAULT_TIMEOUT
    """Per-attempt HTTP timeout in seconds."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.retry_count < 0:
            raise ConfigurationError("retry_count must be zero or positive")
        if self.retry_wait_min < 0:
            raise ConfigurationError("retry_wait_min must be zero or positive")
        if self.retry_wait_max < self.retry_wait_min:
            raise ConfigurationError("retry_wait_max must not be below retry_wait_min")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")

    @property
    def base_url(self) -> str:
        """Base URL selected by api_url."""
        return resolve_base_url(self.api_url)

    @property
    def effective_retry_count(self) -> int:
        """Retry count actually used: retry_count, or 4 when it is zero."""
        return self.retry_count or DEFAULT_RETRY_COUNT

    @classmethod
    def from_env(cls, **overrides: Any) -> "Config":
        """
        Build a Config from OPSGENIE_* environment variables.

        Reads OPSGENIE_API_KEY, OPSGENIE_API_URL, OPSGENIE_PROXY_URL,
        OPSGENIE_LOG_LEVEL and OPSGENIE_RETRY_COUNT. Keyword overrides win
        over the environment.

        Raises:
            ConfigurationError: If OPSGENIE_RETRY_COUNT is not an integer
        """
        values: dict[str, Any] = {}
        for field_name in ("api_key", "api_url", "proxy_url", "log_level"):
            raw = os.getenv(f"{ENV_PREFIX}{field_name.upper()}")
            if raw is not None:
                values[field_name] = raw.strip()

        raw_retry = os.getenv(f"{ENV_PREFIX}RETRY_COUNT")
        if raw_retry is not None and raw_retry.strip():
            try:
                values["retry_count"] = int(raw_retry)
            except ValueError as e:
                raise ConfigurationError(
                    f"{ENV_PREFIX}RETRY_COUNT must be an integer, got {raw_retry!r}"
                ) from e

        values.update(overrides)
        return cls(**values)


__all__ = [
    "API_URL",
    "API_URL_EU",
    "DEFAULT_LOG_LEVEL",
    "LOG_LEVELS",
    "Config",
    "effective_level_name",
    "parse_log_level",
    "resolve_base_url",
]
