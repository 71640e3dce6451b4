# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Opsgenie SDK - Async client core for the Opsgenie REST API.

This library provides the request-execution pipeline shared by every
Opsgenie resource: validation, JSON serialization, HTTP dispatch with
retries and backoff, proxy support, response decoding, response metadata
and uniform error reporting.

Key Features:
    - Region aware base URL selection (default and EU)
    - Retries on transport errors, 429 and 5xx (except 501) with jittered
      exponential backoff that honours Retry-After
    - Pluggable retry policy and backoff hooks
    - Per-call deadlines and native asyncio cancellation
    - Request id, response time and rate-limit state on every result
    - Structured ApiError for every status of 300 and above

Quick Start:
    >>> from dataclasses import dataclass, field
    >>> from pydantic import BaseModel
    >>> from opsgenie_sdk import Config, OpsGenieClient, ResponseMeta
    >>>
    >>> class GetHeartbeat(BaseModel):
    ...     name: str
    ...     def validate(self):
    ...         return (True, None) if self.name else (False, ValueError("name required"))
    ...     def method(self) -> str:
    ...         return "GET"
    ...     def endpoint(self) -> str:
    ...         return f"/v2/heartbeats/{self.name}"
    >>>
    >>> @dataclass
    ... class HeartbeatResult(ResponseMeta):
    ...     data: dict = field(default_factory=dict)
    ...     def load(self, data):
    ...         self.data = data["data"]
    >>>
    >>> async with OpsGenieClient(Config(api_key="...")) as client:
    ...     result = HeartbeatResult()
    ...     await client.execute(GetHeartbeat(name="db"), result, timeout=10)

Main Exports:
    - OpsGenieClient, new_client: The client and its factory
    - Config, API_URL, API_URL_EU: Configuration and region selectors
    - ApiRequest, ApiResult: Protocols for resource types
    - ResponseMeta: Ready-made implementation of the metadata setters
    - ApiError and the OpsGenieError hierarchy

Version: 1.0.0
"""

__version__ = "1.0.0"

from .client import OpsGenieClient, new_client
from .config import API_URL, API_URL_EU, Config
from .exceptions import (
    ApiError,
    ConfigurationError,
    OpsGenieError,
    RequestBuildError,
    RequestValidationError,
    ResponseParseError,
    TransportError,
)
from .protocols import ApiRequest, ApiResult
from .transport import Backoff, RetryPolicy, default_retry_policy
from .types import RateLimitState, ResponseMeta, parse_response_meta

__all__ = [
    "API_URL",
    "API_URL_EU",
    # Exceptions
    "ApiError",
    # Protocols
    "ApiRequest",
    "ApiResult",
    "Backoff",
    # Configuration
    "Config",
    "ConfigurationError",
    # Client
    "OpsGenieClient",
    "OpsGenieError",
    # Types
    "RateLimitState",
    "RequestBuildError",
    "RequestValidationError",
    "ResponseMeta",
    "ResponseParseError",
    # Transport hooks
    "RetryPolicy",
    "TransportError",
    "default_retry_policy",
    "new_client",
    "parse_response_meta",
]
