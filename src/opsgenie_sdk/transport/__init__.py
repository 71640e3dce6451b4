# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
HTTP transport with pluggable retry behaviour.

Exports:
    - RetryableTransport: retrying executor around ``httpx.AsyncClient``
    - build_http_client: raw client factory (custom transport, proxy, timeout)
    - default_retry_policy: the default retry predicate
    - RetryPolicy, Backoff: signatures of the pluggable hooks
"""

from .http import (
    DEFAULT_TIMEOUT,
    RetryableTransport,
    build_http_client,
    build_proxy_transport,
)
from .retry import (
    DEFAULT_RETRY_COUNT,
    DEFAULT_RETRY_WAIT_MAX,
    DEFAULT_RETRY_WAIT_MIN,
    Backoff,
    RetryAfterWait,
    RetryPolicy,
    default_retry_policy,
    is_retryable_status,
)

__all__ = [
    "DEFAULT_RETRY_COUNT",
    "DEFAULT_RETRY_WAIT_MAX",
    "DEFAULT_RETRY_WAIT_MIN",
    "DEFAULT_TIMEOUT",
    "Backoff",
    "RetryAfterWait",
    "RetryPolicy",
    "RetryableTransport",
    "build_http_client",
    "build_proxy_transport",
    "default_retry_policy",
    "is_retryable_status",
]
