# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Retry-capable HTTP executor.

RetryableTransport wraps an ``httpx.AsyncClient`` and drives every request
through a tenacity controller assembled from the configured retry policy,
backoff strategy, attempt limit and terminal error handler.
"""

import asyncio
import logging
from urllib.parse import urlsplit

import httpx
from tenacity import AsyncRetrying, stop_after_attempt
from tenacity.wait import wait_base

from ..exceptions import ConfigurationError
from .retry import (
    DEFAULT_RETRY_COUNT,
    DEFAULT_RETRY_WAIT_MAX,
    DEFAULT_RETRY_WAIT_MIN,
    Backoff,
    BackoffWait,
    PolicyRetry,
    RetryAfterWait,
    RetryPolicy,
    TerminalErrorHandler,
    before_sleep_log,
    default_retry_policy,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def build_proxy_transport(proxy_url: str) -> httpx.AsyncHTTPTransport:
    """
    Build an HTTP transport that routes every request through a proxy.

    Args:
        proxy_url: Proxy URL, e.g. "http://proxy.internal:3128"

    Returns:
        A transport bound to the proxy.

    Raises:
        ConfigurationError: If the proxy URL cannot be parsed or has no host
    """
    try:
        if not urlsplit(proxy_url).hostname:
            raise ValueError("missing proxy host")
        proxy = httpx.Proxy(proxy_url)
    except (httpx.InvalidURL, ValueError, TypeError) as e:
        raise ConfigurationError(f"Invalid proxy URL {proxy_url!r}: {e}") from e
    return httpx.AsyncHTTPTransport(proxy=proxy)


def build_http_client(
    transport: httpx.AsyncBaseTransport | None = None,
    proxy_url: str = "",
    timeout: float = DEFAULT_TIMEOUT,
) -> httpx.AsyncClient:
    """
    Create the raw HTTP client used by RetryableTransport.

    A custom transport is applied first; a proxy, when configured, replaces
    it so that all traffic flows through the proxy.

    Args:
        transport: Optional custom inner transport
        proxy_url: Optional proxy URL
        timeout: Per-attempt timeout in seconds

    Raises:
        ConfigurationError: If the proxy URL cannot be parsed
    """
    if proxy_url:
        transport = build_proxy_transport(proxy_url)
    return httpx.AsyncClient(transport=transport, timeout=httpx.Timeout(timeout))


class RetryableTransport:
    """
    Sends requests with retries.

    The transport holds no per-call state, so one instance can serve any
    number of concurrent calls on the same event loop.

    Attributes:
        retry_max: Maximum number of retries after the first attempt
        retry_wait_min: Lower bound handed to the backoff (seconds)
        retry_wait_max: Upper bound handed to the backoff (seconds)

    Example:
        >>> transport = RetryableTransport(httpx.AsyncClient(), retry_max=2)
        >>> response = await transport.send(client.build_request("GET", url))
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        retry_max: int = DEFAULT_RETRY_COUNT,
        retry_policy: RetryPolicy | None = None,
        backoff: Backoff | None = None,
        retry_wait_min: float = DEFAULT_RETRY_WAIT_MIN,
        retry_wait_max: float = DEFAULT_RETRY_WAIT_MAX,
        log: logging.Logger | None = None,
    ):
        self.client = client
        self.retry_max = retry_max
        self.retry_policy: RetryPolicy = retry_policy or default_retry_policy
        self.backoff = backoff
        self.retry_wait_min = retry_wait_min
        self.retry_wait_max = retry_wait_max
        self._log = log or logger

    def _wait_strategy(self) -> wait_base:
        if self.backoff is not None:
            return BackoffWait(self.backoff, self.retry_wait_min, self.retry_wait_max)
        return RetryAfterWait(self.retry_wait_min, self.retry_wait_max)

    def _controller(self) -> AsyncRetrying:
        return AsyncRetrying(
            retry=PolicyRetry(self.retry_policy),
            wait=self._wait_strategy(),
            stop=stop_after_attempt(self.retry_max + 1),
            before_sleep=before_sleep_log(self._log),
            retry_error_callback=TerminalErrorHandler(self._log),
            reraise=True,
        )

    async def send(
        self, request: httpx.Request, *, deadline: float | None = None
    ) -> httpx.Response:
        """
        Send a request, retrying per policy.

        The same request object is sent on every attempt. Each response body
        is read in full before the retry policy sees it.

        Args:
            request: The request to send
            deadline: Optional event-loop time after which no new attempt
                is started

        Returns:
            The first response the policy accepts, or the last response once
            attempts are exhausted.

        Raises:
            asyncio.TimeoutError: If the deadline passed before an attempt
            httpx.TransportError: If every attempt failed without a response
        """
        loop = asyncio.get_running_loop()

        async def attempt() -> httpx.Response:
            if deadline is not None and loop.time() >= deadline:
                raise asyncio.TimeoutError()
            return await self.client.send(request)

        response: httpx.Response = await self._controller()(attempt)
        return response

    async def aclose(self) -> None:
        """Close the underlying HTTP client and release its connections."""
        await self.client.aclose()


__all__ = [
    "DEFAULT_TIMEOUT",
    "RetryableTransport",
    "build_http_client",
    "build_proxy_transport",
]
