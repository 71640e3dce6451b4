# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Retry policy and backoff strategies for the HTTP transport.

The transport retries through tenacity. This module holds the pieces that
decide what happens between attempts:

- default_retry_policy: which outcomes are worth another attempt
- RetryAfterWait: default backoff, honouring Retry-After on 429/503
- BackoffWait / PolicyRetry: adapters that plug user supplied hooks into
  tenacity
- TerminalErrorHandler: what the caller gets once retrying stops
"""

import asyncio
import logging
from collections.abc import Callable

import httpx
from tenacity import RetryCallState
from tenacity.retry import retry_base
from tenacity.wait import wait_base, wait_random_exponential

logger = logging.getLogger(__name__)

DEFAULT_RETRY_COUNT = 4
DEFAULT_RETRY_WAIT_MIN = 1.0
DEFAULT_RETRY_WAIT_MAX = 30.0

RetryPolicy = Callable[[httpx.Response | None, BaseException | None], bool]
"""Decides whether to retry given the last response or the exception raised
instead of one. Raising from the policy aborts the call with that error."""

Backoff = Callable[[float, float, int, httpx.Response | None], float]
"""Computes the sleep before the next attempt from (min, max, attempt number,
last response)."""

# Errors that mean the caller's own deadline or cancellation fired.
CONTEXT_ERRORS: tuple[type[BaseException], ...] = (
    asyncio.CancelledError,
    asyncio.TimeoutError,
)


def is_retryable_status(status_code: int) -> bool:
    """
    Check whether an HTTP status is worth another attempt.

    5xx responses usually relate to a transient outage on the server side,
    except 501 Not Implemented which is permanent. Status 0 and other
    invalid codes above 599 are retried as well. 429 is retried so the
    service gets time to lift the throttle.
    """
    if status_code == 0 or status_code == 429:
        return True
    return status_code >= 500 and status_code != 501


def default_retry_policy(
    response: httpx.Response | None, exc: BaseException | None
) -> bool:
    """
    Default retry predicate.

    Args:
        response: The response of the last attempt, if one was received
        exc: The exception raised instead of a response, if any

    Returns:
        True when another attempt should be made.
    """
    if exc is not None:
        if isinstance(exc, CONTEXT_ERRORS):
            return False
        return isinstance(exc, httpx.TransportError)
    if response is None:
        return False
    return is_retryable_status(response.status_code)


def _outcome(
    retry_state: RetryCallState,
) -> tuple[httpx.Response | None, BaseException | None]:
    outcome = retry_state.outcome
    if outcome is None:
        return None, None
    if outcome.failed:
        return None, outcome.exception()
    result = outcome.result()
    return (result if isinstance(result, httpx.Response) else None), None


def _last_response(retry_state: RetryCallState) -> httpx.Response | None:
    return _outcome(retry_state)[0]


class PolicyRetry(retry_base):
    """
    Tenacity retry condition backed by a RetryPolicy callable.

    Cancellation and deadline expiry end the call before the policy is
    consulted, so no policy can retry them.
    """

    def __init__(self, policy: RetryPolicy) -> None:
        self._policy = policy

    def __call__(self, retry_state: RetryCallState) -> bool:
        response, exc = _outcome(retry_state)
        if isinstance(exc, CONTEXT_ERRORS):
            return False
        return bool(self._policy(response, exc))


def parse_retry_after(response: httpx.Response) -> float | None:
    """
    Parse a numeric Retry-After header.

    Returns:
        Seconds to wait, or None when the header is absent or not a number
        of seconds (HTTP-date values are ignored).
    """
    value = response.headers.get("Retry-After")
    if not value:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


class RetryAfterWait(wait_base):
    """
    Default backoff: jittered exponential growth between min and max.

    When a 429 or 503 response carries a numeric Retry-After header, the
    server's hint wins, capped at the configured maximum.
    """

    def __init__(
        self,
        wait_min: float = DEFAULT_RETRY_WAIT_MIN,
        wait_max: float = DEFAULT_RETRY_WAIT_MAX,
    ) -> None:
        self._wait_max = wait_max
        self._fallback = wait_random_exponential(
            multiplier=wait_min, min=wait_min, max=wait_max
        )

    def __call__(self, retry_state: RetryCallState) -> float:
        response = _last_response(retry_state)
        if response is not None and response.status_code in (429, 503):
            retry_after = parse_retry_after(response)
            if retry_after is not None:
                return min(retry_after, self._wait_max)
        return max(0.0, float(self._fallback(retry_state)))


class BackoffWait(wait_base):
    """Tenacity wait strategy backed by a user supplied Backoff callable."""

    def __init__(self, backoff: Backoff, wait_min: float, wait_max: float) -> None:
        self._backoff = backoff
        self._wait_min = wait_min
        self._wait_max = wait_max

    def __call__(self, retry_state: RetryCallState) -> float:
        delay = self._backoff(
            self._wait_min,
            self._wait_max,
            retry_state.attempt_number,
            _last_response(retry_state),
        )
        return max(0.0, float(delay))


class TerminalErrorHandler:
    """
    Decides what the caller receives once no further attempt will be made.

    A failed last attempt re-raises its exception; the caller logs it. A last
    attempt that produced a response hands that response back unchanged, so
    status-based error extraction can still run on it.
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def __call__(self, retry_state: RetryCallState) -> httpx.Response | None:
        response, exc = _outcome(retry_state)
        if exc is not None:
            raise exc
        self._log.error(
            f"Failed to process request after {retry_state.attempt_number} retries."
        )
        return response


def before_sleep_log(log: logging.Logger) -> Callable[[RetryCallState], None]:
    """Build a tenacity before_sleep hook that logs the upcoming retry."""

    def _hook(retry_state: RetryCallState) -> None:
        response, exc = _outcome(retry_state)
        delay = 0.0
        if retry_state.next_action is not None:
            delay = float(retry_state.next_action.sleep)
        reason = f"HTTP {response.status_code}" if response is not None else repr(exc)
        log.debug(
            f"Retrying after {reason} (attempt {retry_state.attempt_number}, "
            f"delay {delay:.2f}s)"
        )

    return _hook


__all__ = [
    "CONTEXT_ERRORS",
    "DEFAULT_RETRY_COUNT",
    "DEFAULT_RETRY_WAIT_MAX",
    "DEFAULT_RETRY_WAIT_MIN",
    "Backoff",
    "BackoffWait",
    "PolicyRetry",
    "RetryAfterWait",
    "RetryPolicy",
    "TerminalErrorHandler",
    "before_sleep_log",
    "default_retry_policy",
    "is_retryable_status",
    "parse_retry_after",
]
