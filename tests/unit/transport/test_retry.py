"""Tests for retry policy, backoff and terminal error handling."""

import asyncio
import logging

import httpx
import pytest
from tenacity import RetryCallState

from opsgenie_sdk.transport.retry import (
    BackoffWait,
    PolicyRetry,
    RetryAfterWait,
    TerminalErrorHandler,
    default_retry_policy,
    is_retryable_status,
    parse_retry_after,
)


def state_with_result(response, attempt_number=1):
    state = RetryCallState(retry_object=None, fn=None, args=(), kwargs={})
    state.attempt_number = attempt_number
    state.set_result(response)
    return state


def state_with_exception(exc, attempt_number=1):
    state = RetryCallState(retry_object=None, fn=None, args=(), kwargs={})
    state.attempt_number = attempt_number
    state.set_exception((type(exc), exc, None))
    return state


class TestIsRetryableStatus:
    @pytest.mark.parametrize(
        "status,expected",
        [
            (0, True),
            (200, False),
            (204, False),
            (301, False),
            (400, False),
            (404, False),
            (422, False),
            (429, True),
            (500, True),
            (501, False),
            (502, True),
            (503, True),
            (504, True),
            (599, True),
            (600, True),
        ],
    )
    def test_status_table(self, status, expected):
        """429, 5xx except 501, and invalid codes are retried."""
        assert is_retryable_status(status) is expected


class TestDefaultRetryPolicy:
    def test_transport_error_retried(self):
        """Connection failures are worth another attempt."""
        assert default_retry_policy(None, httpx.ConnectError("refused")) is True
        assert default_retry_policy(None, httpx.ReadTimeout("slow")) is True

    @pytest.mark.parametrize(
        "exc", [asyncio.CancelledError(), asyncio.TimeoutError()]
    )
    def test_context_errors_not_retried(self, exc):
        """Cancellation and deadline expiry stop retrying immediately."""
        assert default_retry_policy(None, exc) is False

    def test_other_exceptions_not_retried(self):
        """Programming errors are not retried."""
        assert default_retry_policy(None, RuntimeError("bug")) is False

    def test_uses_status_of_response(self):
        """Responses are judged by status code."""
        assert default_retry_policy(httpx.Response(503), None) is True
        assert default_retry_policy(httpx.Response(501), None) is False
        assert default_retry_policy(httpx.Response(200), None) is False

    def test_nothing_to_judge(self):
        """No response and no exception means no retry."""
        assert default_retry_policy(None, None) is False


class TestPolicyRetry:
    def test_passes_response(self):
        """The policy receives the last response."""
        seen = []

        def policy(response, exc):
            seen.append((response, exc))
            return True

        response = httpx.Response(500)
        assert PolicyRetry(policy)(state_with_result(response)) is True
        assert seen == [(response, None)]

    def test_passes_exception(self):
        """The policy receives the raised exception."""
        seen = []
        error = httpx.ConnectError("refused")

        def policy(response, exc):
            seen.append((response, exc))
            return False

        assert PolicyRetry(policy)(state_with_exception(error)) is False
        assert seen == [(None, error)]

    def test_policy_error_propagates(self):
        """An exception raised by the policy escapes unchanged."""

        def policy(response, exc):
            raise PermissionError("stop now")

        with pytest.raises(PermissionError, match="stop now"):
            PolicyRetry(policy)(state_with_result(httpx.Response(500)))

    @pytest.mark.parametrize(
        "exc", [asyncio.CancelledError(), asyncio.TimeoutError()]
    )
    def test_context_errors_bypass_policy(self, exc):
        """A policy that retries everything still cannot retry cancellation."""
        calls = []

        def retry_everything(response, exc):
            calls.append(exc)
            return True

        assert PolicyRetry(retry_everything)(state_with_exception(exc)) is False
        assert calls == []


class TestParseRetryAfter:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("5", 5.0),
            ("0.5", 0.5),
            ("-1", None),
            ("Wed, 21 Oct 2015 07:28:00 GMT", None),
        ],
    )
    def test_values(self, value, expected):
        """Only non-negative numeric values are honoured."""
        response = httpx.Response(429, headers={"Retry-After": value})
        assert parse_retry_after(response) == expected

    def test_absent(self):
        """A missing header yields None."""
        assert parse_retry_after(httpx.Response(429)) is None


class TestRetryAfterWait:
    def test_honours_retry_after_on_429(self):
        """The server hint wins on 429."""
        wait = RetryAfterWait(1.0, 30.0)
        response = httpx.Response(429, headers={"Retry-After": "7"})
        assert wait(state_with_result(response)) == 7.0

    def test_retry_after_capped_at_max(self):
        """The server hint never exceeds the configured maximum."""
        wait = RetryAfterWait(1.0, 10.0)
        response = httpx.Response(503, headers={"Retry-After": "120"})
        assert wait(state_with_result(response)) == 10.0

    def test_retry_after_ignored_on_500(self):
        """Retry-After only applies to 429 and 503."""
        wait = RetryAfterWait(1.0, 2.0)
        response = httpx.Response(500, headers={"Retry-After": "25"})
        assert 0.0 <= wait(state_with_result(response)) <= 2.0

    @pytest.mark.parametrize("attempt", [1, 2, 3, 6, 10])
    def test_exponential_fallback_bounded(self, attempt):
        """Jittered delays stay within the configured bounds."""
        wait = RetryAfterWait(1.0, 30.0)
        delay = wait(state_with_exception(httpx.ConnectError("x"), attempt))
        assert 0.0 <= delay <= 30.0


class TestBackoffWait:
    def test_hook_receives_bounds_attempt_and_response(self):
        """The custom backoff sees (min, max, attempt, last response)."""
        calls = []

        def backoff(wait_min, wait_max, attempt, response):
            calls.append((wait_min, wait_max, attempt, response))
            return 0.25

        response = httpx.Response(502)
        wait = BackoffWait(backoff, 0.5, 4.0)
        assert wait(state_with_result(response, attempt_number=3)) == 0.25
        assert calls == [(0.5, 4.0, 3, response)]

    def test_negative_delay_clamped(self):
        """A negative delay is treated as zero."""
        wait = BackoffWait(lambda *_: -3, 0.0, 1.0)
        assert wait(state_with_exception(httpx.ConnectError("x"))) == 0.0


class TestTerminalErrorHandler:
    def test_returns_last_response(self, caplog):
        """An exhausted response is handed back and logged."""
        log = logging.getLogger("opsgenie_sdk.tests.retry")
        response = httpx.Response(429)
        with caplog.at_level(logging.ERROR, logger=log.name):
            result = TerminalErrorHandler(log)(state_with_result(response, 5))
        assert result is response
        assert "Failed to process request after 5 retries." in caplog.text

    def test_reraises_last_exception(self):
        """An exhausted failure re-raises the last exception."""
        error = httpx.ConnectError("refused")
        with pytest.raises(httpx.ConnectError):
            TerminalErrorHandler()(state_with_exception(error, 5))
