# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Response metadata types.

Every Opsgenie response carries a request identifier, the server-side
processing time and the current rate-limit posture of the account in its
headers. This module defines the dataclass that holds those values and the
single place where the headers are parsed.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

REQUEST_ID_HEADER = "X-Request-Id"
RATE_LIMIT_STATE_HEADER = "X-RateLimit-State"
RESPONSE_TIME_HEADER = "X-Response-Time"
ERROR_TYPE_HEADER = "X-Opsgenie-Errortype"


class RateLimitState(str, Enum):
    """
    Rate-limit states reported by the service.

    The header is free-form, so values outside this enum are passed through
    as plain strings. The state is informational only: the client never
    delays or rejects requests because of it.
    """

    NORMAL = "NORMAL"
    THROTTLED = "THROTTLED"


@dataclass
class ResponseMeta:
    """
    Metadata of a single successful response.

    Result types can hold a ResponseMeta (or subclass it) to satisfy the
    metadata half of the ApiResult protocol.

    Attributes:
        request_id: Value of the X-Request-Id header ("" when absent)
        response_time: Value of X-Response-Time in seconds (0.0 when absent
            or unparseable)
        rate_limit_state: Value of the X-RateLimit-State header
    """

    request_id: str = ""
    response_time: float = 0.0
    rate_limit_state: str = ""

    def set_request_id(self, request_id: str) -> None:
        self.request_id = request_id

    def set_response_time(self, response_time: float) -> None:
        self.response_time = response_time

    def set_rate_limit_state(self, state: str) -> None:
        self.rate_limit_state = state

    @property
    def is_throttled(self) -> bool:
        """True when the service reported the account as throttled."""
        return self.rate_limit_state.upper() == RateLimitState.THROTTLED.value


def _header(headers: Mapping[str, str], name: str) -> str:
    # httpx.Headers is case-insensitive already; plain dicts are not.
    value = headers.get(name)
    if value is None:
        lowered = name.lower()
        for key, candidate in headers.items():
            if key.lower() == lowered:
                return candidate
        return ""
    return value


def parse_response_time(value: str) -> float | None:
    """
    Parse an X-Response-Time header value.

    Args:
        value: Raw header value, e.g. "12.5"

    Returns:
        The value as a float, or None when it is missing or not numeric.
    """
    if not value:
        return None
    try:
        return float(value.strip())
    except ValueError:
        return None


def parse_response_meta(headers: Mapping[str, str]) -> ResponseMeta:
    """
    Parse response metadata from HTTP headers.

    Header names are matched case-insensitively. Missing headers yield empty
    values; an unparseable response time leaves ``response_time`` at zero.

    Args:
        headers: Response headers (an ``httpx.Headers`` or a plain mapping)

    Returns:
        A populated ResponseMeta.
    """
    meta = ResponseMeta(
        request_id=_header(headers, REQUEST_ID_HEADER),
        rate_limit_state=_header(headers, RATE_LIMIT_STATE_HEADER),
    )
    response_time = parse_response_time(_header(headers, RESPONSE_TIME_HEADER))
    if response_time is not None:
        meta.response_time = response_time
    return meta


__all__ = [
    "ERROR_TYPE_HEADER",
    "RATE_LIMIT_STATE_HEADER",
    "REQUEST_ID_HEADER",
    "RESPONSE_TIME_HEADER",
    "RateLimitState",
    "ResponseMeta",
    "parse_response_meta",
    "parse_response_time",
]
