# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Type definitions for the Opsgenie SDK.

This module exports the response metadata types shared by the client and
by result implementations.
"""

from .errors import ApiErrorBody
from .meta import (
    ERROR_TYPE_HEADER,
    RATE_LIMIT_STATE_HEADER,
    REQUEST_ID_HEADER,
    RESPONSE_TIME_HEADER,
    RateLimitState,
    ResponseMeta,
    parse_response_meta,
    parse_response_time,
)

__all__ = [
    "ERROR_TYPE_HEADER",
    "RATE_LIMIT_STATE_HEADER",
    "REQUEST_ID_HEADER",
    "RESPONSE_TIME_HEADER",
    "ApiErrorBody",
    "RateLimitState",
    "ResponseMeta",
    "parse_response_meta",
    "parse_response_time",
]
