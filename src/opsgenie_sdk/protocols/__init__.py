# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Protocol definitions for pluggable request and result types.

Concrete resource endpoints live outside the core client. They plug in by
implementing these protocols:

- ApiRequest: what to send (method, endpoint, body, validation)
- ApiResult: where the decoded response and its metadata go
"""

from .request import ApiRequest
from .result import ApiResult

__all__ = [
    "ApiRequest",
    "ApiResult",
]
