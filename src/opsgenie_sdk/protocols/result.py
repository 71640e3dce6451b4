# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for response receivers."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ApiResult(Protocol):
    """
    Capability every result value exposes to the client.

    The caller owns the result and the client fills it in place: first the
    decoded body through ``load``, then the response metadata through the
    three setters. Nothing is written when the call fails.

    ``opsgenie_sdk.types.ResponseMeta`` implements the setters and can be
    embedded or subclassed by result types.
    """

    def load(self, data: Any) -> None:
        """
        Absorb the decoded JSON body.

        Raise ValueError or TypeError (pydantic's ValidationError is a
        ValueError) when the document does not fit the result.
        """
        ...

    def set_request_id(self, request_id: str) -> None: ...

    def set_response_time(self, response_time: float) -> None: ...

    def set_rate_limit_state(self, state: str) -> None: ...
