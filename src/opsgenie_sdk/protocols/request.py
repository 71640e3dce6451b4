# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for request descriptors."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ApiRequest(Protocol):
    """
    Capability every request descriptor exposes to the client.

    The client is polymorphic over this protocol; it never needs to know
    which resource a descriptor addresses. For methods other than GET and
    DELETE the descriptor itself is JSON-encoded as the request body, so
    descriptors are usually pydantic models or dataclasses whose fields are
    the wire fields.
    """

    def validate(self) -> tuple[bool, Exception | None]:
        """
        Check the descriptor before anything is sent.

        Returns:
            ``(True, None)`` when the request may be sent, otherwise
            ``(False, error)``. The error is raised to the caller unchanged.
        """
        ...

    def method(self) -> str:
        """HTTP method: one of GET, POST, PUT, PATCH, DELETE."""
        ...

    def endpoint(self) -> str:
        """Path appended to the base URL, including the leading slash."""
        ...
