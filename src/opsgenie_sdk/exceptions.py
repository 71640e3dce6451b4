# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the Opsgenie SDK.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from OpsGenieError, making it easy to catch every
SDK-originated failure with a single except clause.

Context errors are the exception: a cancelled call surfaces
``asyncio.CancelledError`` and an expired deadline surfaces
``asyncio.TimeoutError``, both unchanged.
"""


class OpsGenieError(Exception):
    """Base exception for all Opsgenie SDK errors.

    Example:
        try:
            await client.execute(request, result)
        except OpsGenieError as e:
            logger.error(f"Opsgenie call failed: {e}")
    """

    pass


class ConfigurationError(OpsGenieError):
    """Raised when a client cannot be built from the given configuration.

    Common causes include:
    - A blank API key
    - A proxy URL that cannot be parsed
    - A negative retry count or inverted backoff bounds

    No client is returned when this is raised.
    """

    pass


class RequestValidationError(OpsGenieError):
    """Raised when a request descriptor rejects itself.

    Descriptors usually hand back their own exception from ``validate()``,
    which is raised unchanged. This type is only used when the descriptor
    reports failure without supplying an exception.
    """

    pass


class RequestBuildError(OpsGenieError):
    """Raised when the HTTP request cannot be assembled.

    Typically the request body could not be JSON-encoded or the target URL
    was malformed. Nothing has been sent when this is raised.
    """

    pass


class TransportError(OpsGenieError):
    """Raised when the request could not be delivered.

    Covers network failures that persisted through every retry and transport
    failures the retry policy considers permanent.

    Attributes:
        cause: The underlying transport exception (also chained as
            ``__cause__``).
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class ResponseParseError(OpsGenieError):
    """Raised when a successful response body cannot be decoded into the result."""

    pass


class ApiError(OpsGenieError):
    """Raised for every HTTP response with a status code of 300 or above.

    The Opsgenie error body is decoded on a best-effort basis: when the body
    is missing or malformed the decoded fields simply stay empty.

    Attributes:
        status_code: The HTTP status code as a decimal string (e.g. "429").
        message: Error message reported by the service.
        took: Server-side processing time in seconds.
        request_id: Request identifier reported by the service.
        errors: Per-field error messages.
        error_header: Value of the ``X-Opsgenie-Errortype`` response header.

    Example:
        try:
            await client.execute(request, result)
        except ApiError as e:
            if e.status_code == "404":
                return None
            raise
    """

    def __init__(
        self,
        status_code: str,
        message: str = "",
        took: float = 0.0,
        request_id: str = "",
        errors: dict[str, str] | None = None,
        error_header: str = "",
    ):
        self.status_code = status_code
        self.message = message
        self.took = took
        self.request_id = request_id
        self.errors = errors
        self.error_header = error_header
        super().__init__(self._format())

    def _format(self) -> str:
        text = (
            f"Error occurred with Status code: {self.status_code}, "
            f"Message: {self.message}, "
            f"Took: {self.took:f}, "
            f"RequestId: {self.request_id}"
        )
        if self.error_header:
            text += f", Error Header: {self.error_header}"
        if self.errors is not None:
            text += f", Error Detail: {self.errors}"
        return text
