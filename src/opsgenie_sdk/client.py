# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Opsgenie API client.

OpsGenieClient is the single entry point of the SDK. It binds a Config and
a retrying HTTP transport, and drives every call through the same pipeline:

    validate -> build request -> send (with retries) -> classify status
    -> decode body into the result -> copy response metadata

Resource-specific request and result types plug in through the ApiRequest
and ApiResult protocols.
"""

import asyncio
import dataclasses
import logging
import platform
from collections.abc import Mapping
from types import TracebackType
from typing import Any

import httpx
from pydantic import BaseModel, TypeAdapter
from typing_extensions import Self

from .config import Config, effective_level_name, parse_log_level
from .exceptions import (
    ApiError,
    ConfigurationError,
    OpsGenieError,
    RequestBuildError,
    RequestValidationError,
    ResponseParseError,
    TransportError,
)
from .protocols import ApiRequest, ApiResult
from .transport.http import RetryableTransport, build_http_client
from .transport.retry import CONTEXT_ERRORS
from .types.errors import ApiErrorBody
from .types.meta import (
    ERROR_TYPE_HEADER,
    RATE_LIMIT_STATE_HEADER,
    REQUEST_ID_HEADER,
    RESPONSE_TIME_HEADER,
    parse_response_time,
)

logger = logging.getLogger(__name__)

SDK_NAME = "opsgenie-python-sdk"

ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})
BODYLESS_METHODS = frozenset({"GET", "DELETE"})

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
# GET requests have always been sent with a form content type even though
# they carry no body. Kept for wire compatibility.
LEGACY_GET_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=UTF-8"

_ANY_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any)


def build_user_agent(sdk_name: str = SDK_NAME) -> str:
    """Return ``"<sdk-name> python<version> (<os>/<arch>)"``."""
    return (
        f"{sdk_name} python{platform.python_version()} "
        f"({platform.system().lower()}/{platform.machine().lower()})"
    )


def redact(secret: str) -> str:
    """Mask a secret for logging, keeping at most its last four characters."""
    if len(secret) <= 8:
        return "***"
    return f"***{secret[-4:]}"


def encode_body(request: Any) -> bytes:
    """
    JSON-encode a request descriptor.

    Pydantic models and dataclasses are encoded field by field (aliases
    applied, None values dropped); mappings are encoded as-is.

    Raises:
        RequestBuildError: If the descriptor cannot be JSON-encoded
    """
    try:
        if isinstance(request, BaseModel):
            return request.model_dump_json(by_alias=True, exclude_none=True).encode()
        if dataclasses.is_dataclass(request) and not isinstance(request, type):
            adapter: TypeAdapter[Any] = TypeAdapter(type(request))
            return adapter.dump_json(request, by_alias=True, exclude_none=True)
        if isinstance(request, Mapping):
            return _ANY_ADAPTER.dump_json(dict(request))
    except (TypeError, ValueError) as e:
        raise RequestBuildError(f"Request body could not be encoded: {e}") from e
    raise RequestBuildError(
        f"Request body could not be encoded: unsupported type {type(request).__name__}"
    )


def describe_error(error: BaseException) -> str:
    """Return the error message, or the error type when the message is blank."""
    message = str(error).strip()
    if not message:
        return type(error).__name__
    return message


def _validation_error(error: Exception | None) -> Exception:
    if isinstance(error, Exception):
        return error
    if error is None:
        return RequestValidationError("Request validation failed")
    return RequestValidationError(str(error))


class OpsGenieClient:
    """
    Async client for the Opsgenie REST API.

    The client holds no per-call state: one instance can serve concurrent
    calls on the same event loop. Close it with ``aclose()`` or use it as an
    async context manager.

    Attributes:
        config: Copy of the configuration with the effective log level
        base_url: Base URL selected by the configured region
        user_agent: User-Agent header sent with every request
        transport: The retrying HTTP transport

    Example:
        >>> config = Config(api_key="...", api_url=API_URL_EU)
        >>> async with OpsGenieClient(config) as client:
        ...     result = HeartbeatResult()
        ...     await client.execute(GetHeartbeatRequest(name="db"), result)
    """

    def __init__(self, config: Config):
        """
        Initialize the client.

        Args:
            config: Client configuration

        Raises:
            ConfigurationError: If the API key is blank or the proxy URL
                cannot be parsed
        """
        if not config.api_key:
            raise ConfigurationError("API key cannot be blank")

        self._log = config.logger or logger
        level = parse_log_level(config.log_level, self._log)
        self._log.setLevel(level)

        self.config = dataclasses.replace(
            config, log_level=effective_level_name(config.log_level)
        )
        self.base_url = config.base_url
        self.user_agent = build_user_agent()
        self.transport = RetryableTransport(
            build_http_client(config.transport, config.proxy_url, config.timeout),
            retry_max=config.effective_retry_count,
            retry_policy=config.retry_policy,
            backoff=config.backoff,
            retry_wait_min=config.retry_wait_min,
            retry_wait_max=config.retry_wait_max,
            log=self._log,
        )

        self._log.info(
            f"Client is configured with ApiKey: {redact(config.api_key)}, "
            f"ApiUrl: {self.base_url}, ProxyUrl: {config.proxy_url}, "
            f"LogLevel: {self.config.log_level}, "
            f"RetryMaxCount: {self.transport.retry_max}"
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the underlying HTTP connections."""
        await self.transport.aclose()

    def build_request(self, request: ApiRequest) -> httpx.Request:
        """
        Build the HTTP request for a descriptor.

        The returned request is reused unchanged on every retry.

        Args:
            request: The request descriptor

        Returns:
            The HTTP request with URL, headers and body set.

        Raises:
            RequestBuildError: If the method is not supported, the body
                cannot be encoded or the URL is malformed
        """
        method = request.method().upper()
        if method not in ALLOWED_METHODS:
            raise RequestBuildError(f"Unsupported HTTP method: {request.method()!r}")

        headers = {
            "Accept": "application/json",
            "Authorization": f"GenieKey {self.config.api_key}",
            "User-Agent": self.user_agent,
        }
        content: bytes | None = None
        if method not in BODYLESS_METHODS:
            content = encode_body(request)
            headers["Content-Type"] = JSON_CONTENT_TYPE
        elif method == "GET":
            headers["Content-Type"] = LEGACY_GET_CONTENT_TYPE

        url = self.base_url + request.endpoint()
        try:
            return httpx.Request(method, url, headers=headers, content=content)
        except httpx.InvalidURL as e:
            raise RequestBuildError(f"Invalid request URL {url!r}: {e}") from e

    async def execute(
        self,
        request: ApiRequest,
        result: ApiResult,
        *,
        timeout: float | None = None,
    ) -> None:
        """
        Send a request and decode the response into ``result``.

        Args:
            request: The request descriptor
            result: Receiver filled in place on success
            timeout: Optional deadline for the whole call in seconds,
                retries and backoff sleeps included

        Raises:
            RequestBuildError: If the request could not be built
            TransportError: If no response could be obtained
            ApiError: If the service answered with status 300 or above
            ResponseParseError: If a successful body could not be decoded
            asyncio.TimeoutError: If the deadline passed
            asyncio.CancelledError: If the calling task was cancelled

        The descriptor's own validation error is raised unchanged.
        """
        self._log.debug(
            f"Starting to process request {request!r}: to send: {request.endpoint()}"
        )

        ok, error = request.validate()
        if not ok:
            validation_error = _validation_error(error)
            self._log.error(f"Request validation err: {validation_error}")
            raise validation_error

        try:
            http_request = self.build_request(request)
        except RequestBuildError as e:
            self._log.error(f"Could not create request: {e}")
            raise

        response = await self._send(http_request, timeout)
        try:
            self._raise_for_status(response)
            self._parse(response, result)
        except OpsGenieError as e:
            self._log.error(str(e))
            raise
        finally:
            await response.aclose()

        self._log.debug(f"Request processed. The result: {result!r}")

    async def _send(
        self, http_request: httpx.Request, timeout: float | None
    ) -> httpx.Response:
        try:
            if timeout is None:
                return await self.transport.send(http_request)
            deadline = asyncio.get_running_loop().time() + timeout
            return await asyncio.wait_for(
                self.transport.send(http_request, deadline=deadline), timeout
            )
        except httpx.TransportError as e:
            reason = describe_error(e)
            self._log.error(f"Unable to send the request {reason}")
            raise TransportError(f"Unable to send the request: {reason}", cause=e) from e
        except CONTEXT_ERRORS as e:
            self._log.error(f"Request aborted: {e!r}")
            raise
        except Exception as e:
            self._log.error(f"Request failed: {describe_error(e)}")
            raise

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.status_code < 300:
            return
        body = ApiErrorBody.parse_lenient(response.content)
        raise ApiError(
            status_code=str(response.status_code),
            message=body.message,
            took=body.took,
            request_id=body.request_id,
            errors=body.errors,
            error_header=response.headers.get(ERROR_TYPE_HEADER, ""),
        )

    def _parse(self, response: httpx.Response, result: ApiResult) -> None:
        try:
            result.load(response.json())
        except (ValueError, TypeError, LookupError) as e:
            raise ResponseParseError(f"Response could not be parsed, {e}") from e

        headers = response.headers
        result.set_request_id(headers.get(REQUEST_ID_HEADER, ""))
        result.set_rate_limit_state(headers.get(RATE_LIMIT_STATE_HEADER, ""))
        response_time = parse_response_time(headers.get(RESPONSE_TIME_HEADER, ""))
        if response_time is not None:
            result.set_response_time(response_time)


def new_client(config: Config) -> OpsGenieClient:
    """
    Create a client from a configuration.

    Raises:
        ConfigurationError: If the configuration is unusable
    """
    return OpsGenieClient(config)


__all__ = [
    "ALLOWED_METHODS",
    "BODYLESS_METHODS",
    "JSON_CONTENT_TYPE",
    "LEGACY_GET_CONTENT_TYPE",
    "SDK_NAME",
    "OpsGenieClient",
    "build_user_agent",
    "describe_error",
    "encode_body",
    "new_client",
    "redact",
]
