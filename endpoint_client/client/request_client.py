"""
endpoint_client/client/request_client.py

WHAT THIS FILE IS FOR
---------------------
RequestClient is a small declarative HTTP client: it is constructed with a
host URL, a static registry of named endpoints and a response format, and
exposes a single async `fetch(method, endpoint_name, options)` call.

CALL FLOW
---------
fetch()
  → validate()              endpoint exists, method legal, options present
  → build_request()         path, query string, headers, JSON body
  → AsyncHttpClient.send()  one outbound request (httpx)
  → status check            non-2xx → HttpStatusError
  → decode                  json / text / blob (bytes)

ERROR HANDLING RULES
--------------------
- Bad endpoint registry at construction → ConfigurationError (raised;
  no half-built client is ever returned)
- Pre-dispatch validation failure → RequestValidationError subclass,
  raised from fetch() before the transport is touched
- Non-2xx response → HttpStatusError (has .status_code)
- Transport / decode errors → propagated unchanged

Every failure is logged before it is raised.

CONCURRENCY
-----------
The client holds no per-request state. Registry and configuration are
read-only after construction, so concurrent fetch() calls on the same
instance are independent.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

import httpx
import structlog

from endpoint_client.client.request_builder import build_request
from endpoint_client.client.validation import validate, validate_endpoints
from endpoint_client.schemas.endpoint_schema import EndpointDefinition, RequestDescriptor, ResponseFormat
from endpoint_client.utils.errors import ConfigurationError, HttpStatusError, RequestValidationError
from endpoint_client.utils.http_client import AsyncHttpClient, TimeoutType
from endpoint_client.utils.settings import ClientSettings, get_settings

logger = structlog.get_logger(__name__)

EMPTY_OPTIONS: Mapping[str, Any] = MappingProxyType({})

# parsed JSON value, str or bytes depending on the response format
Decoded = Any


class RequestClient:
    """
    Declarative client over a static endpoint registry.

    Example:
        client = RequestClient(
            "https://api.example.com",
            {
                "users": {"url": "/users", "methods": ["GET", "POST"]},
                "orders": {"url": "/orders", "methods": ["GET"], "parent": "users"},
            },
            "json",
        )
        await client.fetch("GET", "orders", {"id": 42})   # GET /users/42/orders
    """

    def __init__(
        self,
        host_url: str,
        endpoints: Mapping[str, Any],
        response_type: Union[str, ResponseFormat] = ResponseFormat.JSON,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: TimeoutType = None,
    ) -> None:
        try:
            registry = validate_endpoints(endpoints)
        except ConfigurationError as exc:
            logger.error(
                "endpoint_registry_invalid",
                endpoint=exc.endpoint,
                field=exc.field,
                error=str(exc),
            )
            raise

        self._host_url = host_url
        self._endpoints = registry
        self._response_type = response_type

        fmt = ResponseFormat.parse(response_type)
        if fmt is None:
            logger.warning("response_type_unrecognized", response_type=response_type, fallback="json")
            fmt = ResponseFormat.JSON
        self._response_format = fmt

        self._transport = AsyncHttpClient(http_client=http_client, timeout_seconds=timeout_seconds)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[ClientSettings] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "RequestClient":
        settings = settings or get_settings()
        if not settings.host_url:
            raise ConfigurationError("host_url is required", field="host_url")

        return cls(
            str(settings.host_url).rstrip("/"),
            settings.endpoints,
            settings.response_type,
            http_client=http_client,
            timeout_seconds=settings.timeout_seconds,
        )

    @property
    def host_url(self) -> str:
        return self._host_url

    @property
    def endpoints(self) -> Mapping[str, EndpointDefinition]:
        return self._endpoints

    @property
    def response_type(self) -> Union[str, ResponseFormat]:
        """The response type exactly as given at construction."""
        return self._response_type

    @property
    def response_format(self) -> ResponseFormat:
        return self._response_format

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def build_request(
        self,
        method: str,
        endpoint_name: str,
        options: Optional[Mapping[str, Any]] = EMPTY_OPTIONS,
    ) -> RequestDescriptor:
        """Validate and build the request without sending it."""
        definition = self._validate(method, endpoint_name, options)
        return build_request(self._host_url, method, definition, options, self._response_type)

    async def fetch(
        self,
        method: str,
        endpoint_name: str,
        options: Optional[Mapping[str, Any]] = EMPTY_OPTIONS,
    ) -> Decoded:
        """
        Send one request and return the decoded body.

        Returns:
            json -> parsed JSON value
            text -> str
            blob -> bytes

        Raises:
            RequestValidationError: rejected before dispatch (nothing sent)
            HttpStatusError:        endpoint answered outside 200..299
            httpx.RequestError:     network-level failure (unchanged)
            ValueError:             body could not be decoded (unchanged)
        """
        request = self.build_request(method, endpoint_name, options)

        try:
            response = await self._transport.send(request)
        except httpx.HTTPError as exc:
            logger.error(
                "request_transport_error",
                endpoint=endpoint_name,
                method=request.method,
                url=request.url,
                error=str(exc),
            )
            raise

        if response.status_code < 200 or response.status_code > 299:
            logger.warning(
                "request_http_error",
                endpoint=endpoint_name,
                method=request.method,
                url=request.url,
                status_code=response.status_code,
            )
            raise HttpStatusError(response.status_code, url=request.url, method=request.method)

        try:
            data = self._decode(response)
        except ValueError as exc:
            logger.error(
                "response_decode_failed",
                endpoint=endpoint_name,
                url=request.url,
                response_format=self._response_format.value,
                error=str(exc),
            )
            raise

        logger.info(
            "request_success",
            endpoint=endpoint_name,
            method=request.method,
            url=request.url,
            status_code=response.status_code,
        )
        return data

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _validate(
        self,
        method: str,
        endpoint_name: str,
        options: Optional[Mapping[str, Any]],
    ) -> EndpointDefinition:
        try:
            return validate(self._endpoints, method, endpoint_name, options)
        except RequestValidationError as exc:
            logger.error(
                "request_validation_failed",
                endpoint=endpoint_name,
                method=method,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise

    def _decode(self, response: httpx.Response) -> Decoded:
        if self._response_format is ResponseFormat.TEXT:
            return response.text
        if self._response_format is ResponseFormat.BLOB:
            return response.content
        return response.json()
