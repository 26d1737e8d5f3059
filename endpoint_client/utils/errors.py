"""
endpoint_client/utils/errors.py

WHAT THIS FILE IS FOR
---------------------
Error taxonomy for the endpoint client.

- ConfigurationError:
    The endpoint registry (or settings) handed to RequestClient is malformed.
    Raised at construction time; a client is never built in a broken state.
- RequestValidationError (and subclasses):
    A fetch() call was rejected BEFORE anything was sent over the wire.
- HttpStatusError:
    The request was sent and the endpoint answered with a non-2xx status.

Transport failures (httpx.RequestError) and body decode failures
(json.JSONDecodeError, UnicodeDecodeError, ...) are NOT wrapped here;
they propagate to the caller unchanged.
"""

from __future__ import annotations

from typing import Optional


class RequestClientError(Exception):
    """Root of every error raised by the endpoint client itself."""


class ConfigurationError(RequestClientError):
    def __init__(
        self,
        message: str,
        *,
        endpoint: Optional[str] = None,
        field: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.endpoint = endpoint
        self.field = field


class RequestValidationError(RequestClientError):
    """Base for pre-dispatch validation failures."""


class EndpointNotFoundError(RequestValidationError):
    def __init__(self, endpoint: str) -> None:
        super().__init__(f"The endpoint '{endpoint}' does not exist")
        self.endpoint = endpoint


class InvalidMethodError(RequestValidationError):
    def __init__(self, method: object, allowed: tuple[str, ...]) -> None:
        super().__init__(f"Endpoint method must be one of the following: {', '.join(allowed)}")
        self.method = method


class MethodNotAllowedError(RequestValidationError):
    def __init__(self, endpoint: str, method: str) -> None:
        super().__init__(f"The endpoint '{endpoint}''s method '{method}' was not found")
        self.endpoint = endpoint
        self.method = method


class InvalidPayloadError(RequestValidationError):
    def __init__(self) -> None:
        super().__init__("Endpoint payload must be a mapping")


class HttpStatusError(RequestClientError):
    def __init__(self, status_code: int, *, url: str, method: str) -> None:
        super().__init__(f"Endpoint returned a {status_code} status code")
        self.status_code = status_code
        self.url = url
        self.method = method
