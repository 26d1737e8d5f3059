"""
endpoint_client/client/validation.py

WHAT THIS FILE IS FOR
---------------------
Validation helpers used by RequestClient:

- validate_endpoints():
    Construction-time check of the endpoint registry. Produces an
    immutable name -> EndpointDefinition mapping or raises
    ConfigurationError naming the offending endpoint and field.

- validate_endpoint() / validate_method() / validate_payload():
    Pre-dispatch checks for a single fetch() call. Each raises a
    RequestValidationError subclass; validate() runs them in order and
    stops at the first failure.

These functions are pure: no logging, no HTTP. The caller decides how
to report failures.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from endpoint_client.schemas.endpoint_schema import EndpointDefinition
from endpoint_client.utils.errors import (
    ConfigurationError,
    EndpointNotFoundError,
    InvalidMethodError,
    InvalidPayloadError,
    MethodNotAllowedError,
)

HTTP_METHODS = ("GET", "POST", "PATCH", "PUT", "DELETE")

REQUIRED_ENDPOINT_FIELDS = ("url", "methods")


def validate_endpoints(endpoints: Any) -> Mapping[str, EndpointDefinition]:
    if endpoints is None or not isinstance(endpoints, Mapping):
        raise ConfigurationError("Endpoints must be a mapping")

    registry: Dict[str, EndpointDefinition] = {}
    for name, raw in endpoints.items():
        registry[name] = _to_definition(name, raw)

    return MappingProxyType(registry)


def _to_definition(name: str, raw: Any) -> EndpointDefinition:
    if isinstance(raw, EndpointDefinition):
        return raw if raw.name == name else raw.model_copy(update={"name": name})

    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"Endpoint: '{name}' must be a mapping", endpoint=name)

    for field in REQUIRED_ENDPOINT_FIELDS:
        if not raw.get(field):
            raise ConfigurationError(
                f"Endpoint: '{name}' is missing the '{field}' property",
                endpoint=name,
                field=field,
            )

    try:
        return EndpointDefinition.model_validate({**raw, "name": name})
    except ValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        loc = ".".join(str(x) for x in first.get("loc", ())) or None
        raise ConfigurationError(
            f"Endpoint: '{name}' is invalid: {first.get('msg', str(exc))}",
            endpoint=name,
            field=loc,
        ) from exc


def validate_endpoint(registry: Mapping[str, EndpointDefinition], endpoint_name: str) -> EndpointDefinition:
    definition = registry.get(endpoint_name)
    if definition is None:
        raise EndpointNotFoundError(endpoint_name)
    return definition


def validate_method(
    registry: Mapping[str, EndpointDefinition],
    method: Any,
    endpoint_name: str,
) -> str:
    """Return the uppercased method if it is legal for the endpoint."""
    if not isinstance(method, str) or method.upper() not in HTTP_METHODS:
        raise InvalidMethodError(method, HTTP_METHODS)

    upper = method.upper()
    if upper not in registry[endpoint_name].methods:
        raise MethodNotAllowedError(endpoint_name, method)
    return upper


def validate_payload(options: Optional[Mapping[str, Any]]) -> None:
    # an empty mapping is fine; only a missing (or non-mapping) payload is rejected
    if options is None or not isinstance(options, Mapping):
        raise InvalidPayloadError()


def validate(
    registry: Mapping[str, EndpointDefinition],
    method: Any,
    endpoint_name: str,
    options: Optional[Mapping[str, Any]],
) -> EndpointDefinition:
    definition = validate_endpoint(registry, endpoint_name)
    validate_method(registry, method, endpoint_name)
    validate_payload(options)
    return definition
