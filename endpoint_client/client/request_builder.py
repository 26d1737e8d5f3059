"""
endpoint_client/client/request_builder.py

WHAT THIS FILE IS FOR
---------------------
Turns (host_url, method, endpoint, options) into a RequestDescriptor.

PATH RULES
----------
- Base path:
    * endpoint with parent  -> /<parent>
    * endpoint without      -> /<endpoint name>
- options["id"] present     -> + /<id>
- endpoint with parent      -> + <endpoint url>    (after the id)
- options["filter"] present -> + ?k1=v1&k2=v2      (insertion order)

Examples:
    users,        {}                      -> /users
    users,        {"id": 42}              -> /users/42
    user_orders,  {"id": 42}              -> /users/42/orders
    users,        {"filter": {"a": 1, "b": 2}} -> /users?a=1&b=2

Filter values are inserted as-is; the whole path + query is then
URI-encoded once (encodeURI rules: reserved URI characters are kept).

BODY RULES
----------
POST / PUT / PATCH send the *entire* options mapping as JSON, including
"id" and "filter". GET / DELETE never send a body.

WHAT THIS FILE IS NOT FOR
-------------------------
No validation (see validation.py) and no HTTP calls (see request_client.py).
"""

from __future__ import annotations

import json
import math
from typing import Any, Mapping, Optional
from urllib.parse import quote

from endpoint_client.schemas.endpoint_schema import EndpointDefinition, RequestDescriptor, ResponseFormat

BODY_METHODS = ("POST", "PUT", "PATCH")

DEFAULT_CONTENT_TYPE = "application/json"

# encodeURI leaves these untouched (alphanumerics are always safe for quote)
URI_SAFE_CHARS = ";,/?:@&=+$-_.!~*'()#"


def get_content_type(response_type: Any) -> str:
    fmt = ResponseFormat.parse(response_type)
    if fmt is None:
        return DEFAULT_CONTENT_TYPE
    return fmt.content_type


def encode_uri(value: str) -> str:
    return quote(value, safe=URI_SAFE_CHARS)


def format_value(value: Any) -> str:
    """Render a path/query value the way a JS template literal would."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join("" if v is None else format_value(v) for v in value)
    return str(value)


def build_query_string(filters: Mapping[str, Any]) -> str:
    query = ""
    for index, (key, value) in enumerate(filters.items()):
        separator = "?" if index == 0 else "&"
        query += f"{separator}{key}={format_value(value)}"
    return query


def build_path(endpoint: EndpointDefinition, options: Mapping[str, Any]) -> str:
    path = f"/{endpoint.parent}" if endpoint.parent else f"/{endpoint.name}"

    # None and "" mean "no id"; 0 is a valid id
    if options.get("id") not in (None, ""):
        path += f"/{format_value(options['id'])}"

    if endpoint.parent:
        path += endpoint.url

    filters = options.get("filter")
    if filters:
        path += build_query_string(filters)

    return path


def _json_safe(value: Any) -> Any:
    # NaN and +/-Infinity are not valid JSON; they go out as null
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Mapping):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


def serialize_body(options: Mapping[str, Any]) -> str:
    return json.dumps(_json_safe(options), separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def build_request(
    host_url: str,
    method: str,
    endpoint: EndpointDefinition,
    options: Mapping[str, Any],
    response_type: Any = ResponseFormat.JSON,
) -> RequestDescriptor:
    upper = method.upper()
    headers = {"Content-Type": get_content_type(response_type)}

    body: Optional[str] = None
    if upper in BODY_METHODS:
        body = serialize_body(options)

    return RequestDescriptor(
        method=upper,
        url=f"{host_url}{encode_uri(build_path(endpoint, options))}",
        headers=headers,
        body=body,
    )
