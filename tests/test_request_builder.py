# tests/test_request_builder.py
from __future__ import annotations

import json

import pytest

from endpoint_client.client.request_builder import (
    build_path,
    build_query_string,
    build_request,
    encode_uri,
    get_content_type,
)
from endpoint_client.schemas.endpoint_schema import EndpointDefinition, ResponseFormat

HOST = "https://api.example.com"

USERS = EndpointDefinition(name="users", url="/users", methods=("GET", "POST", "PUT", "PATCH", "DELETE"))
ORDERS = EndpointDefinition(name="orders", url="/orders", methods=("GET",), parent="users")


def test_path_without_parent_starts_with_endpoint_name() -> None:
    assert build_path(USERS, {}) == "/users"


def test_path_with_id_appends_segment() -> None:
    assert build_path(USERS, {"id": 42}) == "/users/42"


def test_path_with_parent_uses_parent_then_own_url() -> None:
    assert build_path(ORDERS, {}) == "/users/orders"
    assert build_path(ORDERS, {"id": 42}) == "/users/42/orders"


def test_path_skips_id_when_none_or_empty() -> None:
    assert build_path(USERS, {"id": None}) == "/users"
    assert build_path(USERS, {"id": ""}) == "/users"
    assert build_path(ORDERS, {"id": ""}) == "/users/orders"


def test_path_keeps_zero_id() -> None:
    assert build_path(USERS, {"id": 0}) == "/users/0"


def test_query_string_preserves_order_and_separators() -> None:
    assert build_query_string({"a": 1, "b": 2}) == "?a=1&b=2"
    assert build_query_string({"b": 2, "a": 1, "c": "x"}) == "?b=2&a=1&c=x"
    assert build_query_string({}) == ""


def test_query_string_renders_values_like_template_literals() -> None:
    assert build_query_string({"active": True, "deleted": False}) == "?active=true&deleted=false"
    assert build_query_string({"page": 2.0, "ratio": 0.5}) == "?page=2&ratio=0.5"
    assert build_query_string({"ids": [1, 2, 3]}) == "?ids=1,2,3"


def test_path_with_id_parent_and_filter() -> None:
    path = build_path(ORDERS, {"id": 7, "filter": {"status": "open", "limit": 10}})
    assert path == "/users/7/orders?status=open&limit=10"


def test_encode_uri_keeps_reserved_characters_and_encodes_the_rest() -> None:
    assert encode_uri("/users?a=1&b=2") == "/users?a=1&b=2"
    assert encode_uri("/users?name=Ada Lovelace") == "/users?name=Ada%20Lovelace"
    assert encode_uri("/café") == "/caf%C3%A9"
    assert encode_uri("/a%b") == "/a%25b"
    assert encode_uri("/x?q=a+b,c;d:e@f$g!h~i*j'k(l)") == "/x?q=a+b,c;d:e@f$g!h~i*j'k(l)"


@pytest.mark.parametrize(
    "response_type, expected",
    [
        ("json", "application/json"),
        ("text", "text/plain"),
        ("blob", "text/plain"),
        (ResponseFormat.BLOB, "text/plain"),
        ("xml", "application/json"),
        ("TEXT", "application/json"),
        ("Blob", "application/json"),
        (" blob ", "application/json"),
        (" json ", "application/json"),
        ("", "application/json"),
        (None, "application/json"),
    ],
)
def test_content_type_mapping(response_type, expected) -> None:
    assert get_content_type(response_type) == expected


@pytest.mark.parametrize("method", ["GET", "get", "DELETE", "delete"])
def test_get_and_delete_never_carry_a_body(method) -> None:
    req = build_request(HOST, method, USERS, {"id": 1, "name": "Ada"}, "json")
    assert req.body is None
    assert req.method == method.upper()


@pytest.mark.parametrize("method", ["POST", "put", "Patch"])
def test_write_methods_serialize_full_options_including_id_and_filter(method) -> None:
    options = {"id": 5, "filter": {"dry_run": True}, "name": "Ada"}
    req = build_request(HOST, method, USERS, options, "json")

    assert req.body is not None
    assert json.loads(req.body) == options
    # id and filter still shape the URL
    assert req.url == f"{HOST}/users/5?dry_run=true"


def test_build_request_sets_content_type_header_and_full_url() -> None:
    req = build_request(HOST, "GET", ORDERS, {"id": 42, "filter": {"q": "new york"}}, "text")

    assert req.headers == {"Content-Type": "text/plain"}
    assert req.url == "https://api.example.com/users/42/orders?q=new%20york"


def test_build_request_body_is_compact_json() -> None:
    req = build_request(HOST, "POST", USERS, {"name": "Zoë", "tags": ["a"]}, "json")
    assert req.body == '{"name":"Zoë","tags":["a"]}'


def test_build_request_body_writes_non_finite_floats_as_null() -> None:
    options = {"x": float("nan"), "nested": {"y": float("inf")}, "list": [float("-inf"), 1.5]}
    req = build_request(HOST, "POST", USERS, options, "json")

    assert req.body == '{"x":null,"nested":{"y":null},"list":[null,1.5]}'
    assert json.loads(req.body) == {"x": None, "nested": {"y": None}, "list": [None, 1.5]}
