# -------------------------------------------------------------------
# endpoint_client/schemas/endpoint_schema.py
#
# WHAT THIS FILE IS FOR
# --------------------
# Typed building blocks shared by the endpoint client:
#
#   - ResponseFormat:     how a response body is decoded (json/text/blob)
#   - EndpointDefinition: one entry of the static endpoint registry
#   - RequestDescriptor:  the fully built request handed to the transport
#
# ENDPOINT REGISTRY SHAPE
# -----------------------
# Endpoints are declared as a mapping of name -> definition, e.g.:
#
#   users:
#     url: /users
#     methods: [GET, POST]
#   user_orders:
#     url: /orders
#     methods: [GET]
#     parent: users
#
# A child endpoint (one with `parent`) builds its path from the parent's
# name, the optional id, then its own url:  /users/42/orders
#
# KNOWN INCONSISTENCY
# -------------------
# ResponseFormat.BLOB maps to a "text/plain" Content-Type. Downstream
# services may rely on it, so it is kept as-is.
#
# WHAT THIS FILE IS NOT FOR
# ------------------------
# No validation of the registry as a whole and no HTTP calls.
# See endpoint_client/client/validation.py and request_client.py.
# -------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResponseFormat(str, Enum):
    JSON = "json"
    TEXT = "text"
    BLOB = "blob"

    @classmethod
    def parse(cls, value: object) -> Optional["ResponseFormat"]:
        """Return the matching member, or None for anything unrecognized."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def content_type(self) -> str:
        if self is ResponseFormat.JSON:
            return "application/json"
        # blob is sent as text/plain too
        return "text/plain"


class EndpointDefinition(BaseModel):
    """
    One named endpoint.

    `methods` is normalized to an uppercase tuple so method checks can
    compare against `method.upper()` directly.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1, description="Path suffix, e.g. '/orders'")
    methods: Tuple[str, ...] = Field(..., min_length=1)
    parent: Optional[str] = Field(
        default=None,
        description="Name used as the base path segment instead of this endpoint's own name.",
    )

    @field_validator("methods", mode="before")
    @classmethod
    def _single_method_to_tuple(cls, v):
        if isinstance(v, str):
            return (v,)
        return v

    @field_validator("methods")
    @classmethod
    def _uppercase_methods(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(m.strip().upper() for m in v)

    @field_validator("parent")
    @classmethod
    def _blank_parent_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


@dataclass(frozen=True)
class RequestDescriptor:
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
