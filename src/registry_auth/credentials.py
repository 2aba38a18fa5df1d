"""
Credential representations attached to outgoing registry requests.

A credential is either a bearer token issued by a token endpoint or a plain
basic user/password pair. Both know how to put themselves on an
``httpx.Request`` and neither ever exposes its secret through ``repr``.
"""
from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, model_validator

__all__ = ["BearerAuth", "BasicAuth", "Credential", "mask_token"]


def mask_token(token: str) -> str:
    """
    Redact the interior of a token for logging.

    Replaces characters ``[min(1, n-1), max(n-1, 1))`` with ``*`` so the
    first and last characters stay visible. A one-character token becomes
    ``"*"`` and a two-character token is returned as-is.
    """
    n = len(token)
    if n == 0:
        return token
    start = min(1, n - 1)
    end = max(n - 1, 1)
    return token[:start] + "*" * (end - start) + token[end:]


class BearerAuth(BaseModel):
    """Bearer token as returned by a registry token endpoint."""
    model_config = ConfigDict(frozen=True)

    token: str = Field(default="", repr=False, description="Opaque bearer token")
    expires_in: Optional[int] = Field(default=None, description="Token lifetime in seconds")
    issued_at: Optional[str] = Field(default=None, description="RFC 3339 issue timestamp")
    refresh_token: Optional[str] = Field(default=None, repr=False, description="Opaque refresh token")

    @model_validator(mode="before")
    @classmethod
    def _accept_access_token(cls, data: Any) -> Any:
        # OAuth2-flavoured token servers answer with access_token instead
        if isinstance(data, dict) and not data.get("token") and data.get("access_token"):
            data = {**data, "token": data["access_token"]}
        return data

    @property
    def masked_token(self) -> str:
        return mask_token(self.token)

    def attach(self, request: httpx.Request) -> httpx.Request:
        request.headers["Authorization"] = f"Bearer {self.token}"
        return request


@dataclass(frozen=True)
class BasicAuth:
    """HTTP Basic credentials. A missing password is sent as empty."""
    user: str
    password: Optional[str] = field(default=None, repr=False)

    def attach(self, request: httpx.Request) -> httpx.Request:
        userpass = f"{self.user}:{self.password or ''}".encode("utf-8")
        encoded = base64.b64encode(userpass).decode("ascii")
        request.headers["Authorization"] = f"Basic {encoded}"
        return request


Credential = Union[BearerAuth, BasicAuth]
