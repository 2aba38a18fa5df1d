"""
Registry authentication error classes.

Provides a clear taxonomy of the ways challenge parsing and credential
negotiation can fail. Every error is terminal for the call that raised it;
nothing in this package retries on its own.
"""
from __future__ import annotations

from typing import Optional


class RegistryAuthError(Exception):
    """Base class for all registry authentication errors."""
    pass


class ParseError(RegistryAuthError):
    """
    Malformed or incomplete ``WWW-Authenticate`` header value.

    Raised when:
    - The raw header bytes are not valid UTF-8
    - No authentication scheme token leads the value
    - The scheme is neither ``Bearer`` nor ``Basic``
    """
    pass


class MissingRequiredField(ParseError):
    """A scheme was recognised but a mandatory attribute is absent."""

    def __init__(self, field: str, header: Optional[str] = None):
        message = f"missing required field '{field}'"
        if header is not None:
            message += f" in {header!r}"
        super().__init__(message)
        self.field = field


class AuthError(RegistryAuthError):
    """Base class for failures of the authentication flow."""
    pass


class NoCredentials(AuthError):
    """No username/password pair is available to negotiate with."""
    pass


class MissingChallenge(AuthError):
    """
    The registry probe carried no ``WWW-Authenticate`` header.

    Without a challenge there is nothing to negotiate against.
    """
    pass


class MalformedChallenge(AuthError):
    """The challenge header could not be parsed; the ParseError is chained."""
    pass


class TokenEndpointError(AuthError):
    """
    Token endpoint answered with a non-200 status.

    Raised when:
    - HTTP 401/403 from the token server (credentials rejected)
    - Any other non-200 status from the token server
    """

    def __init__(self, status_code: int, url: Optional[str] = None):
        message = f"token endpoint returned HTTP {status_code}"
        if url:
            message += f" for {url}"
        super().__init__(message)
        self.status_code = status_code


class InvalidToken(AuthError):
    """
    Token response did not carry a usable bearer token.

    Raised when:
    - The body is not valid token JSON
    - The token is empty
    - The token is the literal ``"unauthenticated"`` sentinel
    """
    pass


class LoginFailed(AuthError):
    """A credential was obtained but the registry still refused the probe."""

    def __init__(self, status_code: int):
        super().__init__(f"login failed: registry answered HTTP {status_code}")
        self.status_code = status_code


class UnexpectedStatus(AuthError):
    """The registry probe answered with something other than 200 or 401."""

    def __init__(self, status_code: int):
        super().__init__(f"unexpected HTTP status {status_code} from registry")
        self.status_code = status_code


class RegistryUnavailable(RegistryAuthError):
    """
    The transport could not complete the request.

    Raised when:
    - Connection refused / DNS failure
    - Timeouts that survive the configured retries
    """
    pass


__all__ = [
    "RegistryAuthError",
    "ParseError",
    "MissingRequiredField",
    "AuthError",
    "NoCredentials",
    "MissingChallenge",
    "MalformedChallenge",
    "TokenEndpointError",
    "InvalidToken",
    "LoginFailed",
    "UnexpectedStatus",
    "RegistryUnavailable",
]
