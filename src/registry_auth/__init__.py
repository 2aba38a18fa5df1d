"""
Registry Auth - container registry challenge/response authentication.

Parses WWW-Authenticate challenges, exchanges basic credentials for bearer
tokens, and keeps the resulting credential on a registry client.
"""
from .challenge import BasicChallenge, BearerChallenge, Challenge, parse_www_authenticate
from .client import RegistryClient
from .credentials import BasicAuth, BearerAuth, Credential, mask_token
from .errors import (
    AuthError,
    InvalidToken,
    LoginFailed,
    MalformedChallenge,
    MissingChallenge,
    MissingRequiredField,
    NoCredentials,
    ParseError,
    RegistryAuthError,
    RegistryUnavailable,
    TokenEndpointError,
    UnexpectedStatus,
)

__version__ = "0.1.0"

__all__ = [
    "BasicChallenge",
    "BearerChallenge",
    "Challenge",
    "parse_www_authenticate",
    "RegistryClient",
    "BasicAuth",
    "BearerAuth",
    "Credential",
    "mask_token",
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
