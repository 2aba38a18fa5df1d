"""
WWW-Authenticate challenge parsing.

Turns the raw value of a registry's ``WWW-Authenticate`` header into one of
two immutable challenge types:

    Bearer realm="https://auth.example.com/token",service="registry.example.com",scope="repository:app:pull"
    Basic realm="Registry"

Parsing is a single regex sweep rather than a full RFC 7235 grammar. All of it
lives in :func:`parse_www_authenticate` so callers never depend on how the
header is scanned.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Union

from .errors import MissingRequiredField, ParseError

logger = logging.getLogger(__name__)

__all__ = [
    "BearerChallenge",
    "BasicChallenge",
    "Challenge",
    "parse_www_authenticate",
]

# Leading scheme token, e.g. "Bearer" or "Basic"
_SCHEME_RE = re.compile(r"^\s*(?P<scheme>[A-Z][a-z]+)(?=\s|$)")

# key="value" pairs anywhere in the header; values never contain a quote
_PARAM_RE = re.compile(r'(?P<key>\w+)\s*=\s*"(?P<value>[^"]+)"')

_BEARER_KEYS = frozenset({"realm", "service", "scope"})
_BASIC_KEYS = frozenset({"realm"})


@dataclass(frozen=True)
class BearerChallenge:
    """
    Token-based challenge.

    Attributes:
        realm: Base URL of the token endpoint
        service: Resource server identifier, forwarded to the token endpoint
        scope: Scope the registry suggested for the failed request
    """
    realm: str
    service: Optional[str] = None
    scope: Optional[str] = None

    def token_url(self, scopes: Sequence[str]) -> str:
        """
        Build the token endpoint URL for the requested scopes.

        The service segment (if any) opens the query string; the first scope
        is joined with ``?`` or ``&`` depending on whether it did, and every
        later scope is appended as ``&scope=<scope>``.

        Args:
            scopes: Scopes to request, e.g. ``["repository:app:pull"]``

        Returns:
            Token endpoint URL
        """
        url = self.realm
        has_query = False
        if self.service is not None:
            url += f"?service={self.service}"
            has_query = True

        for scope in scopes:
            url += f"{'&' if has_query else '?'}scope={scope}"
            has_query = True

        return url


@dataclass(frozen=True)
class BasicChallenge:
    """HTTP Basic challenge. The realm is a display label only."""
    realm: str


Challenge = Union[BearerChallenge, BasicChallenge]


def parse_www_authenticate(header_value: Union[bytes, str]) -> Challenge:
    """
    Parse a ``WWW-Authenticate`` header value.

    The scheme must lead the value and is matched case-sensitively. Attribute
    order does not matter; when a key repeats, the first occurrence wins.
    Attributes the scheme does not use are logged and dropped, since
    registries append vendor-specific keys (``error=``, ``error_description=``).

    Args:
        header_value: Raw header bytes (validated as UTF-8) or decoded text

    Returns:
        BearerChallenge or BasicChallenge

    Raises:
        ParseError: Invalid encoding, no scheme, or unsupported scheme
        MissingRequiredField: Scheme recognised but ``realm`` absent
    """
    if isinstance(header_value, bytes):
        try:
            header = header_value.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"WWW-Authenticate header is not valid UTF-8: {e}") from e
    else:
        header = header_value

    match = _SCHEME_RE.match(header)
    if not match:
        raise ParseError(f"no method found in {header!r}")
    scheme = match.group("scheme")

    params: Dict[str, str] = {}
    for param in _PARAM_RE.finditer(header, match.end()):
        params.setdefault(param.group("key"), param.group("value"))

    if scheme == "Bearer":
        known = _BEARER_KEYS
    elif scheme == "Basic":
        known = _BASIC_KEYS
    else:
        raise ParseError(f"unsupported authentication scheme {scheme!r} in {header!r}")

    unsupported = sorted(set(params) - known)
    if unsupported:
        logger.warning(f"Ignoring unsupported {scheme} challenge keys: {', '.join(unsupported)}")

    if "realm" not in params:
        raise MissingRequiredField("realm", header)

    if scheme == "Bearer":
        return BearerChallenge(
            realm=params["realm"],
            service=params.get("service"),
            scope=params.get("scope"),
        )
    return BasicChallenge(realm=params["realm"])
