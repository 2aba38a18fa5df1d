"""
Registry client with challenge/response authentication.

Implements the Docker Registry v2 login flow:

1. Probe ``<base_url>/v2/`` without credentials
2. Parse the ``WWW-Authenticate`` challenge
3. Basic: use the stored username/password directly.
   Bearer: exchange them for a token at the challenge realm
4. Probe again with the new credential and keep it only on HTTP 200

Every failure leaves the client without a credential.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

import httpx
from pydantic import ValidationError

from .challenge import BasicChallenge, BearerChallenge, parse_www_authenticate
from .credentials import BasicAuth, BearerAuth, Credential
from .errors import (
    InvalidToken,
    LoginFailed,
    MalformedChallenge,
    MissingChallenge,
    NoCredentials,
    ParseError,
    TokenEndpointError,
    UnexpectedStatus,
)
from .transport import RegistryTransport

logger = logging.getLogger(__name__)

PROBE_PATH = "/v2/"

# Token servers hand this out when the challenge is met but nothing is granted
UNAUTHENTICATED_TOKEN = "unauthenticated"

__all__ = ["RegistryClient", "PROBE_PATH", "UNAUTHENTICATED_TOKEN"]


class RegistryClient:
    """
    Client for a single registry holding the current authentication state.

    A client is not safe for concurrent ``authenticate`` calls; callers
    sharing one must serialize them.

    Args:
        base_url: Registry base URL (e.g. "https://ghcr.io")
        credentials: Long-lived (username, password) used to negotiate
        transport: HTTP transport (defaults to a fresh RegistryTransport)
    """

    def __init__(self, base_url: str, credentials: Optional[Tuple[str, str]] = None,
                 transport: Optional[RegistryTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials
        self.transport = transport or RegistryTransport()
        self._auth: Optional[Credential] = None

    @property
    def auth(self) -> Optional[Credential]:
        """Credential attached to outgoing requests, if authenticated."""
        return self._auth

    @property
    def probe_url(self) -> str:
        return f"{self.base_url}{PROBE_PATH}"

    def authenticate(self, scopes: Sequence[str] = ()) -> RegistryClient:
        """
        Perform registry authentication.

        With a Bearer challenge the resulting token is scoped to ``scopes``.

        Args:
            scopes: Scopes to request, e.g. ``["repository:app:pull"]``

        Returns:
            This client, now authenticated

        Raises:
            NoCredentials: No username/password to negotiate with
            MissingChallenge: Probe response had no WWW-Authenticate header
            MalformedChallenge: Challenge header could not be parsed
            TokenEndpointError: Token endpoint answered non-200
            InvalidToken: Token response unusable
            LoginFailed: Registry rejected the obtained credential
            RegistryUnavailable: Network failure talking to registry or token endpoint
        """
        self._auth = None

        if self.credentials is None:
            raise NoCredentials("cannot authenticate without credentials")
        username, password = self.credentials

        header = self._fetch_challenge_header()
        try:
            challenge = parse_www_authenticate(header)
        except ParseError as e:
            raise MalformedChallenge(f"malformed WWW-Authenticate header: {e}") from e

        if isinstance(challenge, BasicChallenge):
            logger.debug(f"authenticate: basic challenge for realm '{challenge.realm}'")
            candidate: Credential = BasicAuth(user=username, password=password)
        elif isinstance(challenge, BearerChallenge):
            candidate = self._exchange_token(challenge, scopes, BasicAuth(user=username, password=password))
        else:
            raise MalformedChallenge(f"unsupported challenge {challenge!r}")

        response = self.transport.send("GET", self.probe_url, auth=candidate)
        if response.status_code != 200:
            raise LoginFailed(response.status_code)

        self._auth = candidate
        logger.info(f"Login to {self.base_url} succeeded")
        return self

    def is_authenticated(self) -> bool:
        """
        Check whether the client can make requests to the registry.

        Access can come from the current credential or from anonymous access.

        Raises:
            UnexpectedStatus: Probe answered something other than 200 or 401
        """
        response = self.transport.send("GET", self.probe_url, auth=self._auth)
        if response.status_code == 200:
            return True
        if response.status_code == 401:
            return False
        raise UnexpectedStatus(response.status_code)

    def build_request(self, method: str, path: str) -> httpx.Request:
        """Build a request to ``path`` on the registry with the current credential."""
        return self.transport.build_request(method, f"{self.base_url}{path}", self._auth)

    def request(self, method: str, path: str) -> httpx.Response:
        """Send a request to ``path`` on the registry with the current credential."""
        return self.transport.send(method, f"{self.base_url}{path}", auth=self._auth)

    def _fetch_challenge_header(self) -> bytes:
        """Probe the registry anonymously and return the raw challenge header."""
        response = self.transport.send("GET", self.probe_url)
        for key, value in response.headers.raw:
            if key.lower() == b"www-authenticate":
                return value
        raise MissingChallenge(
            f"missing WWW-Authenticate header from {self.probe_url} (HTTP {response.status_code})"
        )

    def _exchange_token(self, challenge: BearerChallenge, scopes: Sequence[str],
                        basic: BasicAuth) -> BearerAuth:
        """Exchange basic credentials for a bearer token at the challenge realm."""
        token_url = challenge.token_url(scopes)
        logger.debug(f"authenticate: token endpoint: {token_url}")

        response = self.transport.send("GET", token_url, auth=basic)
        logger.debug(f"authenticate: got status {response.status_code}")
        if response.status_code != 200:
            raise TokenEndpointError(response.status_code, token_url)

        try:
            bearer = BearerAuth.model_validate_json(response.content)
        except ValidationError as e:
            raise InvalidToken(f"malformed token response from {token_url}: {e}") from e

        if bearer.token == UNAUTHENTICATED_TOKEN:
            raise InvalidToken("token is unauthenticated")
        if not bearer.token:
            raise InvalidToken("received an empty token")

        logger.debug(f"authenticate: got token: {bearer.masked_token!r}")
        return bearer

    def close(self):
        """Close the underlying transport."""
        self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
