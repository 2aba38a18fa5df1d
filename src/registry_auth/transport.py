"""
HTTP transport for registry authentication.

Thin wrapper around ``httpx.Client`` that sends one request, optionally with
a credential attached, and hands back the raw response. Timeouts are retried
here with exponential backoff; every other outcome is returned or raised to
the caller unchanged.
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from .credentials import Credential
from .errors import RegistryUnavailable
from .settings import Settings

logger = logging.getLogger(__name__)

USER_AGENT = "registry-auth/0.1.0"

__all__ = ["RegistryTransport", "USER_AGENT"]


class RegistryTransport:
    """
    Send registry and token-endpoint requests.

    Args:
        timeout_s: Read/write timeout in seconds
        retries: Extra attempts for timed-out requests (0=no retry)
        insecure: Skip TLS verification for development registries
        transport: Optional httpx transport (e.g. ``httpx.MockTransport`` in tests)
    """

    def __init__(self, timeout_s: float = 30.0, retries: int = 0, insecure: bool = False,
                 transport: Optional[httpx.BaseTransport] = None):
        self.retries = retries
        self.client = httpx.Client(
            timeout=httpx.Timeout(connect=5.0, read=timeout_s, write=timeout_s, pool=5.0),
            follow_redirects=True,
            verify=not insecure,
            headers={"User-Agent": USER_AGENT},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings,
                      transport: Optional[httpx.BaseTransport] = None) -> RegistryTransport:
        return cls(
            timeout_s=settings.http_timeout_s,
            retries=settings.http_retry,
            insecure=settings.registry_insecure,
            transport=transport,
        )

    def build_request(self, method: str, url: str,
                      auth: Optional[Credential] = None) -> httpx.Request:
        """Build a request, attaching ``auth`` when given."""
        request = self.client.build_request(method, url)
        if auth is not None:
            auth.attach(request)
        return request

    def send(self, method: str, url: str, auth: Optional[Credential] = None) -> httpx.Response:
        """
        Send a request and return the response, whatever its status.

        Raises:
            RegistryUnavailable: On network errors, or timeouts once retries are exhausted
        """
        request = self.build_request(method, url, auth)
        retrying = Retrying(
            stop=stop_after_attempt(self.retries + 1),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(httpx.TimeoutException),
            reraise=True,
        )

        logger.debug(f"Sending {method} request to '{url}'")
        try:
            response = retrying(self.client.send, request)
        except httpx.RequestError as e:
            raise RegistryUnavailable(f"Network error on {method} {url}: {e}") from e

        logger.debug(f"{method} '{url}' status: {response.status_code}")
        return response

    def close(self):
        """Close HTTP client."""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
