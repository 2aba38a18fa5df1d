"""
Settings and configuration for registry authentication.

Centralizes configuration values and provides validation with fail-fast behavior.
Loads settings from environment variables when the client is constructed.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Any, Optional

__all__ = ["Settings", "create_settings_from_env"]


@dataclass(frozen=True)
class Settings:
    """
    Configuration settings for a registry client.

    Registry Settings:
        registry_url: Registry host[:port] or URL (required)
        registry_insecure: Use plain HTTP and skip TLS verification for local/dev use
        registry_user: Username for registry authentication
        registry_pass: Password for registry authentication
        docker_config: Path to a Docker config.json to read credentials from

    HTTP Settings:
        http_timeout_s: HTTP request timeout in seconds
        http_retry: Number of retries for timed-out requests (0=no retry)
    """
    registry_url: str
    registry_insecure: bool = False
    registry_user: Optional[str] = None
    registry_pass: Optional[str] = None
    docker_config: Optional[str] = None
    http_timeout_s: float = 30.0
    http_retry: int = 0

    def __post_init__(self):
        """Validate settings on construction."""
        if not self.registry_url:
            raise ValueError("registry_url is required")

        # Should be host[:port] or http(s)://host[:port]
        url_pattern = r"^(?:https?://)?[a-zA-Z0-9.-]+(?::[0-9]+)?(?:/.*)?$"
        if not re.match(url_pattern, self.registry_url):
            raise ValueError(f"Invalid registry_url format: {self.registry_url}")

        if self.http_timeout_s <= 0:
            raise ValueError(f"http_timeout_s must be positive, got {self.http_timeout_s}")

        if self.http_retry < 0:
            raise ValueError(f"http_retry must be non-negative, got {self.http_retry}")

        if self.registry_pass and not self.registry_user:
            raise ValueError("registry_pass specified but registry_user is missing")

    @property
    def registry_host(self) -> str:
        """Registry host[:port] without scheme or path."""
        host = re.sub(r"^https?://", "", self.registry_url)
        return host.split("/", 1)[0]

    @property
    def base_url(self) -> str:
        """Registry base URL with scheme and without trailing slash."""
        if self.registry_url.startswith(("http://", "https://")):
            return self.registry_url.rstrip("/")
        scheme = "http" if self.registry_insecure else "https"
        return f"{scheme}://{self.registry_url.rstrip('/')}"


def create_settings_from_env(**overrides: Any) -> Settings:
    """
    Load settings from environment variables.

    Environment Variables:
        - REGISTRY_AUTH_URL (required)
        - REGISTRY_AUTH_INSECURE (default: false)
        - REGISTRY_AUTH_USERNAME (optional)
        - REGISTRY_AUTH_PASSWORD (optional)
        - REGISTRY_AUTH_DOCKER_CONFIG (optional)
        - REGISTRY_AUTH_HTTP_TIMEOUT (default: 30.0)
        - REGISTRY_AUTH_HTTP_RETRY (default: 0)

    Args:
        **overrides: Settings field values that take precedence over the
            environment; ``None`` values are ignored

    Returns:
        Settings object with validated configuration

    Raises:
        ValueError: If configuration is invalid or required values missing

    Note:
        Creates a fresh Settings instance every time (no caching).
    """
    def str_to_bool(value: str) -> bool:
        return value.lower() in ('true', '1', 'yes', 'on')

    def get_float(key: str, default: float) -> float:
        value = os.getenv(key)
        return float(value) if value else default

    def get_int(key: str, default: int) -> int:
        value = os.getenv(key)
        return int(value) if value else default

    values = {
        "registry_url": os.getenv("REGISTRY_AUTH_URL"),
        "registry_insecure": str_to_bool(os.getenv("REGISTRY_AUTH_INSECURE", "false")),
        "registry_user": os.getenv("REGISTRY_AUTH_USERNAME"),
        "registry_pass": os.getenv("REGISTRY_AUTH_PASSWORD"),
        "docker_config": os.getenv("REGISTRY_AUTH_DOCKER_CONFIG"),
        "http_timeout_s": get_float("REGISTRY_AUTH_HTTP_TIMEOUT", 30.0),
        "http_retry": get_int("REGISTRY_AUTH_HTTP_RETRY", 0),
    }
    values.update({key: value for key, value in overrides.items() if value is not None})

    if not values["registry_url"]:
        raise ValueError("REGISTRY_AUTH_URL environment variable is required")

    return Settings(**values)
