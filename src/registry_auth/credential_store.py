"""
Credential stores that seed registry authentication.

The orchestrator only needs an optional ``(username, password)`` pair; these
stores are the places such a pair can come from.
"""
from __future__ import annotations

import base64
import binascii
import json
import logging
from pathlib import Path
from typing import Optional, Protocol, Tuple, runtime_checkable

from .settings import Settings

logger = logging.getLogger(__name__)

__all__ = [
    "CredentialStore",
    "DockerConfigCredentials",
    "StaticCredentials",
    "resolve_credentials",
]


@runtime_checkable
class CredentialStore(Protocol):
    """Protocol for looking up long-lived registry credentials."""

    def get_credentials(self, registry: str) -> Optional[Tuple[str, str]]:
        """
        Get credentials for a registry.

        Args:
            registry: Registry host[:port], optionally with scheme

        Returns:
            (username, password) or None if not found
        """
        ...


class StaticCredentials:
    """Fixed username/password pair returned for every registry."""

    def __init__(self, username: str, password: str = ""):
        self._credentials = (username, password)

    def get_credentials(self, registry: str) -> Optional[Tuple[str, str]]:
        return self._credentials


class DockerConfigCredentials:
    """Read registry credentials from a Docker ``config.json``."""

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else Path.home() / ".docker" / "config.json"
        self._config_cache: Optional[dict] = None
        self._config_mtime: Optional[float] = None

    def get_credentials(self, registry: str) -> Optional[Tuple[str, str]]:
        """
        Get credentials for registry from Docker config.

        Tries the exact key, then an ``https://`` prefixed key, then the key
        with any scheme stripped.

        Returns: (username, password) or None if not found
        """
        config = self._load_config()
        if not config:
            return None

        auths = config.get("auths", {})

        bare = registry.replace("https://", "").replace("http://", "")
        for registry_key in (registry, f"https://{bare}", bare):
            if registry_key in auths:
                break
        else:
            logger.debug(f"No Docker config entry for {registry}")
            return None

        auth_entry = auths[registry_key]

        # base64 "user:password" auth field
        if auth_entry.get("auth"):
            try:
                decoded = base64.b64decode(auth_entry["auth"]).decode("utf-8")
            except (binascii.Error, UnicodeDecodeError) as e:
                logger.debug(f"Undecodable auth field for {registry_key}: {e}")
            else:
                if ":" in decoded:
                    username, password = decoded.split(":", 1)
                    return username, password

        if "username" in auth_entry and "password" in auth_entry:
            return auth_entry["username"], auth_entry["password"]

        return None

    def _load_config(self) -> Optional[dict]:
        """Load Docker config with caching and mtime checking."""
        if not self.config_path.exists():
            return None

        try:
            current_mtime = self.config_path.stat().st_mtime

            if (self._config_cache is not None and
                    self._config_mtime is not None and
                    current_mtime == self._config_mtime):
                return self._config_cache

            with open(self.config_path, 'r') as f:
                config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.debug(f"Failed to read Docker config {self.config_path}: {e}")
            return None

        self._config_cache = config
        self._config_mtime = current_mtime
        return config


def resolve_credentials(settings: Settings,
                        store: Optional[CredentialStore] = None) -> Optional[Tuple[str, str]]:
    """
    Pick the credentials a client should negotiate with.

    Explicit settings win over the store. A username without a password is
    returned with an empty password.
    """
    if settings.registry_user:
        logger.debug("Using explicit username/password from settings")
        return settings.registry_user, settings.registry_pass or ""

    if store is None:
        store = DockerConfigCredentials(settings.docker_config)

    creds = store.get_credentials(settings.registry_host)
    if creds:
        logger.debug(f"Using stored credentials for {settings.registry_host}")
    else:
        logger.debug(f"No credentials configured for {settings.registry_host}")
    return creds
