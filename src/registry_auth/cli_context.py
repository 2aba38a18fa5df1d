"""
CLI Context for managing application dependencies.

Provides a clean way to manage CLI-level dependencies like settings and the
registry client, avoiding global state and enabling dependency injection.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .client import RegistryClient
from .credential_store import CredentialStore, resolve_credentials
from .settings import Settings, create_settings_from_env
from .transport import RegistryTransport


@dataclass
class CLIContext:
    """
    Shared context for CLI commands.

    Holds settings and lazily builds the registry client, which is reused
    for the rest of the command.
    """
    settings: Settings
    store: Optional[CredentialStore] = None
    _client: Optional[RegistryClient] = None

    @classmethod
    def from_options(cls, **overrides: Any) -> CLIContext:
        """
        Create CLI context from environment variables and command-line overrides.

        Returns:
            CLIContext with validated settings
        """
        return cls(settings=create_settings_from_env(**overrides))

    @property
    def client(self) -> RegistryClient:
        """Get or create the registry client (lazy initialization)."""
        if self._client is None:
            self._client = RegistryClient(
                base_url=self.settings.base_url,
                credentials=resolve_credentials(self.settings, self.store),
                transport=RegistryTransport.from_settings(self.settings),
            )
        return self._client
