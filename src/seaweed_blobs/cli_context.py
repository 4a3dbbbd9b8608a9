"""
CLI Context for managing application dependencies.

Provides a clean way to manage CLI-level dependencies like settings and the
client instance, avoiding global state and enabling proper dependency injection.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx

from .client import SeaweedClient
from .settings import Settings, create_settings_from_env


@dataclass
class CLIContext:
    """
    Shared context for CLI commands.
    
    Holds the settings and a lazily created client that is shared across a
    single CLI command execution.
    """
    settings: Settings
    transport: Optional[httpx.BaseTransport] = None
    _client: Optional[SeaweedClient] = None
    
    @classmethod
    def from_env(cls) -> CLIContext:
        """
        Create CLI context from environment variables.
        
        Raises:
            ConfigError: If SEAWEED_MASTER_ADDR is missing or settings are invalid
        """
        return cls(settings=create_settings_from_env())
    
    @property
    def client(self) -> SeaweedClient:
        """Get or create the client (lazy initialization)."""
        if self._client is None:
            self._client = SeaweedClient(self.settings, transport=self.transport)
        return self._client
    
    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
