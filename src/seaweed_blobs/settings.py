"""
Settings and configuration for the SeaweedFS client.

Centralizes configuration values and provides validation with fail-fast behavior.
Loads settings from environment variables at client construction time.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigError

__all__ = ["Settings", "create_settings_from_env", "DEFAULT_USER_AGENT"]

DEFAULT_USER_AGENT = "seaweed-blobs/0.1.0"

_ADDR_RE = re.compile(r"^(?:https?://)?(?:[a-zA-Z0-9._-]+|\[[0-9a-fA-F:.]+\])(?::[0-9]+)?/?$")
_REPLICATION_RE = re.compile(r"^[0-9]{3}$")
_TTL_RE = re.compile(r"^[0-9]+[mhdwMy]?$")


@dataclass(frozen=True)
class Settings:
    """
    Configuration settings for SeaweedClient.
    
    Master Settings:
        master_addr: Logical master address, host[:port] or http(s)://host[:port] (required).
            Passed through the address resolver before every request.
        http_timeout_s: HTTP timeout handed to the transport, in seconds
        user_agent: User-Agent header sent on every request
        
    Assignment Defaults:
        default_replication: Replication placement used by allocate() when the caller
            passes none, e.g. "001". None means the cluster default.
        default_ttl: TTL used by allocate() when the caller passes none, e.g. "3d".
            None means no expiry.
    """
    master_addr: str
    http_timeout_s: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    default_replication: Optional[str] = None
    default_ttl: Optional[str] = None
    
    def __post_init__(self):
        """Validate settings on construction."""
        if not self.master_addr:
            raise ConfigError("master_addr is required")
        
        if not _ADDR_RE.match(self.master_addr):
            raise ConfigError(f"Invalid master_addr format: {self.master_addr}")
        
        if self.http_timeout_s <= 0:
            raise ConfigError(f"http_timeout_s must be positive, got {self.http_timeout_s}")
        
        if self.default_replication and not _REPLICATION_RE.match(self.default_replication):
            raise ConfigError(
                f"Invalid default_replication: {self.default_replication}. Expected three digits like '001'."
            )
        
        if self.default_ttl and not _TTL_RE.match(self.default_ttl):
            raise ConfigError(
                f"Invalid default_ttl: {self.default_ttl}. Expected a count with optional unit m, h, d, w, M or y."
            )


def create_settings_from_env() -> Settings:
    """
    Load settings from environment variables.
    
    Environment Variables:
        - SEAWEED_MASTER_ADDR (required)
        - SEAWEED_HTTP_TIMEOUT (default: 30.0)
        - SEAWEED_REPLICATION (optional)
        - SEAWEED_TTL (optional)
    
    Returns:
        Settings object with validated configuration
        
    Raises:
        ConfigError: If configuration is invalid or required values missing
        
    Note:
        Creates a fresh Settings instance every time (no caching).
    """
    master_addr = os.getenv("SEAWEED_MASTER_ADDR")
    if not master_addr:
        raise ConfigError("SEAWEED_MASTER_ADDR environment variable is required")
    
    timeout = os.getenv("SEAWEED_HTTP_TIMEOUT")
    try:
        http_timeout_s = float(timeout) if timeout else 30.0
    except ValueError as e:
        raise ConfigError(f"SEAWEED_HTTP_TIMEOUT must be a number, got {timeout!r}") from e
    
    return Settings(
        master_addr=master_addr,
        http_timeout_s=http_timeout_s,
        default_replication=os.getenv("SEAWEED_REPLICATION") or None,
        default_ttl=os.getenv("SEAWEED_TTL") or None,
    )
