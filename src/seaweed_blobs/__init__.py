"""
SeaweedFS blob client.

Stores, fetches and deletes blobs in a SeaweedFS cluster. Internal file ids
never leave the library in raw form; callers only ever see the opaque,
URL-safe filename derived from them.
"""
from __future__ import annotations

from .client import SeaweedClient
from .errors import ConfigError, DecodeError, ErrorKind, NotFound, RequestError, SeaweedError
from .handles import StorageHandle, decode_filename, encode_key, handle_from_parts
from .settings import Settings, create_settings_from_env

__version__ = "0.1.0"

__all__ = [
    "SeaweedClient",
    "Settings",
    "create_settings_from_env",
    "StorageHandle",
    "encode_key",
    "decode_filename",
    "handle_from_parts",
    "ErrorKind",
    "SeaweedError",
    "ConfigError",
    "DecodeError",
    "NotFound",
    "RequestError",
]
