"""
SeaweedFS client error classes.

Every failure surfaced by the public API is one of four kinds. Each error
carries an explicit ``kind`` discriminant so callers can branch on it
without isinstance chains, e.g. to treat absent content as a normal
outcome rather than a fault.
"""
from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional


class ErrorKind(str, Enum):
    """Discriminant for SeaweedError subclasses."""
    CONFIG = "config"
    DECODE = "decode"
    NOT_FOUND = "not_found"
    REQUEST = "request"


class SeaweedError(Exception):
    """
    Base class for all SeaweedFS client errors.
    
    Subclasses set ``kind``; the base class is never raised directly.
    """
    kind: ErrorKind


class ConfigError(SeaweedError, ValueError):
    """
    Required configuration missing or malformed.
    
    Raised at construction time, never from a network path:
    - master address not configured
    - timeout, replication or TTL values that fail validation
    """
    kind = ErrorKind.CONFIG


class DecodeError(SeaweedError):
    """
    Input could not be decoded.
    
    Raised when:
    - an opaque filename is not valid padded URL-safe base64
    - a decoded filename is not a usable file id
    - the master returns a body that is not the expected JSON shape
    """
    kind = ErrorKind.DECODE


class NotFound(SeaweedError):
    """
    Content does not exist.
    
    Raised when:
    - the master lookup answers HTTP 404 for a volume id
    - the master lookup answers with an empty location list
    - a volume server answers HTTP 404 on fetch or delete
    """
    kind = ErrorKind.NOT_FOUND


class RequestError(SeaweedError):
    """
    Operational fault talking to the cluster.
    
    Raised for transport failures (connection refused, DNS, timeouts bubbled
    up from httpx) and for any unexpected status code. Partially completed
    uploads are reported as RequestError too; nothing is cleaned up.
    """
    kind = ErrorKind.REQUEST

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        headers: Optional[Mapping[str, str]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.headers = headers


__all__ = [
    "ErrorKind",
    "SeaweedError",
    "ConfigError",
    "DecodeError",
    "NotFound",
    "RequestError",
]
