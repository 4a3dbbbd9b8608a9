"""
Directory client for the SeaweedFS master.

Asks the master for new file ids (assign) and for the volume servers
currently serving a volume (lookup), and picks one replica per call.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

import httpx
from pydantic import BaseModel, ValidationError

from ..errors import DecodeError, NotFound
from ..handles import StorageHandle
from ..models import AssignResponse, LookupResponse
from ..settings import Settings
from .addressing import PassthroughResolver, ReplicaSelector
from .base import AddressResolver, LookupResult, ReplicaPicker
from .http import base_url, check_status, format_kv, transport_error

__all__ = ["DirectoryClient"]

logger = logging.getLogger(__name__)


class DirectoryClient:
    """
    HTTP client for the master's ``/dir`` endpoints.
    
    The logical master address is resolved fresh on every request and lookups
    are never cached, so topology changes are picked up immediately at the
    cost of one extra round-trip per read or delete.
    """
    
    def __init__(
        self,
        settings: Settings,
        http: httpx.Client,
        *,
        resolver: Optional[AddressResolver] = None,
        picker: Optional[ReplicaPicker] = None,
    ):
        """
        Initialize directory client.
        
        Args:
            settings: Client settings (master address, assignment defaults)
            http: HTTP client; owned by the caller
            resolver: Address resolver (defaults to passthrough)
            picker: Replica picker (defaults to a freshly seeded ReplicaSelector)
        """
        self.settings = settings
        self.http = http
        self.resolver = resolver or PassthroughResolver()
        self.picker = picker or ReplicaSelector()
    
    def allocate(self, replication: Optional[str] = None, ttl: Optional[str] = None) -> StorageHandle:
        """
        Ask the master for a new file id.
        
        Args:
            replication: Replication placement, e.g. "001" (falls back to settings)
            ttl: Expiry, e.g. "3d" (falls back to settings)
            
        Returns:
            StorageHandle for the new file id and its volume server
            
        Raises:
            RequestError: On any non-200 status or transport failure
            DecodeError: If the body is not a valid assign response
        """
        replication = replication or self.settings.default_replication
        ttl = ttl or self.settings.default_ttl
        
        # empty parameters are omitted so the cluster default applies
        params: Dict[str, str] = {}
        if replication:
            params["replication"] = replication
        if ttl:
            params["ttl"] = ttl
        
        body, kv = self._get_json("/dir/assign", params)
        result = self._parse(AssignResponse, body, kv, "assign")
        return StorageHandle(fid=result.fid, url=result.url)
    
    def resolve(self, volume_id: str) -> LookupResult:
        """
        Look up the volume servers currently serving a volume.
        
        Args:
            volume_id: Volume id, the part of a file id before the comma
            
        Returns:
            LookupResult with at least one replica
            
        Raises:
            NotFound: If the master answers 404 or lists no locations
            RequestError: On any other non-200 status or transport failure
            DecodeError: If the body is not a valid lookup response
        """
        body, kv = self._get_json("/dir/lookup", {"volumeId": volume_id}, not_found=True)
        result = self._parse(LookupResponse, body, kv, "lookup")
        
        if not result.locations:
            logger.debug(f"seaweed lookup returned no locations {format_kv(kv)}", extra={"seaweed": kv})
            raise NotFound(f"No locations for volume {volume_id}")
        
        return LookupResult(
            volume_id=volume_id,
            replicas=tuple(loc.url for loc in result.locations),
        )
    
    def locate(self, volume_id: str) -> str:
        """Resolve a volume and pick one of its replicas at random."""
        return self.picker.choose(self.resolve(volume_id).replicas)
    
    def _get_json(self, path: str, params: Dict[str, str], *, not_found: bool = False) -> Tuple[bytes, dict]:
        """GET a master endpoint and return the raw 200 body plus the log context."""
        addr = self.resolver.resolve(self.settings.master_addr)
        url = base_url(addr) + path
        kv = {"url": url, "addr": addr}
        if params:
            kv["params"] = params
        logger.debug(f"making seaweed GET request {format_kv(kv)}")
        
        try:
            with self.http.stream("GET", url, params=params) as response:
                check_status(response, 200, kv, not_found=not_found)
                return response.read(), kv
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise transport_error(e, kv) from e
    
    def _parse(self, model: type[BaseModel], body: bytes, kv: dict, what: str):
        try:
            return model.model_validate_json(body)
        except ValidationError as e:
            kv["error"] = e
            logger.error(f"error decoding {what} response from seaweed {format_kv(kv)}", extra={"seaweed": kv})
            raise DecodeError(f"Invalid {what} response from seaweed: {e}") from e
