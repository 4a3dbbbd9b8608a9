"""
Fake SeaweedFS cluster for testing.

Speaks the master (``/dir/assign``, ``/dir/lookup``) and volume server
(PUT/GET/DELETE ``/{fid}``) HTTP protocol through ``httpx.MockTransport``,
so the real client code paths run end to end without a network.
"""
from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

import httpx

__all__ = ["FakeCluster", "StoredFile"]

_BOUNDARY_RE = re.compile(r'boundary="?([^";]+)"?')
_NAME_RE = re.compile(rb'\bname="([^"]*)"')
_FILENAME_RE = re.compile(rb'\bfilename="([^"]*)"')
_CTYPE_RE = re.compile(rb"content-type:\s*([^\r\n]+)", re.IGNORECASE)


@dataclass
class StoredFile:
    """A file held by the fake volume servers."""
    data: bytes
    filename: str
    content_type: str = "application/octet-stream"
    ttl: Optional[str] = None


@dataclass
class FakeCluster:
    """
    In-memory master plus volume servers.
    
    This is a test double; not for production use.
    
    Attributes:
        master: host:port the master answers on
        volumes: volume id -> host:port of every replica serving it
        files: file id -> stored content (shared by all replicas)
        requests: (method, url) of every request seen, in order
        assign_params: query parameters of every assign request
        unreachable: hosts that fail with a connection error
    """
    master: str = "master:9333"
    volumes: Dict[str, List[str]] = field(default_factory=lambda: {"3": ["127.0.0.1:8080"]})
    files: Dict[str, StoredFile] = field(default_factory=dict)
    requests: List[Tuple[str, str]] = field(default_factory=list)
    assign_params: List[Dict[str, str]] = field(default_factory=list)
    unreachable: Set[str] = field(default_factory=set)
    
    def __post_init__(self) -> None:
        self._lock = threading.Lock()
        self._counter = 0
    
    def transport(self) -> httpx.MockTransport:
        """Transport routing requests to this cluster."""
        return httpx.MockTransport(self.handler)
    
    def handler(self, request: httpx.Request) -> httpx.Response:
        host = f"{request.url.host}:{request.url.port}" if request.url.port else request.url.host
        with self._lock:
            self.requests.append((request.method, str(request.url)))
        
        if host in self.unreachable:
            raise httpx.ConnectError(f"connection refused: {host}", request=request)
        if host == self.master:
            return self._handle_master(request)
        if any(host in replicas for replicas in self.volumes.values()):
            return self._handle_volume(host, request)
        raise httpx.ConnectError(f"unknown host: {host}", request=request)
    
    # Master
    
    def _handle_master(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if request.method == "GET" and path == "/dir/assign":
            return self._assign(request)
        if request.method == "GET" and path == "/dir/lookup":
            return self._lookup(request)
        return httpx.Response(404, json={"error": f"no route {request.method} {path}"})
    
    def _assign(self, request: httpx.Request) -> httpx.Response:
        if not self.volumes:
            return httpx.Response(503, json={"error": "no writable volumes"})
        
        with self._lock:
            self.assign_params.append(dict(request.url.params))
            self._counter += 1
            counter = self._counter
        
        vids = sorted(self.volumes)
        vid = vids[(counter - 1) % len(vids)]
        fid = f"{vid},{counter:x}{0x1234abcd:08x}"
        url = self.volumes[vid][0]
        return httpx.Response(200, json={"fid": fid, "url": url, "publicUrl": url, "count": 1})
    
    def _lookup(self, request: httpx.Request) -> httpx.Response:
        vid = request.url.params.get("volumeId", "")
        if vid not in self.volumes:
            return httpx.Response(404, json={"volumeId": vid, "error": "volume id not found"})
        locations = [{"url": u, "publicUrl": u} for u in self.volumes[vid]]
        return httpx.Response(200, json={"volumeId": vid, "locations": locations})
    
    # Volume servers
    
    def _handle_volume(self, host: str, request: httpx.Request) -> httpx.Response:
        fid = request.url.path.lstrip("/")
        vid = fid.split(",", 1)[0]
        if host not in self.volumes.get(vid, []):
            return httpx.Response(404, text=f"volume {vid} not on {host}")
        
        if request.method == "PUT" or request.method == "POST":
            return self._put(fid, request)
        if request.method == "GET":
            stored = self.files.get(fid)
            if stored is None:
                return httpx.Response(404)
            return httpx.Response(
                200,
                content=stored.data,
                headers={"Content-Type": stored.content_type},
            )
        if request.method == "DELETE":
            with self._lock:
                stored = self.files.pop(fid, None)
            if stored is None:
                return httpx.Response(404, json={"size": 0})
            return httpx.Response(202, json={"size": len(stored.data)})
        return httpx.Response(405)
    
    def _put(self, fid: str, request: httpx.Request) -> httpx.Response:
        parsed = parse_multipart_file(request)
        if parsed is None:
            return httpx.Response(400, json={"error": "expected multipart form with a file field"})
        
        name, filename, content_type, data = parsed
        if name != "file":
            return httpx.Response(400, json={"error": f"unexpected form field {name}"})
        
        with self._lock:
            self.files[fid] = StoredFile(
                data=data,
                filename=filename,
                content_type=content_type,
                ttl=request.url.params.get("ttl"),
            )
        return httpx.Response(201, json={"name": filename, "size": len(data)})


def parse_multipart_file(request: httpx.Request) -> Optional[Tuple[str, str, str, bytes]]:
    """
    Extract the first part of a multipart/form-data request.
    
    Returns:
        (field name, filename, content type, data), or None if the request
        is not multipart
    """
    match = _BOUNDARY_RE.search(request.headers.get("Content-Type", ""))
    if not match:
        return None
    
    delimiter = b"--" + match.group(1).encode("ascii")
    parts = request.content.split(delimiter)
    if len(parts) < 3:
        return None
    
    head, _, data = parts[1].partition(b"\r\n\r\n")
    if data.endswith(b"\r\n"):
        data = data[:-2]
    
    name = _NAME_RE.search(head)
    filename = _FILENAME_RE.search(head)
    ctype = _CTYPE_RE.search(head)
    return (
        name.group(1).decode() if name else "",
        filename.group(1).decode() if filename else "",
        ctype.group(1).decode().strip() if ctype else "application/octet-stream",
        data,
    )
