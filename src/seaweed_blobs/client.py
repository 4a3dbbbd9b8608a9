"""
SeaweedFS blob client.

Drives the full request flows against a SeaweedFS cluster:

- allocate -> upload: ask the master for a file id, then PUT the bytes to
  the assigning volume server as a single-field multipart form
- fetch / delete: decode an opaque filename, look the volume up on the
  master, pick one replica at random and GET or DELETE the file there

Every call is independent and holds no state beyond the shared HTTP
connection pool and the replica picker, so one client can be used from
many threads. Nothing is retried; a failed round-trip surfaces at once.
"""
from __future__ import annotations

import io
import logging
from typing import IO, Iterable, Optional, Tuple, Union

import httpx

from .errors import DecodeError, RequestError
from .handles import StorageHandle, decode_filename, handle_from_parts, volume_id_of
from .settings import Settings, create_settings_from_env
from .storage.base import AddressResolver, ReplicaPicker
from .storage.directory import DirectoryClient
from .storage.http import check_status, format_kv, transport_error, volume_url

__all__ = ["SeaweedClient", "UploadBody"]

logger = logging.getLogger(__name__)

# Content accepted by upload(): a bytes-like object, a binary file-like, or byte chunks
UploadBody = Union[bytes, bytearray, memoryview, IO[bytes], Iterable[bytes]]

# Multipart field the volume server reads the file from
UPLOAD_FIELD = "file"


class SeaweedClient:
    """
    Store, fetch and delete blobs in a SeaweedFS cluster.

    Callers only ever see opaque filenames; the cluster's file ids stay
    inside the client.

    Example:
        with SeaweedClient(Settings(master_addr="localhost:9333")) as client:
            handle = client.allocate()
            client.upload(handle, b"hello")
            name = client.opaque_filename(handle)
            data, headers = client.fetch_bytes(name)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        http: Optional[httpx.Client] = None,
        transport: Optional[httpx.BaseTransport] = None,
        resolver: Optional[AddressResolver] = None,
        picker: Optional[ReplicaPicker] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Client settings (loaded from the environment if omitted)
            http: HTTP client to use; the caller keeps ownership
            transport: Transport for the client-owned HTTP client (ignored with ``http``)
            resolver: Master address resolver (defaults to passthrough)
            picker: Replica picker (defaults to a freshly seeded ReplicaSelector)

        Raises:
            ConfigError: If settings are loaded from the environment and are
                missing or invalid
        """
        self.settings = settings or create_settings_from_env()

        self._owns_http = http is None
        if http is None:
            t = self.settings.http_timeout_s
            http = httpx.Client(
                timeout=httpx.Timeout(t, connect=min(t, 5.0)),
                follow_redirects=True,
                headers={"User-Agent": self.settings.user_agent},
                transport=transport,
            )
        self.http = http
        self.directory = DirectoryClient(self.settings, self.http, resolver=resolver, picker=picker)

        logger.debug(f"SeaweedClient using master {self.settings.master_addr}, timeout: {self.settings.http_timeout_s}s")

    # Handles

    def allocate(self, replication: Optional[str] = None, ttl: Optional[str] = None) -> StorageHandle:
        """Get a fresh assignment from the master. See DirectoryClient.allocate."""
        return self.directory.allocate(replication=replication, ttl=ttl)

    @staticmethod
    def handle_from_parts(url: str, filename: str) -> StorageHandle:
        """Rebuild a handle from a volume address and an opaque filename."""
        return handle_from_parts(url, filename)

    @staticmethod
    def opaque_filename(handle: StorageHandle, extension: Optional[str] = None) -> str:
        """Opaque filename for a handle, with an optional extension hint."""
        return handle.filename_with_extension(extension)

    # Transfers

    def upload(self, handle: StorageHandle, body: UploadBody, ttl: Optional[str] = None) -> None:
        """
        Upload content to an allocated handle.

        The body is sent as a multipart form with one file field named
        ``file`` whose filename is the handle's opaque filename, which is the
        shape the volume server expects on PUT.

        Args:
            handle: Handle from allocate() or handle_from_parts()
            body: Bytes, binary file-like, or iterable of byte chunks; fully consumed
            ttl: Optional expiry passed to the volume server

        Raises:
            RequestError: On any status other than 201 or on transport failure.
                Partially written content is not cleaned up.
        """
        url = volume_url(handle.url, handle.fid)
        params = {"ttl": ttl} if ttl else {}
        kv = {"url": url, "filename": handle.filename}
        if params:
            kv["params"] = params
        logger.debug(f"making seaweed PUT request {format_kv(kv)}")

        try:
            if isinstance(body, (bytearray, memoryview)):
                body = bytes(body)
            elif not isinstance(body, bytes) and not hasattr(body, "read"):
                body = b"".join(body)
            files = {UPLOAD_FIELD: (handle.filename, body)}

            with self.http.stream("PUT", url, params=params, files=files) as response:
                check_status(response, 201, kv)
                response.read()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise transport_error(e, kv) from e
        except OSError as e:
            kv["error"] = e
            logger.error(f"error copying body to multipart {format_kv(kv)}", extra={"seaweed": kv})
            raise RequestError(f"Failed reading upload body for {handle.filename}: {e}") from e

    def fetch(self, filename: str, sink: IO[bytes]) -> httpx.Headers:
        """
        Stream a stored blob into a writable sink.

        Args:
            filename: Opaque filename, optionally with an extension
            sink: Binary writable; receives the full body

        Returns:
            Response headers from the volume server (content type, length, ...)

        Raises:
            DecodeError: If the filename is malformed
            NotFound: If the volume or the file does not exist
            RequestError: On other statuses, transport failures, or sink write errors
        """
        url = self.locate_url(filename)
        kv = {"url": url, "filename": filename}
        logger.debug(f"making seaweed GET request {format_kv(kv)}")

        try:
            with self.http.stream("GET", url) as response:
                check_status(response, 200, kv, not_found=True)
                for chunk in response.iter_bytes():
                    sink.write(chunk)
                return response.headers
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise transport_error(e, kv) from e
        except OSError as e:
            kv["error"] = e
            logger.error(f"error copying body to writer {format_kv(kv)}", extra={"seaweed": kv})
            raise RequestError(f"Failed writing {filename} to sink: {e}") from e

    def fetch_bytes(self, filename: str) -> Tuple[bytes, httpx.Headers]:
        """Fetch a blob fully into memory. Returns (content, headers)."""
        buf = io.BytesIO()
        headers = self.fetch(filename, buf)
        return buf.getvalue(), headers

    def delete(self, filename: str) -> None:
        """
        Delete a stored blob from one of its replicas.

        Raises:
            DecodeError: If the filename is malformed
            NotFound: If the volume or the file is already gone
            RequestError: On any status other than 202 or on transport failure
        """
        url = self.locate_url(filename)
        kv = {"url": url, "filename": filename}
        logger.debug(f"making seaweed DELETE request {format_kv(kv)}")

        try:
            with self.http.stream("DELETE", url) as response:
                check_status(response, 202, kv, not_found=True)
                response.read()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise transport_error(e, kv) from e

    def locate_url(self, filename: str) -> str:
        """
        Resolve an opaque filename to a volume server URL.

        Decodes the filename, looks its volume up on the master and picks one
        replica at random. Useful on its own for redirecting readers straight
        to a volume server.

        Raises:
            DecodeError: If the filename is malformed
            NotFound: If the volume is unknown or has no locations
            RequestError: On master failures
        """
        fid = self._decode_fid(filename)
        replica = self.directory.locate(volume_id_of(fid))
        return volume_url(replica, fid)

    def _decode_fid(self, filename: str) -> str:
        try:
            return decode_filename(filename).decode("utf-8")
        except (DecodeError, UnicodeDecodeError) as e:
            kv = {"filename": filename, "error": e}
            logger.error(f"error decoding filename in lookup {format_kv(kv)}", extra={"seaweed": kv})
            if isinstance(e, DecodeError):
                raise
            raise DecodeError(f"Opaque filename {filename!r} does not hold a text file id") from e

    # Lifecycle

    def close(self):
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
