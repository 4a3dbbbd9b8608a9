"""
Opaque filename codec and storage handles.

SeaweedFS file ids (``volumeId,fileKey``) are never handed out raw. They are
encoded with the padded URL-safe base64 alphabet into an opaque filename
that can be stored or embedded in a signed URL. The alphabet must not change:
every filename ever issued has to stay decodable.
"""
from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Optional, Union

from .errors import DecodeError

__all__ = [
    "StorageHandle",
    "encode_key",
    "decode_filename",
    "volume_id_of",
    "handle_from_parts",
]


def encode_key(key: Union[bytes, str]) -> str:
    """Encode an internal key as an opaque filename (padded URL-safe base64)."""
    if isinstance(key, str):
        key = key.encode("utf-8")
    return base64.urlsafe_b64encode(key).decode("ascii")


def decode_filename(filename: str) -> bytes:
    """
    Decode an opaque filename back into the internal key.
    
    Everything from the first "." onward is an extension hint and is
    discarded before decoding. No other validation happens here; a well-formed
    name for content that does not exist only shows up later as a lookup miss.
    
    Args:
        filename: Opaque filename, optionally with an extension
        
    Returns:
        Internal key bytes
        
    Raises:
        DecodeError: If the name is not valid padded URL-safe base64
    """
    encoded = filename.split(".", 1)[0]
    # b64decode maps altchars before validating, so the standard alphabet's
    # "+" and "/" would otherwise slip through
    if "+" in encoded or "/" in encoded:
        raise DecodeError(f"Invalid opaque filename {filename!r}: not URL-safe base64")
    try:
        return base64.b64decode(encoded, altchars=b"-_", validate=True)
    except ValueError as e:
        # binascii.Error for bad padding/alphabet, ValueError for non-ascii input
        raise DecodeError(f"Invalid opaque filename {filename!r}: {e}") from e


def volume_id_of(fid: str) -> str:
    """Return the volume id, the text before the first comma of a file id."""
    return fid.split(",", 1)[0]


@dataclass(frozen=True)
class StorageHandle:
    """
    An assignment that can be uploaded to, or a reference to stored content.
    
    Attributes:
        fid: Internal file id owned by the cluster. Never expose this; use
            ``filename`` instead.
        url: host:port of the volume server that made the assignment. Only
            meaningful right after allocation; reads and deletes look the
            volume up again.
    """
    fid: str
    url: str
    
    @property
    def filename(self) -> str:
        """Opaque filename for this handle."""
        return encode_key(self.fid)
    
    @property
    def volume_id(self) -> str:
        return volume_id_of(self.fid)
    
    def filename_with_extension(self, extension: Optional[str] = None) -> str:
        """Opaque filename with an optional ``.extension`` content-type hint."""
        if not extension:
            return self.filename
        return f"{self.filename}.{extension.lstrip('.')}"


def handle_from_parts(url: str, filename: str) -> StorageHandle:
    """
    Rebuild a handle from a volume address and an opaque filename.
    
    Used when a previously issued filename comes back (e.g. from a verified
    signed URL) and no fresh allocation should happen.
    
    Raises:
        DecodeError: If the filename does not decode to a UTF-8 file id
    """
    raw = decode_filename(filename)
    try:
        fid = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"Opaque filename {filename!r} does not hold a text file id") from e
    return StorageHandle(fid=fid, url=url)
