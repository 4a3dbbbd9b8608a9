"""Response body doubles for checking connection release."""
from __future__ import annotations

import httpx


class TrackedStream(httpx.SyncByteStream):
    """Response body that records whether it was read and closed."""
    
    def __init__(self, data: bytes = b"") -> None:
        self.data = data
        self.consumed = False
        self.closed = False
    
    def __iter__(self):
        self.consumed = True
        yield self.data
    
    def close(self) -> None:
        self.closed = True
