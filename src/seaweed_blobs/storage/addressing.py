"""
Address resolution and replica selection.

Default implementations of the AddressResolver and ReplicaPicker
capabilities used by DirectoryClient.
"""
from __future__ import annotations

import os
import random
import threading
import time
from typing import Optional, Sequence, TypeVar

from .base import AddressResolver, ReplicaPicker

__all__ = ["PassthroughResolver", "ReplicaSelector"]

T = TypeVar("T")


class PassthroughResolver(AddressResolver):
    """Resolver that contacts the configured address as-is."""
    
    def resolve(self, addr: str) -> str:
        return addr


class ReplicaSelector(ReplicaPicker):
    """
    Uniform random choice among replicas.
    
    Spreads reads and deletes across every replica of a volume instead of
    always hitting the first one. The generator is owned by the instance,
    seeded once from the clock mixed with OS entropy so separate processes
    do not pick in lockstep, and guarded by a lock for concurrent callers.
    """
    
    def __init__(self, seed: Optional[int] = None) -> None:
        if seed is None:
            seed = time.time_ns() ^ int.from_bytes(os.urandom(8), "big")
        self._rng = random.Random(seed)
        self._lock = threading.Lock()
    
    def choose(self, replicas: Sequence[T]) -> T:
        """Pick one replica uniformly at random."""
        if not replicas:
            raise ValueError("cannot choose from an empty replica list")
        if len(replicas) == 1:
            return replicas[0]
        with self._lock:
            i = self._rng.randrange(len(replicas))
        return replicas[i]
