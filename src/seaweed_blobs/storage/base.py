"""
Capability interfaces for the SeaweedFS client.

These protocols define the boundary between the client and the environment
it runs in, enabling clean dependency injection and testing with fakes.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, Tuple, TypeVar, runtime_checkable

T = TypeVar("T")


@dataclass(frozen=True)
class LookupResult:
    """
    The master's answer to "where can volume V be reached".
    
    Invariants:
    - replicas: never empty; an empty answer is raised as NotFound instead
    - every replica is independently sufficient to serve the volume
    """
    volume_id: str
    replicas: Tuple[str, ...]


__all__ = ["LookupResult", "AddressResolver", "ReplicaPicker"]


@runtime_checkable
class AddressResolver(Protocol):
    """Protocol for turning a logical master address into a concrete one."""
    
    def resolve(self, addr: str) -> str:
        """
        Resolve a configured address to the host:port to contact.
        
        Called before every master request; implementations must not cache
        across calls if topology changes are to be picked up.
        
        Args:
            addr: Logical address from settings
            
        Returns:
            Concrete host:port (or URL) to contact
        """
        ...


@runtime_checkable
class ReplicaPicker(Protocol):
    """Protocol for choosing one replica out of several."""
    
    def choose(self, replicas: Sequence[T]) -> T:
        """
        Pick one element of a non-empty sequence.
        
        Must be safe to call from several threads at once.
        """
        ...
