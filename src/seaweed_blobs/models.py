"""
Wire models for SeaweedFS master responses.

These Pydantic models validate the JSON bodies returned by the master's
``/dir/assign`` and ``/dir/lookup`` endpoints. Unknown fields are ignored so
newer masters can add to the payloads freely.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AssignResponse(BaseModel):
    """Body of a successful ``GET /dir/assign``."""
    model_config = ConfigDict(extra="ignore")
    
    fid: str = Field(..., min_length=1, description="New file id, volumeId,fileKey")
    url: str = Field(..., min_length=1, description="host:port of the assigning volume server")
    public_url: Optional[str] = Field(default=None, alias="publicUrl", description="Public volume address")
    count: Optional[int] = Field(default=None, description="Number of file ids reserved")


class Location(BaseModel):
    """One volume server currently serving a volume."""
    model_config = ConfigDict(extra="ignore")
    
    url: str = Field(..., min_length=1, description="host:port of the volume server")
    public_url: Optional[str] = Field(default=None, alias="publicUrl", description="Public volume address")


class LookupResponse(BaseModel):
    """Body of a successful ``GET /dir/lookup``."""
    model_config = ConfigDict(extra="ignore")
    
    locations: List[Location] = Field(default_factory=list, description="Replica locations")


__all__ = ["AssignResponse", "Location", "LookupResponse"]
