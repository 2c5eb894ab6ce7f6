"""
Pydantic schemas for live vehicle positions.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from transitmap.core.exceptions import FetchErrorKind


class VehiclePosition(BaseModel):
    """One vehicle as reported by a single feed during a single poll."""
    
    id: str
    lat: float
    lon: float
    bearing: Optional[float] = None
    timestamp: Optional[int] = Field(default=None, description="Epoch seconds")
    route_id: Optional[str] = None
    trip_id: Optional[str] = None
    source: str


class FeedErrorResponse(BaseModel):
    """Why a feed contributed nothing to a snapshot."""
    
    kind: FetchErrorKind
    detail: str


class VehicleSnapshotResponse(BaseModel):
    """Merged vehicles from every reachable feed plus per-feed failures."""
    
    vehicles: List[VehiclePosition] = Field(default_factory=list)
    errors: Dict[str, FeedErrorResponse] = Field(default_factory=dict)
    all_failed: bool = False
    fetched_at: datetime
