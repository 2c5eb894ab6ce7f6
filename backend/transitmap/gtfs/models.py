"""
Static schedule data model: shape points, trips and the built route geometry.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

Coordinate = Tuple[float, float]  # (lon, lat)
Polyline = Tuple[Coordinate, ...]

DEFAULT_DIRECTION_ID = "0"


@dataclass(frozen=True)
class ShapePoint:
    shape_id: str
    sequence: int
    lon: float
    lat: float
    
    @classmethod
    def from_row(cls, row: Dict[str, str]) -> Optional["ShapePoint"]:
        """Parse a shapes.txt row, returning None when it is unusable."""
        shape_id = (row.get("shape_id") or "").strip()
        if not shape_id:
            return None
        
        try:
            sequence = int((row.get("shape_pt_sequence") or "").strip())
            lon = float((row.get("shape_pt_lon") or "").strip())
            lat = float((row.get("shape_pt_lat") or "").strip())
        except ValueError:
            return None
        
        if not (math.isfinite(lon) and math.isfinite(lat)):
            return None
        
        return cls(shape_id=shape_id, sequence=sequence, lon=lon, lat=lat)


@dataclass(frozen=True)
class Trip:
    route_id: str
    shape_id: str
    direction_id: str = DEFAULT_DIRECTION_ID
    
    @classmethod
    def from_row(cls, row: Dict[str, str]) -> Optional["Trip"]:
        """Parse a trips.txt row; trips without a route or shape contribute nothing."""
        route_id = (row.get("route_id") or "").strip()
        shape_id = (row.get("shape_id") or "").strip()
        if not route_id or not shape_id:
            return None
        
        direction_id = (row.get("direction_id") or "").strip() or DEFAULT_DIRECTION_ID
        return cls(route_id=route_id, shape_id=shape_id, direction_id=direction_id)


@dataclass(frozen=True)
class RouteDirectionGeometry:
    """All distinct simplified paths used by one route in one direction."""
    
    route_id: str
    direction_id: str
    lines: Tuple[Polyline, ...]
    
    def to_feature(self) -> Dict:
        return {
            "type": "Feature",
            "properties": {
                "route_id": self.route_id,
                "direction_id": self.direction_id,
            },
            "geometry": {
                "type": "MultiLineString",
                "coordinates": [[list(coord) for coord in line] for line in self.lines],
            },
        }


@dataclass(frozen=True)
class GeometrySnapshot:
    """Immutable result of one geometry build."""
    
    routes: Tuple[RouteDirectionGeometry, ...]
    shape_count: int = 0
    trip_count: int = 0
    skipped_rows: int = 0
    built_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    
    def get(self, route_id: str, direction_id: str) -> Optional[RouteDirectionGeometry]:
        for route in self.routes:
            if route.route_id == route_id and route.direction_id == direction_id:
                return route
        return None
    
    @property
    def line_count(self) -> int:
        return sum(len(route.lines) for route in self.routes)
    
    def to_feature_collection(self) -> Dict[str, List]:
        """Render as a GeoJSON FeatureCollection of MultiLineStrings."""
        return {
            "type": "FeatureCollection",
            "features": [route.to_feature() for route in self.routes],
        }
