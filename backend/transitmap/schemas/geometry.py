"""
GeoJSON schemas for route geometry responses.
"""

from typing import List, Literal

from pydantic import BaseModel


class RouteProperties(BaseModel):
    route_id: str
    direction_id: str


class MultiLineGeometry(BaseModel):
    type: Literal["MultiLineString"] = "MultiLineString"
    coordinates: List[List[List[float]]]  # lines of [lon, lat] pairs


class RouteFeature(BaseModel):
    type: Literal["Feature"] = "Feature"
    properties: RouteProperties
    geometry: MultiLineGeometry


class RouteFeatureCollection(BaseModel):
    """All route/direction geometries."""
    
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: List[RouteFeature]
