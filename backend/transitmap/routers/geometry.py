"""
Route geometry endpoints.
"""

from fastapi import APIRouter, Depends

from transitmap.routers.deps import get_snapshot_service
from transitmap.schemas.geometry import RouteFeatureCollection
from transitmap.services.snapshot import SnapshotService

router = APIRouter()


@router.get("/shapes_merged", response_model=RouteFeatureCollection)
async def get_route_geometries(
    service: SnapshotService = Depends(get_snapshot_service),
) -> dict:
    """Simplified route/direction geometry as a GeoJSON FeatureCollection."""
    # GeometryNotReadyError is mapped to 503 by the app-level handler
    snapshot = service.get_route_geometries()
    return snapshot.to_feature_collection()
