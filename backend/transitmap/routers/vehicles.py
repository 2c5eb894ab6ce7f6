"""
Live vehicle snapshot endpoint.
"""

from fastapi import APIRouter, Depends

from transitmap.routers.deps import get_snapshot_service
from transitmap.schemas.vehicles import VehicleSnapshotResponse
from transitmap.services.snapshot import SnapshotService

router = APIRouter()


@router.get("/vehicles", response_model=VehicleSnapshotResponse)
async def get_vehicle_snapshot(
    service: SnapshotService = Depends(get_snapshot_service),
) -> VehicleSnapshotResponse:
    """
    Poll every configured feed and return the merged vehicles.
    
    Always 200: failed feeds are listed under ``errors`` next to whatever the
    other feeds returned, and ``all_failed`` flags a total outage.
    """
    result = await service.get_vehicle_snapshot()
    return result.to_response()
