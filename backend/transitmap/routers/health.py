"""
Health check endpoints for monitoring and orchestration.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from transitmap.routers.deps import get_snapshot_service
from transitmap.services.snapshot import SnapshotService

router = APIRouter()


@router.get("/health/live")
async def liveness_check(request: Request):
    """Basic liveness check - is the process running?"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc),
        "service": request.app.title,
        "version": request.app.version,
    }


@router.get("/health/ready")
async def readiness_check(service: SnapshotService = Depends(get_snapshot_service)):
    """Readiness check - has route geometry been built?"""
    checks = {
        "geometry": service.cache.is_ready,
        "feeds_configured": len(service.sources) > 0,
    }
    built_at = service.cache.built_at
    
    body = {
        "status": "healthy" if checks["geometry"] else "not_ready",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "geometry_built_at": built_at.isoformat() if built_at else None,
        "checks": checks,
    }
    return JSONResponse(status_code=200 if checks["geometry"] else 503, content=body)
