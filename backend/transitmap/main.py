"""
FastAPI application entry point.
"""

import asyncio
import contextlib
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from transitmap.config import Settings, get_settings
from transitmap.core.exceptions import TransitMapException
from transitmap.gtfs.download import download_gtfs_static
from transitmap.routers import geometry, health, vehicles
from transitmap.services.snapshot import SnapshotService

logger = structlog.get_logger()


async def build_initial_geometry(service: SnapshotService, settings: Settings) -> None:
    """Fetch the static dataset if configured, then build geometry once."""
    try:
        if settings.gtfs_static_url and settings.gtfs_download_on_startup:
            await download_gtfs_static(
                settings.gtfs_static_url,
                settings.gtfs_data_dir,
                timeout=settings.gtfs_download_timeout,
            )
        await service.rebuild_geometry()
    except TransitMapException as e:
        # Vehicles are still served; geometry stays NotReady
        logger.error("Initial geometry build failed", error=e.detail)
    except Exception as e:
        logger.error("Initial geometry build failed", error=str(e), exc_info=True)


async def refresh_geometry_periodically(service: SnapshotService, interval: int) -> None:
    """Background task that rebuilds geometry every ``interval`` seconds."""
    logger.info("Starting geometry refresh task", interval=interval)
    
    while True:
        await asyncio.sleep(interval)
        try:
            await service.rebuild_geometry()
        except Exception as e:
            logger.error("Geometry refresh failed", error=str(e))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifecycle manager."""
        logger.info("Starting transit snapshot service", version=settings.app_version,
                    feeds=len(settings.feed_urls))
        
        client = httpx.AsyncClient()
        service = SnapshotService(
            feed_urls=settings.feed_urls,
            feed_timeout=settings.feed_timeout,
            data_dir=settings.gtfs_data_dir,
            simplify_tolerance=settings.simplify_tolerance,
            client=client,
        )
        app.state.snapshot_service = service
        
        await build_initial_geometry(service, settings)
        
        refresh_task = None
        if settings.geometry_refresh_seconds > 0:
            refresh_task = asyncio.create_task(
                refresh_geometry_periodically(service, settings.geometry_refresh_seconds)
            )
        
        logger.info("Application startup complete", geometry_ready=service.cache.is_ready)
        
        yield
        
        # Shutdown
        logger.info("Shutting down transit snapshot service")
        if refresh_task is not None:
            refresh_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await refresh_task
        await client.aclose()
    
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        openapi_url=f"{settings.api_prefix}/openapi.json",
        docs_url=f"{settings.api_prefix}/docs",
        lifespan=lifespan,
    )
    
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1024)
    
    @app.exception_handler(TransitMapException)
    async def transit_map_exception_handler(request: Request, exc: TransitMapException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "error_code": exc.error_code},
        )
    
    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "error_code": "INTERNAL_ERROR"},
        )
    
    @app.get(settings.api_prefix)
    async def root():
        return {"message": "Transit API is running", "version": settings.app_version}
    
    app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
    app.include_router(geometry.router, prefix=settings.api_prefix, tags=["geometry"])
    app.include_router(vehicles.router, prefix=settings.api_prefix, tags=["vehicles"])
    
    # Prometheus metrics
    app.mount("/metrics", make_asgi_app())
    
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    
    uvicorn.run(
        "transitmap.main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().debug,
        access_log=True,
        log_level="info",
    )
