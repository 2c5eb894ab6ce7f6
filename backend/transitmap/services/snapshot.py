"""
Facade the HTTP layer talks to for route geometry and vehicle snapshots.
"""

import asyncio
from pathlib import Path
from typing import Iterable, Optional, Union

import httpx
import structlog

from transitmap.core.metrics import GEOMETRY_BUILDS_TOTAL
from transitmap.gtfs.models import GeometrySnapshot
from transitmap.gtfs.reader import load_schedule_tables
from transitmap.gtfs.shapes import build_route_geometries
from transitmap.services.feed_fetcher import FeedSource
from transitmap.services.geometry_cache import GeometryCache
from transitmap.services.vehicle_aggregator import AggregateResult, collect

logger = structlog.get_logger()


class SnapshotService:
    """Wires the geometry cache and the vehicle aggregator behind two reads."""
    
    def __init__(
        self,
        feed_urls: Iterable[str],
        feed_timeout: float,
        data_dir: Union[str, Path] = "data",
        simplify_tolerance: float = 0.0,
        cache: Optional[GeometryCache] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.sources = tuple(FeedSource(url=url) for url in feed_urls)
        self.feed_timeout = feed_timeout
        self.data_dir = Path(data_dir)
        self.simplify_tolerance = simplify_tolerance
        self.cache = cache or GeometryCache()
        self.client = client
    
    def get_route_geometries(self) -> GeometrySnapshot:
        """Current geometry snapshot; raises GeometryNotReadyError before the first build."""
        return self.cache.get()
    
    async def get_vehicle_snapshot(self) -> AggregateResult:
        """Poll every configured feed right now."""
        return await collect(self.sources, self.feed_timeout, client=self.client)
    
    async def rebuild_geometry(self) -> GeometrySnapshot:
        """
        Read the schedule tables, rebuild geometry and publish it.
        
        Runs the CPU-bound build in a worker thread. On failure the error
        propagates and the previously published snapshot stays in place.
        """
        try:
            snapshot = await asyncio.to_thread(self._build_geometry)
        except Exception:
            GEOMETRY_BUILDS_TOTAL.labels(outcome="failure").inc()
            raise
        
        self.cache.replace(snapshot)
        GEOMETRY_BUILDS_TOTAL.labels(outcome="success").inc()
        return snapshot
    
    def _build_geometry(self) -> GeometrySnapshot:
        shape_rows, trip_rows = load_schedule_tables(self.data_dir)
        return build_route_geometries(shape_rows, trip_rows, tolerance=self.simplify_tolerance)
