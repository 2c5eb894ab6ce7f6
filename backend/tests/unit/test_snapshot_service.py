"""Test the snapshot facade."""

import httpx
import pytest

from conftest import build_feed, feed_transport, respond
from transitmap.core.exceptions import GeometryNotReadyError, SourceReadError
from transitmap.services.snapshot import SnapshotService

FEED = "https://feed.example.com/vehicles.pb"


@pytest.mark.asyncio
class TestSnapshotService:

    async def test_geometry_not_ready_until_built(self, gtfs_dir):
        service = SnapshotService(feed_urls=[], feed_timeout=1.0, data_dir=gtfs_dir)
        
        with pytest.raises(GeometryNotReadyError):
            service.get_route_geometries()
        
        snapshot = await service.rebuild_geometry()
        
        assert service.get_route_geometries() is snapshot
        assert [(r.route_id, r.direction_id) for r in snapshot.routes] == [("A", "0"), ("A", "1"), ("B", "0")]

    async def test_failed_build_leaves_cache_not_ready(self, tmp_path):
        service = SnapshotService(feed_urls=[], feed_timeout=1.0, data_dir=tmp_path / "missing")
        
        with pytest.raises(SourceReadError):
            await service.rebuild_geometry()
        
        assert service.cache.is_ready is False

    async def test_failed_rebuild_keeps_previous_snapshot(self, gtfs_dir):
        service = SnapshotService(feed_urls=[], feed_timeout=1.0, data_dir=gtfs_dir)
        first = await service.rebuild_geometry()
        (gtfs_dir / "shapes.txt").unlink()
        
        with pytest.raises(SourceReadError):
            await service.rebuild_geometry()
        
        assert service.get_route_geometries() is first

    async def test_tolerance_applied(self, gtfs_dir):
        service = SnapshotService(feed_urls=[], feed_timeout=1.0, data_dir=gtfs_dir, simplify_tolerance=0.001)
        
        snapshot = await service.rebuild_geometry()
        
        # S2 is three collinear points
        assert len(snapshot.get("A", "1").lines[0]) == 2

    async def test_vehicle_snapshot_refetches_every_call(self):
        calls = []
        
        async def counted(request):
            calls.append(1)
            return httpx.Response(200, content=build_feed({"id": f"v{len(calls)}"}))
        
        async with httpx.AsyncClient(transport=feed_transport({FEED: counted})) as client:
            service = SnapshotService(feed_urls=[FEED], feed_timeout=1.0, client=client)
            first = await service.get_vehicle_snapshot()
            second = await service.get_vehicle_snapshot()
        
        assert len(calls) == 2
        assert [v.id for v in first.vehicles] == ["v1"]
        assert [v.id for v in second.vehicles] == ["v2"]

    async def test_vehicle_snapshot_reports_failures(self):
        async with httpx.AsyncClient(transport=feed_transport({FEED: respond(status=502)})) as client:
            service = SnapshotService(feed_urls=[FEED], feed_timeout=1.0, client=client)
            result = await service.get_vehicle_snapshot()
        
        assert result.all_failed is True
        assert list(result.errors) == [FEED]
