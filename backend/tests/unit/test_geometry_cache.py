"""Test the swappable geometry snapshot holder."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from transitmap.core.exceptions import GeometryNotReadyError
from transitmap.gtfs.models import GeometrySnapshot, RouteDirectionGeometry
from transitmap.services.geometry_cache import GeometryCache


def make_snapshot(route_id: str) -> GeometrySnapshot:
    line = ((0.0, 0.0), (1.0, 1.0))
    return GeometrySnapshot(routes=(RouteDirectionGeometry(route_id, "0", (line,)),))


class TestGeometryCache:

    def test_not_ready_before_first_replace(self):
        cache = GeometryCache()
        
        assert cache.is_ready is False
        assert cache.built_at is None
        with pytest.raises(GeometryNotReadyError) as exc_info:
            cache.get()
        assert exc_info.value.status_code == 503

    def test_empty_snapshot_is_ready(self):
        cache = GeometryCache()
        empty = GeometrySnapshot(routes=())
        
        cache.replace(empty)
        
        assert cache.is_ready is True
        assert cache.get() is empty

    def test_get_returns_same_snapshot_until_replaced(self):
        cache = GeometryCache()
        first, second = make_snapshot("A"), make_snapshot("B")
        
        cache.replace(first)
        assert all(cache.get() is first for _ in range(10))
        
        cache.replace(second)
        assert cache.get() is second
        assert cache.built_at == second.built_at

    def test_rejects_non_snapshot(self):
        cache = GeometryCache()
        
        with pytest.raises(TypeError):
            cache.replace({"routes": []})
        assert cache.is_ready is False

    def test_concurrent_reads_see_whole_snapshots(self):
        cache = GeometryCache()
        old, new = make_snapshot("OLD"), make_snapshot("NEW")
        cache.replace(old)
        stop = threading.Event()
        
        def writer():
            for i in range(2000):
                cache.replace(new if i % 2 else old)
            stop.set()
        
        def reader():
            seen = []
            while not stop.is_set():
                snapshot = cache.get()
                seen.append((snapshot is old or snapshot is new, snapshot.routes[0].route_id))
            return seen
        
        with ThreadPoolExecutor(max_workers=5) as pool:
            readers = [pool.submit(reader) for _ in range(4)]
            pool.submit(writer).result()
            observations = [obs for future in readers for obs in future.result()]
        
        assert all(whole for whole, _ in observations)
        assert {route_id for _, route_id in observations} <= {"OLD", "NEW"}
