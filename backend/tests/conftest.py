"""Shared fixtures: GTFS-RT payload builders, fake feed servers, sample schedule data."""

import asyncio
from pathlib import Path
from typing import Callable, Dict, Optional

import httpx
import pytest
from google.transit import gtfs_realtime_pb2

SHAPES_TXT = """\ufeffshape_id,shape_pt_lat,shape_pt_lon,shape_pt_sequence
S1,40.7,-74.0,2
S1,40.71,-74.01,1
S2,40.75,-73.98,1
S2,40.76,-73.97,2
S2,40.77,-73.96,3
"""

TRIPS_TXT = """route_id,service_id,trip_id,direction_id,shape_id
A,WKD,A-1,0,S1
A,WKD,A-2,0,S1
A,WKD,A-3,1,S2

B,WKD,B-1,,S2
C,WKD,C-1,0,MISSING
"""


def build_feed(*vehicles: Dict) -> bytes:
    """
    Serialize a FeedMessage with one entity per dict.
    
    Recognised keys: id, lat, lon, bearing, timestamp, route_id, trip_id,
    vehicle_id, and position (False to leave the position out).
    """
    feed = gtfs_realtime_pb2.FeedMessage()
    feed.header.gtfs_realtime_version = "2.0"
    feed.header.timestamp = 1700000000
    
    for spec in vehicles:
        entity = feed.entity.add()
        entity.id = spec.get("id", "")
        vp = entity.vehicle
        if spec.get("position", True):
            vp.position.latitude = spec.get("lat", 40.7)
            vp.position.longitude = spec.get("lon", -74.0)
            if "bearing" in spec:
                vp.position.bearing = spec["bearing"]
        if "timestamp" in spec:
            vp.timestamp = spec["timestamp"]
        if "route_id" in spec:
            vp.trip.route_id = spec["route_id"]
        if "trip_id" in spec:
            vp.trip.trip_id = spec["trip_id"]
        if "vehicle_id" in spec:
            vp.vehicle.id = spec["vehicle_id"]
    
    return feed.SerializeToString()


def feed_transport(routes: Dict[str, Callable]) -> httpx.MockTransport:
    """
    MockTransport dispatching on the full request URL.
    
    Each value is an async callable taking the request and returning a response.
    """
    async def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(str(request.url))
        if route is None:
            return httpx.Response(404)
        return await route(request)
    
    return httpx.MockTransport(handler)


def respond(status: int = 200, content: bytes = b"", delay: Optional[float] = None) -> Callable:
    async def route(request: httpx.Request) -> httpx.Response:
        if delay:
            await asyncio.sleep(delay)
        return httpx.Response(status, content=content)
    return route


def refuse(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


async def refuse_async(request: httpx.Request) -> httpx.Response:
    return refuse(request)


@pytest.fixture
def gtfs_dir(tmp_path: Path) -> Path:
    """Directory holding a small shapes.txt / trips.txt pair."""
    (tmp_path / "shapes.txt").write_text(SHAPES_TXT, encoding="utf-8")
    (tmp_path / "trips.txt").write_text(TRIPS_TXT, encoding="utf-8")
    return tmp_path
