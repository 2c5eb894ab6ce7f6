"""
Single GTFS-RT vehicle position feed fetch and decode.

One request, no retries: retrying is left to the caller's polling cadence.
"""

import asyncio
import time
import uuid
from dataclasses import dataclass
from typing import List
from urllib.parse import urlsplit

import httpx
import structlog
from google.protobuf.message import DecodeError
from google.transit import gtfs_realtime_pb2

from transitmap.core.exceptions import FeedFetchError, FetchErrorKind
from transitmap.core.metrics import FEED_FETCH_SECONDS
from transitmap.schemas.vehicles import VehiclePosition

logger = structlog.get_logger()


@dataclass(frozen=True)
class FeedSource:
    """A configured live vehicle position endpoint."""
    
    url: str
    
    @property
    def label(self) -> str:
        return urlsplit(self.url).netloc or self.url


async def fetch_vehicle_positions(
    client: httpx.AsyncClient,
    source: FeedSource,
    timeout: float,
) -> List[VehiclePosition]:
    """Fetch one feed and return its vehicles, or raise FeedFetchError."""
    start = time.perf_counter()
    
    try:
        # wait_for bounds the whole exchange, httpx's timeout only bounds each phase
        response = await asyncio.wait_for(client.get(source.url, timeout=timeout), timeout=timeout)
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        raise FeedFetchError(
            source.url, FetchErrorKind.TIMEOUT, f"no response within {timeout}s"
        ) from e
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
        # InvalidURL and ValueError come from building the request out of a bad URL
        raise FeedFetchError(
            source.url, FetchErrorKind.TRANSPORT, str(e) or type(e).__name__
        ) from e
    finally:
        FEED_FETCH_SECONDS.observe(time.perf_counter() - start)
    
    if not response.is_success:
        raise FeedFetchError(
            source.url,
            FetchErrorKind.HTTP_STATUS,
            f"HTTP {response.status_code} {response.reason_phrase}".strip(),
        )
    
    feed = gtfs_realtime_pb2.FeedMessage()
    try:
        feed.ParseFromString(response.content)
    except DecodeError as e:
        raise FeedFetchError(
            source.url, FetchErrorKind.DECODE_FAILURE, f"invalid GTFS-RT payload: {e}"
        ) from e
    
    vehicles = parse_vehicle_positions(feed, source)
    logger.debug("Feed fetched", source=source.url, entities=len(feed.entity), vehicles=len(vehicles))
    return vehicles


def parse_vehicle_positions(feed, source: FeedSource) -> List[VehiclePosition]:
    """Extract vehicles from a decoded FeedMessage, skipping entities without a position."""
    vehicles = []
    
    for entity in feed.entity:
        if not entity.HasField("vehicle"):
            continue
        
        vp = entity.vehicle
        if not vp.HasField("position"):
            continue
        
        position = vp.position
        if not (position.HasField("latitude") and position.HasField("longitude")):
            continue
        
        trip = vp.trip if vp.HasField("trip") else None
        
        vehicles.append(VehiclePosition(
            id=_resolve_vehicle_id(entity, source),
            lat=position.latitude,
            lon=position.longitude,
            bearing=position.bearing if position.HasField("bearing") else None,
            timestamp=vp.timestamp if vp.HasField("timestamp") else None,
            route_id=(trip.route_id or None) if trip is not None else None,
            trip_id=(trip.trip_id or None) if trip is not None else None,
            source=source.url,
        ))
    
    return vehicles


def _resolve_vehicle_id(entity, source: FeedSource) -> str:
    if entity.id:
        return entity.id
    if entity.vehicle.HasField("vehicle") and entity.vehicle.vehicle.id:
        return entity.vehicle.vehicle.id
    # Not a stable identity: a fresh placeholder every poll
    return f"{source.label}-{uuid.uuid4().hex}"
