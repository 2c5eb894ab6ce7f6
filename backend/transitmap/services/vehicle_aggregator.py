"""
Concurrent fan-out over every configured vehicle position feed.

Each feed runs as its own task and hands back either its vehicles or its
FeedFetchError; results are merged only after every task has settled, so
one dead or slow feed never hides the others.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Union

import httpx
import structlog

from transitmap.core.exceptions import FeedFetchError, FetchErrorKind
from transitmap.core.metrics import FEED_FETCH_TOTAL
from transitmap.schemas.vehicles import FeedErrorResponse, VehiclePosition, VehicleSnapshotResponse
from transitmap.services.feed_fetcher import FeedSource, fetch_vehicle_positions

logger = structlog.get_logger()

SlotResult = Union[List[VehiclePosition], FeedFetchError]


@dataclass
class AggregateResult:
    """Vehicles from every feed that answered, plus the failures keyed by feed URL."""
    
    vehicles: List[VehiclePosition] = field(default_factory=list)
    errors: Dict[str, FeedFetchError] = field(default_factory=dict)
    source_count: int = 0
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    
    @property
    def all_failed(self) -> bool:
        return self.source_count > 0 and len(self.errors) == self.source_count
    
    def to_response(self) -> VehicleSnapshotResponse:
        return VehicleSnapshotResponse(
            vehicles=self.vehicles,
            errors={
                url: FeedErrorResponse(kind=error.kind, detail=error.reason)
                for url, error in self.errors.items()
            },
            all_failed=self.all_failed,
            fetched_at=self.fetched_at,
        )


async def collect(
    sources: Iterable[FeedSource],
    timeout: float,
    client: Optional[httpx.AsyncClient] = None,
) -> AggregateResult:
    """
    Fetch all sources concurrently and merge what came back.
    
    Vehicles are ordered by source, then by entity order within each feed.
    Never raises for feed failures, even when every source fails; check
    ``all_failed`` on the result instead. Duplicate sources are fetched once.
    """
    sources = list(dict.fromkeys(sources))
    
    if client is None:
        async with httpx.AsyncClient() as own_client:
            return await _collect(own_client, sources, timeout)
    return await _collect(client, sources, timeout)


async def _collect(
    client: httpx.AsyncClient,
    sources: List[FeedSource],
    timeout: float,
) -> AggregateResult:
    slots: List[SlotResult] = await asyncio.gather(
        *(_fetch_slot(client, source, timeout) for source in sources)
    )
    
    result = AggregateResult(source_count=len(sources))
    for source, slot in zip(sources, slots):
        if isinstance(slot, FeedFetchError):
            result.errors[source.url] = slot
        else:
            result.vehicles.extend(slot)
    
    if result.all_failed:
        logger.error("All vehicle feeds failed", sources=len(sources))
    else:
        logger.info(
            "Vehicle snapshot collected",
            vehicles=len(result.vehicles),
            sources=len(sources),
            failed=len(result.errors),
        )
    return result


async def _fetch_slot(client: httpx.AsyncClient, source: FeedSource, timeout: float) -> SlotResult:
    try:
        vehicles = await fetch_vehicle_positions(client, source, timeout)
    except FeedFetchError as e:
        FEED_FETCH_TOTAL.labels(outcome=e.kind.value).inc()
        logger.warning("Feed fetch failed", source=source.url, kind=e.kind.value, error=e.reason)
        return e
    except Exception as e:
        FEED_FETCH_TOTAL.labels(outcome=FetchErrorKind.INTERNAL.value).inc()
        logger.error("Feed fetch crashed", source=source.url, error=str(e), exc_info=True)
        return FeedFetchError(source.url, FetchErrorKind.INTERNAL, str(e) or type(e).__name__)
    
    FEED_FETCH_TOTAL.labels(outcome="success").inc()
    return vehicles
