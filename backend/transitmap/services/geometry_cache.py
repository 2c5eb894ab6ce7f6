"""
Holder for the current route geometry snapshot.

Readers take no lock: ``get`` dereferences a single attribute, and
``replace`` rebinds that attribute to a fully built snapshot, so a reader
sees either the old snapshot or the new one, never a mixture.
"""

from datetime import datetime
from typing import Optional

import structlog

from transitmap.core.exceptions import GeometryNotReadyError
from transitmap.core.metrics import GEOMETRY_ROUTE_DIRECTIONS
from transitmap.gtfs.models import GeometrySnapshot

logger = structlog.get_logger()


class GeometryCache:
    """Atomically swappable reference to an immutable GeometrySnapshot."""
    
    def __init__(self):
        self._snapshot: Optional[GeometrySnapshot] = None
    
    def get(self) -> GeometrySnapshot:
        snapshot = self._snapshot
        if snapshot is None:
            raise GeometryNotReadyError()
        return snapshot
    
    def replace(self, snapshot: GeometrySnapshot) -> None:
        if not isinstance(snapshot, GeometrySnapshot):
            raise TypeError(f"expected GeometrySnapshot, got {type(snapshot).__name__}")
        
        self._snapshot = snapshot
        GEOMETRY_ROUTE_DIRECTIONS.set(len(snapshot.routes))
        logger.info("Geometry snapshot replaced", route_directions=len(snapshot.routes))
    
    @property
    def is_ready(self) -> bool:
        return self._snapshot is not None
    
    @property
    def built_at(self) -> Optional[datetime]:
        snapshot = self._snapshot
        return snapshot.built_at if snapshot is not None else None
