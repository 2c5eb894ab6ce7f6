"""
Custom exceptions for the transit snapshot service.
"""

from enum import Enum
from typing import Optional


class TransitMapException(Exception):
    """Base exception for application."""
    
    def __init__(
        self,
        detail: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
    ):
        self.detail = detail
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        super().__init__(detail)


class SourceReadError(TransitMapException):
    """Static schedule tables could not be read."""
    
    def __init__(self, source: str, detail: str):
        self.source = source
        super().__init__(
            detail=f"Failed to read {source}: {detail}",
            status_code=500,
            error_code="SOURCE_READ_ERROR",
        )


class GeometryNotReadyError(TransitMapException):
    """Route geometry has not been built yet."""
    
    def __init__(self):
        super().__init__(
            detail="Route geometry is not ready yet",
            status_code=503,
            error_code="GEOMETRY_NOT_READY",
        )


class FetchErrorKind(str, Enum):
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    DECODE_FAILURE = "decode_failure"
    TRANSPORT = "transport"
    INTERNAL = "internal"


class FeedFetchError(TransitMapException):
    """Error fetching a GTFS-RT vehicle position feed."""
    
    def __init__(self, source: str, kind: FetchErrorKind, detail: str):
        self.source = source
        self.kind = kind
        self.reason = detail
        super().__init__(
            detail=f"Failed to fetch feed {source}: {detail}",
            status_code=503,
            error_code="FEED_FETCH_ERROR",
        )
