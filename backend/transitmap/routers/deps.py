"""
Shared FastAPI dependencies.
"""

from fastapi import Request

from transitmap.services.snapshot import SnapshotService


def get_snapshot_service(request: Request) -> SnapshotService:
    return request.app.state.snapshot_service
