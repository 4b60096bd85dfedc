"""
Common dependencies for API endpoints
"""
from fastapi import HTTPException, Request

from app.core.snapshot import VRAMSnapshotService


def get_snapshot_service(request: Request) -> VRAMSnapshotService:
    """
    Dependency for the snapshot service created at startup

    Returns:
        The process-wide VRAMSnapshotService
    """
    service = getattr(request.app.state, "snapshot_service", None)
    if service is None:
        raise HTTPException(503, "Cluster client not initialized")
    return service
