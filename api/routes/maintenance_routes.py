import logging
from typing import Dict, Optional

from fastapi import APIRouter, Query

from repositories.entity_store import EntityStore, StoreError
from services.fleet_views import build_maintenance_list, fetch_collections


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/maintenance", tags=["maintenance"])
store = EntityStore()


@router.get("/", response_model=Dict)
async def list_maintenance_logs(
    q: Optional[str] = Query(None, description="Search license plate, description or mechanic"),
    service_status: str = Query("all", description="Service status or 'all'"),
    maintenance_type: str = Query("all", description="Maintenance type or 'all'")
):
    """List maintenance logs with total cost and pending count for the filtered records"""
    try:
        (logs,) = await fetch_collections(store, "maintenancelogs")
    except StoreError as e:
        logger.error(f"Error loading maintenance logs: {e}")
        logs = []
    return build_maintenance_list(logs, q, service_status, maintenance_type)
