import logging
from typing import Dict, Optional

from fastapi import APIRouter, HTTPException, Query, status

from repositories.entity_store import EntityStore, StoreError
from services.fleet_views import build_trip_list, fetch_collections, load_trip_detail


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["trips"])
store = EntityStore()


@router.get("/", response_model=Dict)
async def list_trips(
    q: Optional[str] = Query(None, description="Search trip name, departure or destination"),
    trip_status: str = Query("all", description="Trip status or 'all'")
):
    """List trips matching the search query and trip status"""
    try:
        (trips,) = await fetch_collections(store, "trips")
    except StoreError as e:
        logger.error(f"Error loading trips: {e}")
        trips = []
    return build_trip_list(trips, q, trip_status)


@router.get("/{trip_id}", response_model=Dict)
async def get_trip(trip_id: str):
    """Get a trip with its assigned vehicle and driver.

    The vehicle and driver are None when unassigned or when the referenced
    record no longer exists.
    """
    try:
        detail = await load_trip_detail(store, trip_id)
    except StoreError as e:
        logger.error(f"Error loading trip {trip_id}: {e}")
        detail = None

    if detail is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Trip {trip_id} not found"
        )
    return detail
