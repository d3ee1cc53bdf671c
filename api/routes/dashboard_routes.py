import logging
from typing import Dict

from fastapi import APIRouter

from config import settings
from repositories.entity_store import EntityStore, StoreError
from services.fleet_views import build_analytics, build_dashboard, load_analytics, load_dashboard


logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])
store = EntityStore()


@router.get("/dashboard",
            response_model=Dict,
            summary="Fleet dashboard",
            description="Headline KPIs, fleet status distribution and the most recent trips")
async def get_dashboard():
    """Get the dashboard view.

    Returns:
        dict: KPIs, total counts, fleet status histogram and recent trips.
        When the store cannot be read the view is computed over empty
        collections.
    """
    try:
        return await load_dashboard(store, settings.recent_trips_limit)
    except StoreError as e:
        logger.error(f"Error loading dashboard data: {e}")
        return build_dashboard([], [], [], settings.recent_trips_limit)


@router.get("/analytics",
            response_model=Dict,
            summary="Fleet analytics",
            description="Financial and operational KPIs with vehicle, trip and service status breakdowns")
async def get_analytics():
    """Get the analytics view.

    Returns:
        dict: ``financial``, ``operational`` and ``status_breakdowns`` sections
    """
    try:
        return await load_analytics(store)
    except StoreError as e:
        logger.error(f"Error loading analytics data: {e}")
        return build_analytics([], [], [], [])
