import logging
from typing import Dict, Optional

from fastapi import APIRouter, HTTPException, Query, status

from models.driver import Driver
from models.enums import DutyStatus, LicenseStatus
from repositories.entity_store import EntityStore, StoreError
from services.fleet_views import build_driver_list, fetch_collections, load_driver_detail


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/drivers", tags=["drivers"])
store = EntityStore()


class DriverRegistration(Driver):
    """Driver registration payload with the onboarding defaults"""
    license_status: Optional[LicenseStatus] = LicenseStatus.VALID
    duty_status: Optional[DutyStatus] = DutyStatus.OFF_DUTY


@router.get("/", response_model=Dict)
async def list_drivers(
    q: Optional[str] = Query(None, description="Search full name, email or license number"),
    duty_status: str = Query("all", description="Duty status or 'all'")
):
    """List drivers matching the search query and duty status"""
    try:
        (drivers,) = await fetch_collections(store, "drivers")
    except StoreError as e:
        logger.error(f"Error loading drivers: {e}")
        drivers = []
    return build_driver_list(drivers, q, duty_status)


@router.get("/{driver_id}", response_model=Dict)
async def get_driver(driver_id: str):
    """Get a driver with their trips, trip count and active trip"""
    try:
        detail = await load_driver_detail(store, driver_id)
    except StoreError as e:
        logger.error(f"Error loading driver {driver_id}: {e}")
        detail = None

    if detail is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Driver {driver_id} not found"
        )
    return detail


@router.post("/", response_model=Dict, status_code=status.HTTP_201_CREATED)
async def register_driver(driver: DriverRegistration):
    """Register a new driver"""
    try:
        if driver.id and store.exists("drivers", driver.id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Driver {driver.id} already exists"
            )
        created = store.create("drivers", driver)
    except StoreError as e:
        logger.error(f"Error registering driver: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to register driver"
        )
    return created.to_record()
