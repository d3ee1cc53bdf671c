import logging
from typing import Dict, Optional

from fastapi import APIRouter, HTTPException, Query, status

from models.enums import VehicleStatus
from models.vehicle import Vehicle
from repositories.entity_store import EntityStore, StoreError
from services.fleet_views import build_vehicle_list, fetch_collections, load_vehicle_detail


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vehicles", tags=["vehicles"])
store = EntityStore()


class VehicleRegistration(Vehicle):
    """Vehicle registration payload; new vehicles start out Available"""
    status: Optional[VehicleStatus] = VehicleStatus.AVAILABLE


@router.get("/", response_model=Dict)
async def list_vehicles(
    q: Optional[str] = Query(None, description="Search name, model or license plate"),
    status_filter: str = Query("all", alias="status", description="Vehicle status or 'all'"),
    vehicle_type: str = Query("all", description="Vehicle type or 'all'")
):
    """List vehicles matching the search query and filters"""
    try:
        (vehicles,) = await fetch_collections(store, "vehicles")
    except StoreError as e:
        logger.error(f"Error loading vehicles: {e}")
        vehicles = []
    return build_vehicle_list(vehicles, q, status_filter, vehicle_type)


@router.get("/{vehicle_id}", response_model=Dict)
async def get_vehicle(vehicle_id: str):
    """Get a vehicle with its trips, maintenance history and expenses"""
    try:
        detail = await load_vehicle_detail(store, vehicle_id)
    except StoreError as e:
        logger.error(f"Error loading vehicle {vehicle_id}: {e}")
        detail = None

    if detail is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Vehicle {vehicle_id} not found"
        )
    return detail


@router.post("/", response_model=Dict, status_code=status.HTTP_201_CREATED)
async def register_vehicle(vehicle: VehicleRegistration):
    """Register a new vehicle"""
    try:
        if vehicle.id and store.exists("vehicles", vehicle.id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Vehicle {vehicle.id} already exists"
            )
        created = store.create("vehicles", vehicle)
    except StoreError as e:
        logger.error(f"Error registering vehicle: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to register vehicle"
        )
    return created.to_record()
