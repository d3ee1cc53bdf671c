from datetime import datetime
from typing import Optional

from pydantic import Field

from models.base import StoreEntity
from models.enums import TripStatus


class Trip(StoreEntity):
    """Trip record.

    The vehicle and driver references are plain identifiers with no
    integrity guarantee: either may be missing or point at a deleted record.
    """

    trip_name: Optional[str] = Field(None, example="Bengaluru - Chennai Steel Run")

    # References
    assigned_vehicle_id: Optional[str] = Field(None, description="Identifier of the assigned vehicle")
    assigned_driver_id: Optional[str] = Field(None, description="Identifier of the assigned driver")

    # Cargo
    cargo_description: Optional[str] = None
    cargo_weight_kg: Optional[float] = Field(None, description="Cargo weight in kg", example=12000)

    # Status
    trip_status: Optional[TripStatus] = None

    # Route and schedule
    departure_location: Optional[str] = None
    destination_location: Optional[str] = None
    scheduled_departure_time: Optional[datetime] = None
    scheduled_arrival_time: Optional[datetime] = None
