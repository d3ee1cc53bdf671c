from typing import Optional

from pydantic import Field

from models.base import StoreEntity
from models.enums import VehicleStatus


class Vehicle(StoreEntity):
    """Fleet vehicle record.

    ``license_plate`` is the key expenses and maintenance logs use to refer
    to the vehicle; trips refer to it by ``id`` instead.
    """

    # Identification
    name: Optional[str] = Field(None, description="Display name of the vehicle", example="Hauler 7")
    model: Optional[str] = Field(None, description="Make and model", example="Volvo FH16")
    license_plate: Optional[str] = Field(None, description="Registration plate, unique across the fleet", example="KA-01-AB-1234")
    vehicle_type: Optional[str] = Field(None, description="Vehicle category", example="Truck")

    # Capacity and usage
    max_load_capacity: Optional[float] = Field(None, description="Maximum load in kg", example=18000)
    odometer_reading: Optional[float] = Field(None, description="Odometer in km", example=120450)

    # Status
    status: Optional[VehicleStatus] = Field(None, description="Current operational status")
