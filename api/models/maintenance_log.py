from datetime import date, datetime
from typing import Optional

from pydantic import Field

from models.base import StoreEntity
from models.enums import ServiceStatus


class MaintenanceLog(StoreEntity):
    """Service record for a vehicle, linked by license plate."""

    vehicle_license_plate: Optional[str] = Field(None, description="Plate of the serviced vehicle")
    maintenance_type: Optional[str] = Field(None, description="Free-text service category", example="Oil Change")
    service_status: Optional[ServiceStatus] = None
    description: Optional[str] = None
    cost: Optional[float] = None
    mechanic_name: Optional[str] = None

    # Schedule
    service_date: Optional[datetime] = None
    next_service_date: Optional[date] = None
