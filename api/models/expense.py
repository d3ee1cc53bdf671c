from datetime import date
from typing import Optional

from pydantic import Field

from models.base import StoreEntity


class Expense(StoreEntity):
    # Vehicle reference by plate, not by identifier
    vehicle_license_plate: Optional[str] = Field(None, description="Plate of the vehicle the expense belongs to")

    expense_type: Optional[str] = Field(None, description="Free-text category such as Fuel, Maintenance or Toll", example="Fuel")
    amount: Optional[float] = None
    description: Optional[str] = None
    expense_date: Optional[date] = Field(None, alias="date")

    # Fuel purchases only
    fuel_quantity_liters: Optional[float] = None
    odometer_reading: Optional[float] = None
