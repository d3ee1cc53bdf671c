from datetime import date
from typing import Optional

from pydantic import Field

from models.base import StoreEntity
from models.enums import DutyStatus, LicenseStatus


class Driver(StoreEntity):
    # Contact
    full_name: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None
    profile_picture: Optional[str] = None

    # License Info
    license_number: Optional[str] = None
    license_expiry_date: Optional[date] = None
    license_status: Optional[LicenseStatus] = None

    # Performance, both on a 0-100 scale
    safety_score: Optional[float] = Field(None, description="Safety score (0-100)")
    trip_completion_rate: Optional[float] = Field(None, description="Completed trip percentage (0-100)")

    # Status
    duty_status: Optional[DutyStatus] = None
