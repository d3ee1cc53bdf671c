from enum import Enum


class VehicleStatus(str, Enum):
    AVAILABLE = "Available"
    ON_TRIP = "On Trip"
    IN_SHOP = "In Shop"
    OUT_OF_SERVICE = "Out of Service"


class LicenseStatus(str, Enum):
    VALID = "Valid"
    EXPIRED = "Expired"
    EXPIRING_SOON = "Expiring Soon"


class DutyStatus(str, Enum):
    ON_DUTY = "On Duty"
    OFF_DUTY = "Off Duty"
    SUSPENDED = "Suspended"


class TripStatus(str, Enum):
    SCHEDULED = "Scheduled"
    DISPATCHED = "Dispatched"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class ServiceStatus(str, Enum):
    SCHEDULED = "Scheduled"
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


# A trip holds its vehicle and driver while in one of these states
ACTIVE_TRIP_STATUSES = frozenset({TripStatus.IN_PROGRESS, TripStatus.DISPATCHED})

# Maintenance work that has not started yet
PENDING_SERVICE_STATUSES = frozenset({ServiceStatus.PENDING, ServiceStatus.SCHEDULED})
