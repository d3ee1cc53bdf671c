"""
Join Resolver for fleet collections.

Collections are fetched independently and the store enforces no referential
integrity, so relationships are rebuilt here. Trips point at vehicles and
drivers by identifier; expenses and maintenance logs point at vehicles by
license plate. Both kinds of reference are expressed as a JoinKey, and an
unresolved reference is a None or empty result, never an error.
"""

from enum import Enum
from typing import Iterable, List, NamedTuple, Optional, Sequence, TypeVar

from pydantic import BaseModel

from models.driver import Driver
from models.enums import ACTIVE_TRIP_STATUSES
from models.expense import Expense
from models.maintenance_log import MaintenanceLog
from models.trip import Trip
from models.vehicle import Vehicle

T = TypeVar("T")


class JoinStrategy(str, Enum):
    BY_ID = "byId"
    BY_EXACT_STRING = "byExactString"


class JoinKey(BaseModel):
    """A reference from one record to another.

    ``BY_ID`` keys compare opaque identifiers, ``BY_EXACT_STRING`` keys
    compare denormalized strings such as license plates. Both are strict,
    case-sensitive equality. A key without a value refers to nothing.
    """

    strategy: JoinStrategy
    value: Optional[str] = None

    class Config:
        """Pydantic config."""
        frozen = True

    @classmethod
    def by_id(cls, value: Optional[str]) -> "JoinKey":
        return cls(strategy=JoinStrategy.BY_ID, value=value)

    @classmethod
    def by_exact_string(cls, value: Optional[str]) -> "JoinKey":
        return cls(strategy=JoinStrategy.BY_EXACT_STRING, value=value)

    @property
    def is_empty(self) -> bool:
        return not self.value

    def matches(self, candidate: Optional[str]) -> bool:
        if self.is_empty or candidate is None:
            return False
        if self.strategy is JoinStrategy.BY_ID:
            return candidate == self.value
        if self.strategy is JoinStrategy.BY_EXACT_STRING:
            # No case folding or trimming: "ab-12" does not match "AB-12"
            return candidate == self.value
        raise ValueError(f"Unsupported join strategy: {self.strategy}")


def resolve_one(key: JoinKey, candidates: Iterable[T], attribute: str = "id") -> Optional[T]:
    """Return the first candidate whose ``attribute`` matches the key."""
    if key.is_empty:
        return None
    for candidate in candidates:
        if key.matches(getattr(candidate, attribute, None)):
            return candidate
    return None


def resolve_many(key: JoinKey, records: Iterable[T], attribute: str) -> List[T]:
    """Return every record whose ``attribute`` matches the key, in source order."""
    if key.is_empty:
        return []
    return [record for record in records if key.matches(getattr(record, attribute, None))]


class TripRelations(NamedTuple):
    vehicle: Optional[Vehicle]
    driver: Optional[Driver]


def resolve_trip_relations(
    trip: Trip,
    vehicles: Sequence[Vehicle],
    drivers: Sequence[Driver],
) -> TripRelations:
    """Resolve a trip's vehicle and driver independently; either may be None."""
    return TripRelations(
        vehicle=resolve_one(JoinKey.by_id(trip.assigned_vehicle_id), vehicles),
        driver=resolve_one(JoinKey.by_id(trip.assigned_driver_id), drivers),
    )


def resolve_vehicle_trips(vehicle_id: Optional[str], trips: Sequence[Trip]) -> List[Trip]:
    return resolve_many(JoinKey.by_id(vehicle_id), trips, "assigned_vehicle_id")


def resolve_driver_trips(driver_id: Optional[str], trips: Sequence[Trip]) -> List[Trip]:
    return resolve_many(JoinKey.by_id(driver_id), trips, "assigned_driver_id")


def resolve_vehicle_maintenance(
    license_plate: Optional[str],
    logs: Sequence[MaintenanceLog],
) -> List[MaintenanceLog]:
    """Maintenance logs for a plate. A vehicle that is not loaded has no plate
    and therefore no logs."""
    return resolve_many(JoinKey.by_exact_string(license_plate), logs, "vehicle_license_plate")


def resolve_vehicle_expenses(
    license_plate: Optional[str],
    expenses: Sequence[Expense],
) -> List[Expense]:
    return resolve_many(JoinKey.by_exact_string(license_plate), expenses, "vehicle_license_plate")


def find_active_trip(trips: Iterable[Trip]) -> Optional[Trip]:
    """First trip, in collection order, that is Dispatched or In Progress."""
    for trip in trips:
        if trip.trip_status in ACTIVE_TRIP_STATUSES:
            return trip
    return None
