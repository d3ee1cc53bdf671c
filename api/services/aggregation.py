"""
KPI aggregation over fleet collections.

Every function is pure and total: empty collections, missing numeric fields
and zero denominators produce fixed sentinels (0 or "0") instead of NaN or an
exception. Ratios are returned as strings with a fixed number of decimals so
the same input always renders the same digits.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Type

from models.enums import (
    ACTIVE_TRIP_STATUSES,
    PENDING_SERVICE_STATUSES,
    ServiceStatus,
    TripStatus,
    VehicleStatus,
)
from models.expense import Expense
from models.maintenance_log import MaintenanceLog
from models.trip import Trip
from models.vehicle import Vehicle

FUEL_EXPENSE_TYPE = "Fuel"
MAINTENANCE_EXPENSE_TYPE = "Maintenance"


def to_fixed(value: float, digits: int) -> str:
    """Format with ``digits`` decimals, rounding half away from zero.

    Rounds the exact binary value of the float, which yields the same digits
    as JavaScript's ``Number.prototype.toFixed``.

    Non-finite values format as "0".
    """
    if not math.isfinite(value):
        return "0"
    if value == 0:
        value = 0.0  # drop the sign of -0.0
    quantum = Decimal(1).scaleb(-digits)
    return format(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP), "f")


def _sum(values: Iterable[Optional[float]]) -> float:
    return sum((value or 0 for value in values), 0)


def _count_in(records: Iterable[Any], attribute: str, accepted: Iterable[Enum]) -> int:
    accepted = frozenset(accepted)
    return sum(1 for record in records if getattr(record, attribute, None) in accepted)


# Financial

def total_expenses(expenses: Sequence[Expense]) -> float:
    return _sum(expense.amount for expense in expenses)


def expenses_of_type(expenses: Sequence[Expense], expense_type: str) -> float:
    """Sum of amounts whose free-text type equals ``expense_type`` exactly."""
    return _sum(expense.amount for expense in expenses if expense.expense_type == expense_type)


def fuel_expenses(expenses: Sequence[Expense]) -> float:
    return expenses_of_type(expenses, FUEL_EXPENSE_TYPE)


def maintenance_expenses(logs: Sequence[MaintenanceLog]) -> float:
    return _sum(log.cost for log in logs)


def total_fuel_liters(expenses: Sequence[Expense]) -> float:
    return _sum(expense.fuel_quantity_liters for expense in expenses)


def total_distance(vehicles: Sequence[Vehicle]) -> float:
    return _sum(vehicle.odometer_reading for vehicle in vehicles)


def fuel_efficiency(vehicles: Sequence[Vehicle], expenses: Sequence[Expense]) -> str:
    """Fleet km per liter, 2 decimals; "0" unless fuel liters are positive."""
    liters = total_fuel_liters(expenses)
    if liters <= 0:
        return "0"
    return to_fixed(total_distance(vehicles) / liters, 2)


def cost_per_km(vehicles: Sequence[Vehicle], expenses: Sequence[Expense]) -> str:
    """Expenses per fleet km, 2 decimals; "0" unless fleet distance is positive."""
    distance = total_distance(vehicles)
    if distance <= 0:
        return "0"
    return to_fixed(total_expenses(expenses) / distance, 2)


# Operational

def count_by_status(vehicles: Sequence[Vehicle], status: VehicleStatus) -> int:
    return _count_in(vehicles, "status", (status,))


def utilization_rate(vehicles: Sequence[Vehicle]) -> str:
    """Share of vehicles On Trip as a percentage, 1 decimal; "0" for no vehicles."""
    if not vehicles:
        return "0"
    on_trip = count_by_status(vehicles, VehicleStatus.ON_TRIP)
    return to_fixed(on_trip / len(vehicles) * 100, 1)


def completed_trips(trips: Sequence[Trip]) -> int:
    return _count_in(trips, "trip_status", (TripStatus.COMPLETED,))


def active_trips(trips: Sequence[Trip]) -> int:
    return _count_in(trips, "trip_status", ACTIVE_TRIP_STATUSES)


def pending_maintenance(logs: Sequence[MaintenanceLog]) -> int:
    return _count_in(logs, "service_status", PENDING_SERVICE_STATUSES)


def avg_cargo_weight(trips: Sequence[Trip]) -> str:
    if not trips:
        return "0"
    return to_fixed(_sum(trip.cargo_weight_kg for trip in trips) / len(trips), 0)


def status_histogram(records: Sequence[Any], attribute: str, statuses: Type[Enum]) -> List[Dict]:
    """Count and whole-number percentage of records per status value.

    Every member of ``statuses`` appears, in declaration order, even when its
    count is zero. Records with no status or another value are counted in the
    total but in no bucket.
    """
    total = len(records)
    histogram = []
    for status in statuses:
        count = _count_in(records, attribute, (status,))
        percentage = int(to_fixed(count / total * 100, 0)) if total else 0
        histogram.append({"status": status.value, "count": count, "percentage": percentage})
    return histogram


# Composite views

def compute_dashboard_kpis(
    vehicles: Sequence[Vehicle],
    trips: Sequence[Trip],
    maintenance_logs: Sequence[MaintenanceLog],
) -> Dict:
    return {
        "active_fleet": count_by_status(vehicles, VehicleStatus.ON_TRIP),
        "maintenance_alerts": count_by_status(vehicles, VehicleStatus.IN_SHOP),
        "available_vehicles": count_by_status(vehicles, VehicleStatus.AVAILABLE),
        "active_trips": active_trips(trips),
        "utilization_rate": utilization_rate(vehicles),
        "pending_maintenance": pending_maintenance(maintenance_logs),
    }


def compute_analytics(
    vehicles: Sequence[Vehicle],
    trips: Sequence[Trip],
    expenses: Sequence[Expense],
    maintenance_logs: Sequence[MaintenanceLog],
) -> Dict:
    """Financial, operational and status-distribution KPIs for the analytics view."""
    return {
        "financial": {
            "total_expenses": total_expenses(expenses),
            "fuel_expenses": fuel_expenses(expenses),
            "maintenance_expenses": maintenance_expenses(maintenance_logs),
            "cost_per_km": cost_per_km(vehicles, expenses),
        },
        "operational": {
            "total_vehicles": len(vehicles),
            "total_trips": len(trips),
            "total_distance": total_distance(vehicles),
            "total_fuel_liters": total_fuel_liters(expenses),
            "fuel_efficiency": fuel_efficiency(vehicles, expenses),
            "utilization_rate": utilization_rate(vehicles),
            "completed_trips": completed_trips(trips),
            "active_trips": active_trips(trips),
            "avg_cargo_weight": avg_cargo_weight(trips),
        },
        "status_breakdowns": {
            "vehicle_status": status_histogram(vehicles, "status", VehicleStatus),
            "trip_status": status_histogram(trips, "trip_status", TripStatus),
            "service_status": status_histogram(maintenance_logs, "service_status", ServiceStatus),
        },
    }


def summarize_expenses(expenses: Sequence[Expense]) -> Dict:
    """Totals shown above the (filtered) expense list."""
    return {
        "total_expenses": total_expenses(expenses),
        "fuel_expenses": fuel_expenses(expenses),
        "maintenance_expenses": expenses_of_type(expenses, MAINTENANCE_EXPENSE_TYPE),
    }


def summarize_maintenance(logs: Sequence[MaintenanceLog]) -> Dict:
    """Totals shown above the (filtered) maintenance list."""
    return {
        "total_cost": maintenance_expenses(logs),
        "pending_count": pending_maintenance(logs),
        "completed_count": _count_in(logs, "service_status", (ServiceStatus.COMPLETED,)),
    }
