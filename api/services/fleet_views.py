"""
View Service for the fleet dashboard.

Each view reads the collections it needs from the Entity Store concurrently,
waits for all of them, then joins, filters and aggregates synchronously. The
``build_*`` functions hold the synchronous part and take plain collections,
so routes can rebuild a view from empty collections when a fetch fails.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Sequence

from models.driver import Driver
from models.enums import VehicleStatus
from models.expense import Expense
from models.maintenance_log import MaintenanceLog
from models.trip import Trip
from models.vehicle import Vehicle
from services import aggregation
from services.filters import facet_values, filter_collection
from services.join_resolver import (
    find_active_trip,
    resolve_driver_trips,
    resolve_trip_relations,
    resolve_vehicle_expenses,
    resolve_vehicle_maintenance,
    resolve_vehicle_trips,
)

logger = logging.getLogger(__name__)


def _records(entities: Sequence) -> List[Dict]:
    return [entity.to_record() for entity in entities]


def _record(entity) -> Optional[Dict]:
    return entity.to_record() if entity is not None else None


async def fetch_collections(store, *collections: str) -> List[list]:
    """Fetch several collections concurrently.

    Returns the item lists in the order requested. The first failing fetch
    propagates its StoreError; no partial result is returned.
    """
    results = await asyncio.gather(
        *(asyncio.to_thread(store.get_all, collection) for collection in collections)
    )
    logger.debug(
        "Fetched " + ", ".join(f"{c}={len(r['items'])}" for c, r in zip(collections, results))
    )
    return [result["items"] for result in results]


# Dashboard and analytics

def build_dashboard(
    vehicles: Sequence[Vehicle],
    trips: Sequence[Trip],
    maintenance_logs: Sequence[MaintenanceLog],
    recent_limit: int = 3,
) -> Dict:
    return {
        "kpis": aggregation.compute_dashboard_kpis(vehicles, trips, maintenance_logs),
        "total_vehicles": len(vehicles),
        "total_trips": len(trips),
        "fleet_status": aggregation.status_histogram(vehicles, "status", VehicleStatus),
        "recent_trips": _records(trips[:recent_limit]),
    }


async def load_dashboard(store, recent_limit: int = 3) -> Dict:
    vehicles, trips, logs = await fetch_collections(store, "vehicles", "trips", "maintenancelogs")
    return build_dashboard(vehicles, trips, logs, recent_limit)


def build_analytics(
    vehicles: Sequence[Vehicle],
    trips: Sequence[Trip],
    expenses: Sequence[Expense],
    maintenance_logs: Sequence[MaintenanceLog],
) -> Dict:
    return aggregation.compute_analytics(vehicles, trips, expenses, maintenance_logs)


async def load_analytics(store) -> Dict:
    vehicles, trips, expenses, logs = await fetch_collections(
        store, "vehicles", "trips", "expenses", "maintenancelogs"
    )
    return build_analytics(vehicles, trips, expenses, logs)


# List views

def _list_view(items: Sequence, filtered: Sequence, **extra) -> Dict:
    view = {"items": _records(filtered), "count": len(filtered), "total": len(items)}
    view.update(extra)
    return view


def build_vehicle_list(
    vehicles: Sequence[Vehicle],
    query: Optional[str] = None,
    status: Optional[str] = None,
    vehicle_type: Optional[str] = None,
) -> Dict:
    filtered = filter_collection(vehicles, query, {"status": status, "vehicle_type": vehicle_type})
    return _list_view(vehicles, filtered, vehicle_types=facet_values(vehicles, "vehicle_type"))


def build_driver_list(
    drivers: Sequence[Driver],
    query: Optional[str] = None,
    duty_status: Optional[str] = None,
) -> Dict:
    filtered = filter_collection(drivers, query, {"duty_status": duty_status})
    return _list_view(drivers, filtered)


def build_trip_list(
    trips: Sequence[Trip],
    query: Optional[str] = None,
    trip_status: Optional[str] = None,
) -> Dict:
    filtered = filter_collection(trips, query, {"trip_status": trip_status})
    return _list_view(trips, filtered)


def build_expense_list(
    expenses: Sequence[Expense],
    query: Optional[str] = None,
    expense_type: Optional[str] = None,
) -> Dict:
    filtered = filter_collection(expenses, query, {"expense_type": expense_type})
    return _list_view(
        expenses,
        filtered,
        summary=aggregation.summarize_expenses(filtered),
        expense_types=facet_values(expenses, "expense_type"),
    )


def build_maintenance_list(
    logs: Sequence[MaintenanceLog],
    query: Optional[str] = None,
    service_status: Optional[str] = None,
    maintenance_type: Optional[str] = None,
) -> Dict:
    filtered = filter_collection(
        logs, query, {"service_status": service_status, "maintenance_type": maintenance_type}
    )
    return _list_view(
        logs,
        filtered,
        summary=aggregation.summarize_maintenance(filtered),
        maintenance_types=facet_values(logs, "maintenance_type"),
    )


# Detail views

def build_vehicle_detail(
    vehicle: Optional[Vehicle],
    vehicle_id: str,
    trips: Sequence[Trip],
    maintenance_logs: Sequence[MaintenanceLog],
    expenses: Sequence[Expense],
) -> Dict:
    plate = vehicle.license_plate if vehicle is not None else None
    vehicle_trips = resolve_vehicle_trips(vehicle_id, trips)
    vehicle_logs = resolve_vehicle_maintenance(plate, maintenance_logs)
    return {
        "vehicle": _record(vehicle),
        "trips": _records(vehicle_trips),
        "active_trip": _record(find_active_trip(vehicle_trips)),
        "maintenance_logs": _records(vehicle_logs),
        "maintenance_cost": aggregation.maintenance_expenses(vehicle_logs),
        "expenses": _records(resolve_vehicle_expenses(plate, expenses)),
    }


async def load_vehicle_detail(store, vehicle_id: str) -> Optional[Dict]:
    """Vehicle with its trips (by id), maintenance and expenses (by plate).

    Returns None when the vehicle does not exist.
    """
    vehicle, (trips, logs, expenses) = await asyncio.gather(
        asyncio.to_thread(store.get_by_id, "vehicles", vehicle_id),
        fetch_collections(store, "trips", "maintenancelogs", "expenses"),
    )
    if vehicle is None:
        return None
    return build_vehicle_detail(vehicle, vehicle_id, trips, logs, expenses)


def build_driver_detail(driver: Optional[Driver], driver_id: str, trips: Sequence[Trip]) -> Dict:
    driver_trips = resolve_driver_trips(driver_id, trips)
    return {
        "driver": _record(driver),
        "trips": _records(driver_trips),
        "total_trips": len(driver_trips),
        "active_trip": _record(find_active_trip(driver_trips)),
    }


async def load_driver_detail(store, driver_id: str) -> Optional[Dict]:
    driver, (trips,) = await asyncio.gather(
        asyncio.to_thread(store.get_by_id, "drivers", driver_id),
        fetch_collections(store, "trips"),
    )
    if driver is None:
        return None
    return build_driver_detail(driver, driver_id, trips)


def build_trip_detail(trip: Trip, vehicles: Sequence[Vehicle], drivers: Sequence[Driver]) -> Dict:
    relations = resolve_trip_relations(trip, vehicles, drivers)
    return {
        "trip": _record(trip),
        "vehicle": _record(relations.vehicle),
        "driver": _record(relations.driver),
    }


async def load_trip_detail(store, trip_id: str) -> Optional[Dict]:
    trip, (vehicles, drivers) = await asyncio.gather(
        asyncio.to_thread(store.get_by_id, "trips", trip_id),
        fetch_collections(store, "vehicles", "drivers"),
    )
    if trip is None:
        return None
    return build_trip_detail(trip, vehicles, drivers)
