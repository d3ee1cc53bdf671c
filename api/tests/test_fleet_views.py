"""
Unit tests for the view service.

Views are loaded from the in-memory store, so these tests cover the
concurrent fetch, the joins and the aggregates together.
"""

import asyncio
import pytest
import sys
from pathlib import Path
from unittest.mock import patch

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from repositories.entity_store import StoreError
from services import fleet_views


class TestFetchCollections:
    """Test suite for the concurrent fetch."""

    @pytest.mark.asyncio
    async def test_returns_items_in_requested_order(self, fleet_store):
        vehicles, trips = await fleet_views.fetch_collections(fleet_store, "vehicles", "trips")
        assert [v.id for v in vehicles] == ["veh-1", "veh-2", "veh-3"]
        assert len(trips) == 4

    @pytest.mark.asyncio
    async def test_reads_run_in_worker_threads(self, fleet_store):
        with patch("asyncio.to_thread", wraps=asyncio.to_thread) as mock_to_thread:
            await fleet_views.fetch_collections(fleet_store, "vehicles", "trips", "expenses")
            assert mock_to_thread.call_count == 3

    @pytest.mark.asyncio
    async def test_failure_propagates(self, failing_store):
        with pytest.raises(StoreError):
            await fleet_views.fetch_collections(failing_store, "vehicles", "trips")


class TestDashboardViews:
    """Test suite for dashboard and analytics views."""

    @pytest.mark.asyncio
    async def test_load_dashboard(self, fleet_store):
        view = await fleet_views.load_dashboard(fleet_store, recent_limit=3)
        assert view["kpis"]["active_trips"] == 2
        assert view["kpis"]["utilization_rate"] == "33.3"
        assert view["total_vehicles"] == 3
        assert view["total_trips"] == 4
        assert [t["_id"] for t in view["recent_trips"]] == ["trip-1", "trip-2", "trip-3"]
        assert view["fleet_status"][0] == {"status": "Available", "count": 1, "percentage": 33}

    @pytest.mark.asyncio
    async def test_load_analytics_matches_build(self, fleet_store, fleet):
        view = await fleet_views.load_analytics(fleet_store)
        expected = fleet_views.build_analytics(
            fleet["vehicles"], fleet["trips"], fleet["expenses"], fleet["maintenancelogs"]
        )
        assert view == expected

    def test_empty_dashboard(self):
        view = fleet_views.build_dashboard([], [], [])
        assert view["kpis"]["utilization_rate"] == "0"
        assert view["recent_trips"] == []
        assert all(entry["percentage"] == 0 for entry in view["fleet_status"])


class TestListViews:
    """Test suite for the five list views."""

    def test_vehicle_list(self, fleet):
        view = fleet_views.build_vehicle_list(fleet["vehicles"], "", "all", "Truck")
        assert [v["_id"] for v in view["items"]] == ["veh-1", "veh-3"]
        assert view["count"] == 2
        assert view["total"] == 3
        assert view["vehicle_types"] == ["Truck", "Van"]

    def test_vehicle_records_use_store_field_names(self, fleet):
        view = fleet_views.build_vehicle_list(fleet["vehicles"], "hauler")
        assert view["items"] == [{
            "_id": "veh-1",
            "name": "Hauler 7",
            "model": "Volvo FH16",
            "licensePlate": "KA-01-AB-1234",
            "vehicleType": "Truck",
            "maxLoadCapacity": 18000.0,
            "odometerReading": 1000.0,
            "status": "On Trip",
        }]

    def test_driver_list(self, fleet):
        view = fleet_views.build_driver_list(fleet["drivers"], "fleet.example", "Off Duty")
        assert [d["_id"] for d in view["items"]] == ["drv-2"]

    def test_trip_list(self, fleet):
        view = fleet_views.build_trip_list(fleet["trips"], "bengaluru", "all")
        assert [t["_id"] for t in view["items"]] == ["trip-1", "trip-3"]

    def test_expense_list_summary_follows_filter(self, fleet):
        view = fleet_views.build_expense_list(fleet["expenses"], None, "Fuel")
        assert view["count"] == 1
        assert view["summary"] == {"total_expenses": 100, "fuel_expenses": 100, "maintenance_expenses": 0}
        assert view["expense_types"] == ["Fuel", "Maintenance", "Toll"]

    def test_maintenance_list(self, fleet):
        view = fleet_views.build_maintenance_list(fleet["maintenancelogs"], "RAVI", "all", "all")
        assert [m["_id"] for m in view["items"]] == ["mnt-1", "mnt-3"]
        assert view["summary"] == {"total_cost": 350, "pending_count": 1, "completed_count": 1}
        assert view["maintenance_types"] == ["Oil Change", "Engine Repair", "Tyre Rotation", "Inspection"]

    def test_empty_list_view(self):
        view = fleet_views.build_expense_list([])
        assert view == {
            "items": [],
            "count": 0,
            "total": 0,
            "summary": {"total_expenses": 0, "fuel_expenses": 0, "maintenance_expenses": 0},
            "expense_types": [],
        }


class TestDetailViews:
    """Test suite for vehicle, driver and trip detail projections."""

    @pytest.mark.asyncio
    async def test_vehicle_detail(self, fleet_store):
        view = await fleet_views.load_vehicle_detail(fleet_store, "veh-1")
        assert view["vehicle"]["licensePlate"] == "KA-01-AB-1234"
        assert [t["_id"] for t in view["trips"]] == ["trip-1", "trip-2"]
        assert view["active_trip"]["_id"] == "trip-2"
        assert [m["_id"] for m in view["maintenance_logs"]] == ["mnt-1", "mnt-3"]
        assert view["maintenance_cost"] == 350
        assert [e["_id"] for e in view["expenses"]] == ["exp-1"]

    @pytest.mark.asyncio
    async def test_vehicle_detail_missing(self, fleet_store):
        assert await fleet_views.load_vehicle_detail(fleet_store, "veh-404") is None

    def test_vehicle_detail_without_vehicle_record(self, fleet):
        # Plate-joined lists stay empty until the vehicle itself is known
        view = fleet_views.build_vehicle_detail(
            None, "veh-1", fleet["trips"], fleet["maintenancelogs"], fleet["expenses"]
        )
        assert view["vehicle"] is None
        assert len(view["trips"]) == 2
        assert view["maintenance_logs"] == []
        assert view["expenses"] == []

    @pytest.mark.asyncio
    async def test_driver_detail(self, fleet_store):
        view = await fleet_views.load_driver_detail(fleet_store, "drv-1")
        assert view["driver"]["fullName"] == "Asha Rao"
        assert view["total_trips"] == 2
        assert view["active_trip"]["_id"] == "trip-2"

    @pytest.mark.asyncio
    async def test_driver_without_trips(self, fleet_store):
        view = await fleet_views.load_driver_detail(fleet_store, "drv-2")
        assert view["trips"] == []
        assert view["total_trips"] == 0
        assert view["active_trip"] is None

    @pytest.mark.asyncio
    async def test_trip_detail_with_dangling_driver(self, fleet_store):
        view = await fleet_views.load_trip_detail(fleet_store, "trip-3")
        assert view["trip"]["tripName"] == "Parcel Loop"
        assert view["vehicle"]["_id"] == "veh-2"
        assert view["driver"] is None

    @pytest.mark.asyncio
    async def test_trip_detail_unassigned(self, fleet_store):
        view = await fleet_views.load_trip_detail(fleet_store, "trip-4")
        assert view["vehicle"] is None
        assert view["driver"] is None

    @pytest.mark.asyncio
    async def test_detail_fetch_failure_propagates(self, failing_store):
        with pytest.raises(StoreError):
            await fleet_views.load_trip_detail(failing_store, "trip-1")
