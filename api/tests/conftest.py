"""
Shared pytest configuration for all tests.
Sets up the test environment and an in-memory entity store with a small fleet.
"""
import os
import sys
import tempfile
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load test environment variables before any imports
from dotenv import load_dotenv

# Load test-specific environment variables
test_env_path = Path(__file__).parent.parent / ".env.test"
if test_env_path.exists():
    load_dotenv(test_env_path, override=True)
else:
    # Fallback to hardcoded test values if .env.test doesn't exist
    os.environ["NEO4J_URI"] = "bolt://localhost:7688"
    os.environ["NEO4J_USER"] = "neo4j"
    os.environ["NEO4J_PASSWORD"] = "testpassword123"
    os.environ["API_KEY"] = "test-api-key"
    os.environ["LOG_FILE"] = str(Path(tempfile.gettempdir()) / "fleetops-test.log")

from repositories.entity_store import COLLECTIONS, StoreError, UnknownCollectionError


class InMemoryStore:
    """Entity store double holding wire-format records per collection."""

    def __init__(self, records=None, fail=False):
        self.records = {name: list((records or {}).get(name, [])) for name in COLLECTIONS}
        self.fail = fail
        self.created = []

    def _model(self, collection):
        if collection not in COLLECTIONS:
            raise UnknownCollectionError(f"Unknown collection: {collection}")
        if self.fail:
            raise StoreError(f"Failed to read {collection}: store unavailable")
        return COLLECTIONS[collection][1]

    def get_all(self, collection):
        model = self._model(collection)
        return {"items": [model.model_validate(r) for r in self.records[collection]]}

    def get_by_id(self, collection, entity_id):
        model = self._model(collection)
        for record in self.records[collection]:
            if record.get("_id") == entity_id:
                return model.model_validate(record)
        return None

    def exists(self, collection, entity_id):
        return self.get_by_id(collection, entity_id) is not None

    def create(self, collection, entity):
        self._model(collection)
        stored = entity.model_copy(update={"id": entity.id or f"new-{len(self.created) + 1}"})
        self.records[collection].append(stored.to_record())
        self.created.append(stored)
        return stored


@pytest.fixture
def fleet_records():
    """A small fleet with a dangling driver reference, an unassigned trip and
    records that use a lowercase copy of a real license plate."""
    return {
        "vehicles": [
            {"_id": "veh-1", "name": "Hauler 7", "model": "Volvo FH16", "licensePlate": "KA-01-AB-1234",
             "vehicleType": "Truck", "maxLoadCapacity": 18000, "odometerReading": 1000, "status": "On Trip"},
            {"_id": "veh-2", "name": "City Van", "model": "Ford Transit", "licensePlate": "KA-02-CD-5678",
             "vehicleType": "Van", "maxLoadCapacity": 1500, "odometerReading": 500, "status": "Available"},
            {"_id": "veh-3", "name": "Reefer 2", "model": "Tata Prima", "licensePlate": "MH-12-EF-9012",
             "vehicleType": "Truck", "status": "In Shop"},
        ],
        "drivers": [
            {"_id": "drv-1", "fullName": "Asha Rao", "email": "asha@fleet.example", "licenseNumber": "DL-001",
             "licenseStatus": "Valid", "dutyStatus": "On Duty", "safetyScore": 92, "tripCompletionRate": 98},
            {"_id": "drv-2", "fullName": "Vikram Singh", "email": "vikram@fleet.example", "licenseNumber": "DL-002",
             "licenseStatus": "Expiring Soon", "dutyStatus": "Off Duty", "licenseExpiryDate": "2026-11-30"},
        ],
        "trips": [
            {"_id": "trip-1", "tripName": "Steel Run", "assignedVehicleId": "veh-1", "assignedDriverId": "drv-1",
             "cargoWeightKg": 12000, "tripStatus": "Completed",
             "departureLocation": "Bengaluru", "destinationLocation": "Chennai"},
            {"_id": "trip-2", "tripName": "Grain Haul", "assignedVehicleId": "veh-1", "assignedDriverId": "drv-1",
             "cargoWeightKg": 8000, "tripStatus": "In Progress",
             "departureLocation": "Mysuru", "destinationLocation": "Hubli"},
            {"_id": "trip-3", "tripName": "Parcel Loop", "assignedVehicleId": "veh-2", "assignedDriverId": "drv-gone",
             "cargoWeightKg": 1000, "tripStatus": "Dispatched",
             "departureLocation": "Bengaluru", "destinationLocation": "Mysuru"},
            {"_id": "trip-4", "tripName": "Unassigned Pune Run", "tripStatus": "Scheduled",
             "departureLocation": "Chennai", "destinationLocation": "Pune"},
        ],
        "expenses": [
            {"_id": "exp-1", "expenseType": "Fuel", "amount": 100, "fuelQuantityLiters": 50,
             "vehicleLicensePlate": "KA-01-AB-1234", "description": "Diesel top-up", "date": "2026-09-01"},
            {"_id": "exp-2", "expenseType": "Maintenance", "amount": 50,
             "vehicleLicensePlate": "KA-02-CD-5678", "description": "Brake pads"},
            {"_id": "exp-3", "expenseType": "Toll", "amount": 25,
             "vehicleLicensePlate": "ka-01-ab-1234", "description": "Expressway toll"},
        ],
        "maintenancelogs": [
            {"_id": "mnt-1", "vehicleLicensePlate": "KA-01-AB-1234", "maintenanceType": "Oil Change",
             "serviceStatus": "Completed", "cost": 200, "mechanicName": "Ravi"},
            {"_id": "mnt-2", "vehicleLicensePlate": "MH-12-EF-9012", "maintenanceType": "Engine Repair",
             "serviceStatus": "In Progress", "cost": 800, "mechanicName": "Suresh"},
            {"_id": "mnt-3", "vehicleLicensePlate": "KA-01-AB-1234", "maintenanceType": "Tyre Rotation",
             "serviceStatus": "Scheduled", "cost": 150, "mechanicName": "Ravi"},
            {"_id": "mnt-4", "vehicleLicensePlate": "ka-01-ab-1234", "maintenanceType": "Inspection",
             "serviceStatus": "Pending", "description": "Annual fitness check"},
        ],
    }


@pytest.fixture
def fleet_store(fleet_records):
    return InMemoryStore(fleet_records)


@pytest.fixture
def failing_store():
    return InMemoryStore(fail=True)


@pytest.fixture
def fleet(fleet_store):
    """The sample fleet as validated models, keyed by collection."""
    return {name: fleet_store.get_all(name)["items"] for name in COLLECTIONS}
