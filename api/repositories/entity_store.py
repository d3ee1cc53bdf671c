import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Type

from neo4j.exceptions import Neo4jError, ServiceUnavailable
from pydantic import ValidationError

from database import BaseRepository
from models.base import StoreEntity
from models.driver import Driver
from models.expense import Expense
from models.maintenance_log import MaintenanceLog
from models.trip import Trip
from models.vehicle import Vehicle

logger = logging.getLogger(__name__)


# Collection name -> (node label, record model)
COLLECTIONS: Dict[str, tuple] = {
    "vehicles": ("Vehicle", Vehicle),
    "drivers": ("Driver", Driver),
    "trips": ("Trip", Trip),
    "expenses": ("Expense", Expense),
    "maintenancelogs": ("MaintenanceLog", MaintenanceLog),
}


class StoreError(Exception):
    """Raised when the Entity Store cannot serve a request."""


class UnknownCollectionError(StoreError):
    """Raised for a collection name outside COLLECTIONS."""


class EntityValidationError(StoreError):
    """Raised when a stored record does not fit its model.

    Out-of-vocabulary status values end up here, so the join and aggregation
    code never sees them. ``get_all`` skips such records; ``get_by_id``
    raises.
    """


class EntityStore(BaseRepository):
    """Generic CRUD repository over the five fleet collections.

    Each collection is a node label; node properties are the records' wire
    fields (``_id``, ``licensePlate``, ...). Records are returned in insertion
    order, validated into their models.
    """

    def _resolve(self, collection: str) -> tuple:
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise UnknownCollectionError(f"Unknown collection: {collection}")

    def _validate(self, collection: str, model: Type[StoreEntity], node: Dict) -> StoreEntity:
        try:
            return model.model_validate(node)
        except ValidationError as e:
            raise EntityValidationError(
                f"Invalid record {node.get('_id')} in {collection}: {e}"
            ) from e

    def _run(self, collection: str, query: str, parameters: dict = None, write: bool = False) -> list:
        try:
            if write:
                return self.execute_write(query, parameters)
            return self.execute_query(query, parameters)
        except (Neo4jError, ServiceUnavailable) as e:
            logger.error(f"Entity store query on {collection} failed: {e}")
            action = "write" if write else "read"
            raise StoreError(f"Failed to {action} {collection}: {e}") from e

    def ensure_constraints(self) -> None:
        """Create a uniqueness constraint on ``_id`` for every collection label"""
        for collection, (label, _) in COLLECTIONS.items():
            query = f"""
            CREATE CONSTRAINT {collection}_id_unique IF NOT EXISTS
            FOR (n:{label}) REQUIRE n._id IS UNIQUE
            """
            self._run(collection, query, write=True)
        logger.info(f"Ensured _id constraints for {len(COLLECTIONS)} collections")

    def get_all(self, collection: str) -> Dict[str, List[StoreEntity]]:
        """Fetch every record of a collection.

        Args:
            collection: One of the COLLECTIONS names

        Returns:
            dict: ``{"items": [...]}`` with validated records. Records that
            fail their model are logged and left out.

        Raises:
            UnknownCollectionError: If the collection is not known
            StoreError: If the query fails
        """
        label, model = self._resolve(collection)
        query = f"""
        MATCH (n:{label})
        RETURN n
        ORDER BY n._createdDate
        """
        result = self._run(collection, query)
        items = []
        for record in result:
            try:
                items.append(self._validate(collection, model, record['n']))
            except EntityValidationError as e:
                logger.warning(f"Skipping record: {e}")
        logger.debug(f"Fetched {len(items)} records from {collection}")
        return {"items": items}

    def get_by_id(self, collection: str, entity_id: str) -> Optional[StoreEntity]:
        """Fetch one record by its ``_id``, or None when absent."""
        label, model = self._resolve(collection)
        query = f"""
        MATCH (n:{label} {{_id: $id}})
        RETURN n
        """
        result = self._run(collection, query, {"id": entity_id})
        return self._validate(collection, model, result[0]['n']) if result else None

    def exists(self, collection: str, entity_id: str) -> bool:
        """Check if a record with this ``_id`` exists"""
        label, _ = self._resolve(collection)
        query = f"""
        MATCH (n:{label} {{_id: $id}})
        RETURN count(n) > 0 as exists
        """
        result = self._run(collection, query, {"id": entity_id})
        return result[0]['exists'] if result else False

    def create(self, collection: str, entity: StoreEntity) -> StoreEntity:
        """Create a record, assigning ``_id`` when the caller left it empty.

        The store owns the creation and update timestamps; any values sent by
        the caller are overwritten.
        """
        label, model = self._resolve(collection)
        if not isinstance(entity, model):
            raise StoreError(
                f"Cannot store {type(entity).__name__} in {collection}, expected {model.__name__}"
            )

        now = datetime.now(timezone.utc)
        stored = entity.model_copy(update={
            "id": entity.id or str(uuid.uuid4()),
            "created_date": now,
            "updated_date": now,
        })

        query = f"""
        CREATE (n:{label})
        SET n = $props
        RETURN n
        """
        result = self._run(collection, query, {"props": stored.to_record()}, write=True)
        if not result:
            raise StoreError(f"Failed to create record in {collection}")

        logger.info(f"Created {label} {stored.id}")
        return self._validate(collection, model, result[0]['n'])
