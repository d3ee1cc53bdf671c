"""
Filter/Search engine shared by every list view.

A filter pass combines a case-insensitive free-text query (matching if ANY of
the entity's search fields contains it) with categorical equality filters
(all of which must hold). The input is never mutated and output keeps the
input order; every call re-scans the whole collection.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar

from models.driver import Driver
from models.expense import Expense
from models.maintenance_log import MaintenanceLog
from models.trip import Trip
from models.vehicle import Vehicle

T = TypeVar("T")

# Filter value meaning "no constraint on this field"
ALL = "all"

SEARCH_FIELDS: Dict[type, Tuple[str, ...]] = {
    Vehicle: ("name", "model", "license_plate"),
    Driver: ("full_name", "email", "license_number"),
    Trip: ("trip_name", "departure_location", "destination_location"),
    Expense: ("vehicle_license_plate", "description"),
    MaintenanceLog: ("vehicle_license_plate", "description", "mechanic_name"),
}


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    return str(value)


def matches_query(item: Any, query: Optional[str], search_fields: Sequence[str]) -> bool:
    if not query:
        return True
    needle = query.lower()
    for field in search_fields:
        text = _text(getattr(item, field, None))
        if text is not None and needle in text.lower():
            return True
    return False


def matches_filters(item: Any, equality_filters: Optional[Mapping[str, Any]]) -> bool:
    if not equality_filters:
        return True
    for field, accepted in equality_filters.items():
        if accepted is None or accepted == ALL:
            continue
        if _text(getattr(item, field, None)) != _text(accepted):
            return False
    return True


def apply_filters(
    items: Sequence[T],
    query: Optional[str] = None,
    equality_filters: Optional[Mapping[str, Any]] = None,
    search_fields: Sequence[str] = (),
) -> List[T]:
    """Filter a collection by free-text query and equality filters.

    Args:
        items: Records to filter
        query: Substring to look for, case-insensitive. Empty matches all.
        equality_filters: Field name -> accepted value. ``"all"`` or None
            leaves the field unconstrained.
        search_fields: Attributes the query is matched against

    Returns:
        list: Matching records in their original order
    """
    return [
        item for item in items
        if matches_query(item, query, search_fields) and matches_filters(item, equality_filters)
    ]


def search_fields_for(items: Sequence[Any]) -> Tuple[str, ...]:
    """Look up the search fields registered for the collection's record type."""
    if not items:
        return ()
    for model, fields in SEARCH_FIELDS.items():
        if isinstance(items[0], model):
            return fields
    raise ValueError(f"No search fields registered for {type(items[0]).__name__}")


def filter_collection(
    items: Sequence[T],
    query: Optional[str] = None,
    filters: Optional[Mapping[str, Any]] = None,
) -> List[T]:
    """apply_filters with the search fields of the records' entity type."""
    return apply_filters(items, query, filters, search_fields_for(items))


def facet_values(items: Sequence[Any], field: str) -> List[str]:
    """Distinct non-empty values of ``field`` in first-seen order."""
    seen = {}
    for item in items:
        value = _text(getattr(item, field, None))
        if value:
            seen.setdefault(value, None)
    return list(seen)
