import logging
from typing import Dict, Optional

from fastapi import APIRouter, Query

from repositories.entity_store import EntityStore, StoreError
from services.fleet_views import build_expense_list, fetch_collections


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/expenses", tags=["expenses"])
store = EntityStore()


@router.get("/", response_model=Dict)
async def list_expenses(
    q: Optional[str] = Query(None, description="Search license plate or description"),
    expense_type: str = Query("all", description="Expense type or 'all'")
):
    """List expenses with totals for the filtered records"""
    try:
        (expenses,) = await fetch_collections(store, "expenses")
    except StoreError as e:
        logger.error(f"Error loading expenses: {e}")
        expenses = []
    return build_expense_list(expenses, q, expense_type)
