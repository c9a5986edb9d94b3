"""
Trip Data Service

Domain logic behind the four views:
- sorting schedule items by time
- totalling expenses
- reading the todo done flag
- issuing mutations and publishing reloads

Every mutation is one sheet write followed by a publish on the reload
bus. The publish happens even when the write fails: the signal means
"a mutation was attempted", and the reload shows the user what the
sheet actually holds.
"""

import logging
import math
import random
from typing import Any, Dict, List, Optional

from config import settings
from core.errors import MissingScopeError
from core.invalidation import ReloadBus
from integrations.sheet_store import (
    TRIPS,
    EVENTS,
    EXPENSES,
    TODOS,
    WriteResult,
    normalize_done,
)
from services.input_capture import TripInput, EventInput, ExpenseInput, TodoInput

logger = logging.getLogger(__name__)


# =============================================================================
# SORTING / AGGREGATION
# =============================================================================

def sort_events(events: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Schedule order: by time ascending, missing times first."""
    return sorted(events or [], key=lambda e: str(e.get("time") or ""))


def to_amount(value: Any) -> float:
    """Coerce a sheet cell to a number; anything unparseable counts as 0."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    text = str(value or "").strip().replace(",", "")
    if not text:
        return 0.0
    try:
        number = float(text)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def expense_total(expenses: List[Dict[str, Any]]) -> float:
    return sum(to_amount(e.get("amount")) for e in expenses or [])


def format_amount(value: Any) -> str:
    """1234.5 -> '1,234.5', 1500 -> '1,500'."""
    number = to_amount(value)
    if number.is_integer():
        return f"{int(number):,}"
    return f"{number:,.2f}".rstrip("0").rstrip(".")


def is_done(todo: Dict[str, Any]) -> bool:
    return normalize_done(todo.get("done"))


# =============================================================================
# MUTATIONS
# =============================================================================

class TripDataService:
    """
    Mutations for trips, events, expenses and todos.

    Args:
        store: SheetStoreClient (or anything with add/update/delete)
        bus: ReloadBus to publish on after each write
    """

    def __init__(self, store, bus: ReloadBus):
        self.store = store
        self.bus = bus

    def _commit(self, action: str, resource: str, payload: Dict[str, Any], scope: Optional[str]) -> WriteResult:
        result = self.store.write(action, resource, payload)
        if not result.ok:
            logger.error(f"{action} on {resource} was not confirmed: {result.error}")
        self.bus.publish(resource, scope)
        return result

    @staticmethod
    def _require_trip(trip_id: Optional[str]) -> str:
        if not trip_id:
            raise MissingScopeError("A trip must be selected first")
        return trip_id

    def create_trip(self, data: TripInput) -> WriteResult:
        payload = {
            "title": data.title,
            "startDate": data.start_date,
            "coverEmoji": random.choice(settings.COVER_EMOJIS),
        }
        return self._commit("add", TRIPS, payload, None)

    def add_event(self, trip_id: Optional[str], data: EventInput) -> WriteResult:
        trip_id = self._require_trip(trip_id)
        payload = {
            "tripId": trip_id,
            "title": data.title,
            "time": data.time,
            "type": settings.DEFAULT_EVENT_TYPE,
            "location": data.location,
        }
        return self._commit("add", EVENTS, payload, trip_id)

    def delete_event(self, trip_id: Optional[str], event_id: Any) -> WriteResult:
        trip_id = self._require_trip(trip_id)
        return self._commit("delete", EVENTS, {"id": event_id}, trip_id)

    def add_expense(self, trip_id: Optional[str], data: ExpenseInput) -> WriteResult:
        trip_id = self._require_trip(trip_id)
        payload = {
            "tripId": trip_id,
            "amount": data.amount,
            "item": data.item,
            "payer": settings.DEFAULT_PAYER,
        }
        return self._commit("add", EXPENSES, payload, trip_id)

    def add_todo(self, trip_id: Optional[str], data: TodoInput) -> WriteResult:
        trip_id = self._require_trip(trip_id)
        payload = {"tripId": trip_id, "text": data.text, "done": False}
        return self._commit("add", TODOS, payload, trip_id)

    def toggle_todo(self, trip_id: Optional[str], todo: Dict[str, Any]) -> WriteResult:
        trip_id = self._require_trip(trip_id)
        payload = {"id": todo.get("id"), "updates": {"done": not is_done(todo)}}
        return self._commit("update", TODOS, payload, trip_id)
