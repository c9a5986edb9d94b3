"""
Navigation State Machine

Two states:
- NoTripSelected:               NavigationState(trip=None)
- TripSelected(trip, tab):      NavigationState(trip={...}, active_tab=Tab.X)

Transitions are pure functions returning a new state. None of them look
at synchronizer state, so a slow or failed load never blocks navigation.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from core.errors import NavigationError
from integrations.sheet_store import TRIPS, EVENTS, EXPENSES, TODOS

logger = logging.getLogger(__name__)


class Tab(str, Enum):
    """Tabs shown inside a selected trip."""
    SCHEDULE = "schedule"
    BOOKINGS = "bookings"
    EXPENSE = "expense"
    PLANNING = "planning"


TAB_ORDER = (Tab.SCHEDULE, Tab.BOOKINGS, Tab.EXPENSE, Tab.PLANNING)

TAB_LABELS = {
    Tab.SCHEDULE: ("📅", "Schedule"),
    Tab.BOOKINGS: ("🎫", "Bookings"),
    Tab.EXPENSE: ("💳", "Expenses"),
    Tab.PLANNING: ("✅", "Checklist"),
}

# Bookings is a placeholder with nothing to load
TAB_RESOURCES = {
    Tab.SCHEDULE: EVENTS,
    Tab.BOOKINGS: None,
    Tab.EXPENSE: EXPENSES,
    Tab.PLANNING: TODOS,
}


@dataclass(frozen=True)
class NavigationState:
    """Which trip is open and which tab is showing."""
    trip: Optional[Dict[str, Any]] = field(default=None, compare=False)
    trip_id: Optional[str] = None
    active_tab: Tab = Tab.SCHEDULE

    @property
    def is_trip_selected(self) -> bool:
        return self.trip_id is not None


def select_trip(state: NavigationState, trip: Dict[str, Any]) -> NavigationState:
    """Open a trip. The tab always starts at schedule."""
    trip_id = trip.get("id")
    if trip_id in (None, ""):
        raise NavigationError("Cannot select a trip without an id")

    logger.info(f"Selected trip {trip_id}")
    return NavigationState(trip=dict(trip), trip_id=str(trip_id), active_tab=Tab.SCHEDULE)


def select_tab(state: NavigationState, tab) -> NavigationState:
    """Switch tab within the selected trip."""
    if not state.is_trip_selected:
        raise NavigationError("Cannot select a tab with no trip selected")
    try:
        tab = Tab(tab)
    except ValueError:
        raise NavigationError(f"Unknown tab: {tab}")

    return NavigationState(trip=state.trip, trip_id=state.trip_id, active_tab=tab)


def go_back(state: NavigationState) -> NavigationState:
    """Return to the trip list, dropping the tab choice."""
    if state.is_trip_selected:
        logger.info(f"Left trip {state.trip_id}")
    return NavigationState()


def live_resource(state: NavigationState) -> Optional[Tuple[str, Optional[str]]]:
    """
    The (resource, scope) whose synchronizer should be mounted.

    Returns None for the bookings placeholder.
    """
    if not state.is_trip_selected:
        return (TRIPS, None)

    resource = TAB_RESOURCES[state.active_tab]
    if resource is None:
        return None
    return (resource, state.trip_id)
