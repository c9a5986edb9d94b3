"""
Tests for the navigation state machine.

Run with:
    pytest tests/test_navigation.py -v
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.errors import NavigationError
from core.navigation import (
    NavigationState,
    Tab,
    TAB_ORDER,
    TAB_RESOURCES,
    go_back,
    live_resource,
    select_tab,
    select_trip,
)

TRIP = {"id": "T1", "title": "Kyoto", "startDate": "2024-04-01", "coverEmoji": "🇯🇵"}


class TestTransitions:
    """Tests for core/navigation.py"""

    def test_initial_state_has_no_trip(self):
        state = NavigationState()
        assert state.is_trip_selected is False
        assert state.trip_id is None

    def test_select_trip_starts_on_schedule(self):
        state = select_trip(NavigationState(), TRIP)
        assert state.is_trip_selected
        assert state.trip_id == "T1"
        assert state.active_tab == Tab.SCHEDULE
        assert state.trip["title"] == "Kyoto"

    def test_numeric_trip_id_is_kept_as_string(self):
        state = select_trip(NavigationState(), {"id": 7, "title": "Seoul"})
        assert state.trip_id == "7"

    def test_trip_without_id_is_rejected(self):
        with pytest.raises(NavigationError):
            select_trip(NavigationState(), {"title": "No id"})

    @pytest.mark.parametrize("tab", list(TAB_ORDER))
    def test_every_tab_is_reachable(self, tab):
        state = select_tab(select_trip(NavigationState(), TRIP), tab)
        assert state.active_tab == tab
        assert state.trip_id == "T1"

    def test_tab_accepts_plain_string(self):
        state = select_tab(select_trip(NavigationState(), TRIP), "expense")
        assert state.active_tab is Tab.EXPENSE

    def test_unknown_tab_is_rejected(self):
        with pytest.raises(NavigationError):
            select_tab(select_trip(NavigationState(), TRIP), "settings")

    def test_tab_without_trip_is_rejected(self):
        with pytest.raises(NavigationError):
            select_tab(NavigationState(), Tab.EXPENSE)

    def test_back_returns_to_trip_list(self):
        state = go_back(select_trip(NavigationState(), TRIP))
        assert state == NavigationState()

    def test_back_is_harmless_without_trip(self):
        assert go_back(NavigationState()) == NavigationState()

    def test_reentering_trip_resets_tab(self):
        state = select_tab(select_trip(NavigationState(), TRIP), Tab.EXPENSE)
        state = select_trip(go_back(state), TRIP)
        assert state.active_tab == Tab.SCHEDULE

    def test_transitions_do_not_mutate(self):
        start = select_trip(NavigationState(), TRIP)
        select_tab(start, Tab.PLANNING)
        assert start.active_tab == Tab.SCHEDULE


class TestLiveResource:
    """Which synchronizer should be mounted for a state."""

    def test_trip_list(self):
        assert live_resource(NavigationState()) == ("trips", None)

    @pytest.mark.parametrize("tab,resource", [
        (Tab.SCHEDULE, "events"),
        (Tab.EXPENSE, "expenses"),
        (Tab.PLANNING, "todos"),
    ])
    def test_scoped_tabs(self, tab, resource):
        state = select_tab(select_trip(NavigationState(), TRIP), tab)
        assert live_resource(state) == (resource, "T1")

    def test_bookings_has_nothing_to_load(self):
        state = select_tab(select_trip(NavigationState(), TRIP), Tab.BOOKINGS)
        assert TAB_RESOURCES[Tab.BOOKINGS] is None
        assert live_resource(state) is None
