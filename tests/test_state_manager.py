"""
Tests for the session wiring: navigation, synchronizer lifetime, flash
messages and write feedback.

Streamlit's session state is replaced by a plain dict, so no script run
is needed.

Run with:
    pytest tests/test_state_manager.py -v
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from core import state_manager
from core.errors import NavigationError
from core.navigation import Tab, go_back, select_tab, select_trip
from core.state_manager import (
    StateKeys,
    flash,
    get_navigation,
    get_synchronizer,
    init_all_session_state,
    navigate,
    pop_flash,
    release_unmounted_synchronizers,
    retain_synchronizers,
)
from integrations.sheet_store import EVENTS, TODOS, TRIPS, WriteResult
from services.input_capture import TodoInput
from ui import common


TRIP = {"id": "T1", "title": "Kyoto", "startDate": "2024-05-01"}


@pytest.fixture
def session(store, bus):
    """Dict-backed session state with the store and bus swapped for fakes."""
    fake_st = MagicMock()
    fake_st.session_state = {}
    with patch.object(state_manager, "st", fake_st), \
         patch.object(state_manager, "get_store", return_value=store), \
         patch.object(state_manager, "get_read_executor", return_value=None), \
         patch.object(state_manager, "get_bus", return_value=bus):
        init_all_session_state()
        yield fake_st.session_state


@pytest.fixture
def ui_st():
    with patch.object(common, "st") as mock_st:
        yield mock_st


def _event_reads(store):
    return [r for r in store.reads if r[0] == EVENTS]


# =============================================================================
# Session initialization and navigation
# =============================================================================

class TestSessionState:
    """init_all_session_state and navigate."""

    def test_init_sets_defaults_once(self, session):
        assert get_navigation().is_trip_selected is False
        assert session[StateKeys.SYNCHRONIZERS] == {}
        assert session[StateKeys.FLASH_MESSAGE] is None

        navigate(select_trip, TRIP)
        init_all_session_state()

        assert get_navigation().trip_id == "T1"

    def test_navigate_stores_new_state(self, session):
        state = navigate(select_trip, TRIP)

        assert session[StateKeys.NAVIGATION] is state
        assert state.active_tab == Tab.SCHEDULE

        navigate(select_tab, Tab.PLANNING)
        assert get_navigation().active_tab == Tab.PLANNING

        navigate(go_back)
        assert get_navigation().is_trip_selected is False

    def test_rejected_transition_leaves_state_untouched(self, session):
        with pytest.raises(NavigationError):
            navigate(select_tab, Tab.EXPENSE)

        assert get_navigation().is_trip_selected is False


# =============================================================================
# Synchronizer lifetime
# =============================================================================

class TestSynchronizerLifetime:
    """A synchronizer lives only while its view is mounted."""

    def test_get_synchronizer_reuses_instance(self, session, store, bus):
        sync = get_synchronizer(EVENTS)

        assert get_synchronizer(EVENTS) is sync
        assert sync.store is store
        assert sync.bus is bus
        assert sync.executor is None

    def test_retain_drops_other_resources(self, session):
        get_synchronizer(TRIPS)
        get_synchronizer(EVENTS)

        retain_synchronizers(EVENTS)

        assert list(session[StateKeys.SYNCHRONIZERS]) == [EVENTS]

    def test_bookings_tab_drops_events_and_return_rereads(self, session, store):
        """Schedule -> bookings -> schedule re-reads the events like a remount."""
        store.seed("events", {"id": "e1", "tripId": "T1", "createdAt": "2024-01-01"})

        navigate(select_trip, TRIP)
        release_unmounted_synchronizers()
        first = get_synchronizer(EVENTS)
        first.refresh("T1")
        assert len(_event_reads(store)) == 1

        navigate(select_tab, Tab.BOOKINGS)
        release_unmounted_synchronizers()
        assert session[StateKeys.SYNCHRONIZERS] == {}

        navigate(select_tab, Tab.SCHEDULE)
        release_unmounted_synchronizers()
        second = get_synchronizer(EVENTS)

        assert second is not first
        assert second.refresh("T1") is True
        assert len(_event_reads(store)) == 2
        assert [e["id"] for e in second.items] == ["e1"]

    def test_rerun_on_same_view_keeps_synchronizer(self, session, store):
        navigate(select_trip, TRIP)
        navigate(select_tab, Tab.PLANNING)
        release_unmounted_synchronizers()
        sync = get_synchronizer(TODOS)
        sync.refresh("T1")

        release_unmounted_synchronizers()

        assert get_synchronizer(TODOS) is sync
        assert sync.refresh("T1") is False
        assert store.reads == [(TODOS, "T1")]

    def test_trip_list_keeps_only_trips(self, session):
        navigate(select_trip, TRIP)
        get_synchronizer(EVENTS)
        navigate(go_back)

        release_unmounted_synchronizers()

        assert session[StateKeys.SYNCHRONIZERS] == {}
        get_synchronizer(TRIPS)
        release_unmounted_synchronizers()
        assert list(session[StateKeys.SYNCHRONIZERS]) == [TRIPS]


# =============================================================================
# Flash messages and write feedback
# =============================================================================

class TestFlashMessages:
    """flash / pop_flash show a message exactly once."""

    def test_pop_returns_message_once(self, session):
        flash("warning", "Sheet unreachable")

        assert pop_flash() == ("warning", "Sheet unreachable")
        assert pop_flash() is None

    def test_render_flash_shows_queued_warning(self, session, ui_st):
        flash("warning", "Sheet unreachable")

        common.render_flash()
        common.render_flash()

        ui_st.warning.assert_called_once_with("Sheet unreachable")


class TestApplyWriteResult:
    """apply_write_result merges, queues feedback and reruns."""

    def test_failed_write_queues_one_flash(self, session, ui_st):
        result = WriteResult(ok=False, action="add", resource=EVENTS, error="timeout")

        common.apply_write_result(result, get_synchronizer(EVENTS))

        message = pop_flash()
        assert message is not None and message[0] == "warning"
        assert pop_flash() is None
        ui_st.rerun.assert_called_once()

    def test_failed_service_write_queues_one_flash(self, session, store, ui_st):
        store.fail_writes = True
        navigate(select_trip, TRIP)
        service = state_manager.get_trip_service()

        common.apply_write_result(service.add_todo("T1", TodoInput(text="Passport")), get_synchronizer(TODOS))

        assert session[StateKeys.FLASH_MESSAGE][0] == "warning"
        ui_st.rerun.assert_called_once()

    def test_ok_write_merges_record_without_flash(self, session, bus, ui_st):
        navigate(select_trip, TRIP)
        sync = get_synchronizer(EVENTS)
        sync.refresh("T1")
        record = {"id": "e9", "tripId": "T1", "title": "Market", "createdAt": "2024-06-01"}

        common.apply_write_result(WriteResult(ok=True, action="add", resource=EVENTS, record=record), sync)

        assert pop_flash() is None
        assert [e["id"] for e in sync.items] == ["e9"]
        ui_st.rerun.assert_called_once()

    def test_merged_record_visible_after_rerun_with_lagging_sheet(self, session, bus, ui_st):
        """The rerun's reload reads a sheet that does not hold the record yet."""
        navigate(select_trip, TRIP)
        release_unmounted_synchronizers()
        sync = get_synchronizer(EVENTS)
        sync.refresh("T1")
        record = {"id": "e9", "tripId": "T1", "title": "Market", "createdAt": "2024-06-01"}

        common.apply_write_result(WriteResult(ok=True, action="add", resource=EVENTS, record=record), sync)
        bus.publish(EVENTS, "T1")

        release_unmounted_synchronizers()
        rerun_sync = get_synchronizer(EVENTS)
        assert rerun_sync is sync
        assert rerun_sync.refresh("T1") is True
        assert [e["id"] for e in rerun_sync.items] == ["e9"]
