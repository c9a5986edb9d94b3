"""
Trip List View

Landing page: every trip in the sheet, newest first, plus a form to
create a new one. Selecting a trip opens it on the schedule tab.
"""

import streamlit as st
from datetime import date

from config import settings
from core.errors import InputCancelled, NavigationError, ValidationError
from core.navigation import select_trip
from core.state_manager import get_synchronizer, get_trip_service, navigate
from integrations.sheet_store import TRIPS
from services.input_capture import parse_trip_input
from ui.common import apply_write_result, render_loading


def render_trip_list():
    """Render the trip list and the create-trip form."""
    st.title(f"{settings.APP_TITLE} {settings.APP_ICON}")
    st.caption(settings.APP_SUBTITLE)

    sync = get_synchronizer(TRIPS)
    sync.refresh()

    trips = sync.items
    if sync.loading and not trips:
        render_loading(sync, "Loading trips...")
    elif not trips:
        st.info("No trips yet")
    else:
        for trip in trips:
            _render_trip_card(trip)

    st.markdown("---")
    _render_create_form(sync)


def _render_trip_card(trip: dict):
    with st.container(border=True):
        col1, col2 = st.columns([1, 4])
        with col1:
            st.markdown(f"## {trip.get('coverEmoji') or '🧳'}")
        with col2:
            if st.button(trip.get("title") or "Untitled trip", key=f"trip_{trip.get('id')}", use_container_width=True):
                try:
                    navigate(select_trip, trip)
                except NavigationError as e:
                    st.warning(str(e))
                    return
                st.rerun()
            st.caption(f"📅 {trip.get('startDate', '')}")


def _render_create_form(sync):
    with st.form("create_trip_form", clear_on_submit=True):
        st.markdown("### New trip")
        title = st.text_input("Trip name", placeholder="e.g. Tokyo New Year")
        start_date = st.date_input("Start date", value=date.today())
        submitted = st.form_submit_button("➕ Create trip", use_container_width=True)

    if not submitted:
        return

    try:
        data = parse_trip_input(title, start_date)
    except InputCancelled:
        st.warning("Please enter a trip name")
        return
    except ValidationError as e:
        st.warning(str(e))
        return

    apply_write_result(get_trip_service().create_trip(data), sync)
