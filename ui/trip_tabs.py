"""
Trip Tabs

Everything shown once a trip is open:
- header with back navigation
- schedule (events sorted by time)
- bookings placeholder
- expenses with running total
- checklist (todos)
- tab bar
"""

import streamlit as st

from config import settings
from core.errors import InputCancelled, ValidationError
from core.navigation import NavigationState, Tab, TAB_LABELS, TAB_ORDER, go_back, select_tab
from core.state_manager import get_synchronizer, get_trip_service, navigate
from integrations.sheet_store import EVENTS, EXPENSES, TODOS
from services.input_capture import parse_event_input, parse_expense_input, parse_todo_input
from services.trip_data_service import sort_events, expense_total, format_amount, is_done
from ui.common import apply_write_result, render_loading


def render_trip_header(nav: NavigationState):
    trip = nav.trip or {}
    col1, col2 = st.columns([1, 4])
    with col1:
        if st.button("⬅️ Back", key="back_btn"):
            navigate(go_back)
            st.rerun()
    with col2:
        st.markdown(f"### {trip.get('coverEmoji', '')} {trip.get('title', '')}")
        st.caption(trip.get("startDate", ""))


def render_tab_bar(nav: NavigationState):
    """Bottom tab bar; the active tab is highlighted."""
    st.markdown("---")
    columns = st.columns(len(TAB_ORDER))
    for col, tab in zip(columns, TAB_ORDER):
        icon, label = TAB_LABELS[tab]
        with col:
            if st.button(
                f"{icon} {label}",
                key=f"tab_{tab.value}",
                type="primary" if tab == nav.active_tab else "secondary",
                use_container_width=True,
            ):
                navigate(select_tab, tab)
                st.rerun()


def _show_input_problem(e: Exception):
    if isinstance(e, InputCancelled):
        st.info("Nothing added")
    else:
        st.warning(str(e))


# =============================================================================
# SCHEDULE
# =============================================================================

def render_schedule_tab(nav: NavigationState):
    sync = get_synchronizer(EVENTS)
    sync.refresh(nav.trip_id)
    render_loading(sync)

    events = sort_events(sync.items)
    if not events and not sync.loading:
        st.caption("Add your first stop below")

    service = get_trip_service()
    for event in events:
        with st.container(border=True):
            col1, col2 = st.columns([5, 1])
            with col1:
                st.markdown(f"**{event.get('title', '')}**")
                st.caption(f"`{event.get('time', '')}` 📍 {event.get('location', '')}")
            with col2:
                if st.button("🗑️", key=f"del_event_{event.get('id')}", help="Delete this stop"):
                    result = service.delete_event(nav.trip_id, event.get("id"))
                    if result.ok:
                        sync.remove(event.get("id"))
                    apply_write_result(result)

    with st.form("add_event_form", clear_on_submit=True):
        title = st.text_input("Stop", placeholder="e.g. Fushimi Inari")
        col1, col2 = st.columns(2)
        with col1:
            time = st.text_input("Time (HH:MM)", value=settings.DEFAULT_EVENT_TIME)
        with col2:
            location = st.text_input("Location", placeholder=settings.DEFAULT_EVENT_LOCATION)
        submitted = st.form_submit_button("➕ Add stop", use_container_width=True)

    if submitted:
        try:
            data = parse_event_input(title, time, location)
        except (InputCancelled, ValidationError) as e:
            _show_input_problem(e)
            return
        apply_write_result(service.add_event(nav.trip_id, data), sync)


# =============================================================================
# BOOKINGS
# =============================================================================

def render_bookings_tab(nav: NavigationState):
    st.info("🎫 Bookings are coming soon")


# =============================================================================
# EXPENSES
# =============================================================================

def render_expense_tab(nav: NavigationState):
    sync = get_synchronizer(EXPENSES)
    sync.refresh(nav.trip_id)
    render_loading(sync)

    expenses = sync.items
    st.metric(f"Total spent ({settings.CURRENCY})", f"${format_amount(expense_total(expenses))}")

    for expense in expenses:
        col1, col2 = st.columns([4, 2])
        with col1:
            st.markdown(f"💳 **{expense.get('item', '')}**")
        with col2:
            st.markdown(f"`${format_amount(expense.get('amount'))}`")

    with st.form("add_expense_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            amount = st.text_input(f"Amount ({settings.CURRENCY})")
        with col2:
            item = st.text_input("Item", placeholder=settings.DEFAULT_EXPENSE_ITEM)
        submitted = st.form_submit_button("➕ Log expense", use_container_width=True)

    if submitted:
        try:
            data = parse_expense_input(amount, item)
        except (InputCancelled, ValidationError) as e:
            _show_input_problem(e)
            return
        apply_write_result(get_trip_service().add_expense(nav.trip_id, data), sync)


# =============================================================================
# CHECKLIST
# =============================================================================

def render_todo_tab(nav: NavigationState):
    sync = get_synchronizer(TODOS)
    sync.refresh(nav.trip_id)
    render_loading(sync)

    service = get_trip_service()
    for todo in sync.items:
        done = is_done(todo)
        label = f"✅ ~~{todo.get('text', '')}~~" if done else f"⬜ {todo.get('text', '')}"
        if st.button(label, key=f"todo_{todo.get('id')}", use_container_width=True):
            result = service.toggle_todo(nav.trip_id, todo)
            if result.ok:
                sync.patch(todo.get("id"), {"done": not done})
            apply_write_result(result)

    with st.form("add_todo_form", clear_on_submit=True):
        text = st.text_input("New item", placeholder="e.g. Buy JR pass")
        submitted = st.form_submit_button("➕ Add item", use_container_width=True)

    if submitted:
        try:
            data = parse_todo_input(text)
        except (InputCancelled, ValidationError) as e:
            _show_input_problem(e)
            return
        apply_write_result(service.add_todo(nav.trip_id, data), sync)


TAB_RENDERERS = {
    Tab.SCHEDULE: render_schedule_tab,
    Tab.BOOKINGS: render_bookings_tab,
    Tab.EXPENSE: render_expense_tab,
    Tab.PLANNING: render_todo_tab,
}
