"""
Trip Planner - Main Application

A mobile-first trip planner whose data lives in a Google Sheet.

Views:
1. Trip list (pick or create a trip)
2. Schedule, bookings, expenses and checklist tabs inside a trip

Run with: streamlit run app_tp.py
"""

import streamlit as st

from config import settings

# UI Setup (must be first Streamlit command)
st.set_page_config(
    page_title="Trip Planner",
    page_icon=settings.APP_ICON,
    layout=settings.PAGE_LAYOUT
)

from core.logger import configure_package_loggers, get_logger
from core.state_manager import get_navigation, init_all_session_state, release_unmounted_synchronizers
from ui.common import render_flash
from ui.trip_list import render_trip_list
from ui.trip_tabs import TAB_RENDERERS, render_tab_bar, render_trip_header

logger = get_logger("app")

configure_package_loggers()

_APP_STYLES = f"""
<style>
.stApp {{
    background-color: {settings.BACKGROUND_COLOR};
    color: {settings.TEXT_COLOR};
}}
div[data-testid="stFormSubmitButton"] button {{
    background-color: {settings.PRIMARY_COLOR} !important;
    border-color: {settings.PRIMARY_COLOR} !important;
    color: white !important;
}}
</style>
"""


def main():
    st.markdown(_APP_STYLES, unsafe_allow_html=True)
    init_all_session_state()

    nav = get_navigation()
    logger.debug(f"Render: tripId={nav.trip_id}, tab={nav.active_tab.value}")

    # Only the mounted view keeps its synchronizer
    release_unmounted_synchronizers()

    render_flash()

    if not nav.is_trip_selected:
        render_trip_list()
        return

    render_trip_header(nav)
    TAB_RENDERERS[nav.active_tab](nav)
    render_tab_bar(nav)


main()
