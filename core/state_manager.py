"""
Session State Manager

Centralized management of all Streamlit session state for the Trip Planner.
This module is the single source of truth for session state initialization.

Usage:
    from core.state_manager import init_all_session_state, navigate, get_synchronizer

    # At app startup
    init_all_session_state()

    # Navigation
    navigate(select_trip, trip)

    # One synchronizer per resource, kept for the session
    sync = get_synchronizer("events")
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import streamlit as st

from config import settings
from core.invalidation import ReloadBus, get_reload_bus
from core.navigation import NavigationState, live_resource
from core.synchronizer import ResourceSynchronizer
from integrations.sheet_store import SheetStoreClient, get_sheet_store
from services.trip_data_service import TripDataService


# =============================================================================
# STATE KEYS - Centralized constants for session state access
# =============================================================================

class StateKeys:
    """
    Centralized session state key constants.

    Usage:
        from core.state_manager import StateKeys, get_state, set_state

        nav = get_state(StateKeys.NAVIGATION)
    """

    NAVIGATION = 'navigation'
    SYNCHRONIZERS = 'synchronizers'
    FLASH_MESSAGE = 'flash_message'


def get_state(key: str, default: Any = None) -> Any:
    """
    Get session state value with default.

    Args:
        key: State key (use StateKeys constants)
        default: Default value if key not found
    """
    return st.session_state.get(key, default)


def set_state(key: str, value: Any) -> None:
    """
    Set session state value.

    Args:
        key: State key (use StateKeys constants)
        value: Value to set
    """
    st.session_state[key] = value


# =============================================================================
# STATE DATACLASSES - Define structure and defaults
# =============================================================================

@dataclass
class AppState:
    """Per-session UI state."""
    navigation: NavigationState = field(default_factory=NavigationState)
    synchronizers: Dict[str, ResourceSynchronizer] = field(default_factory=dict)
    flash_message: Optional[tuple] = None  # (level, text) shown once after rerun


def _init_from_dataclass(defaults: Any) -> None:
    """Only sets values that don't already exist in session state."""
    for key, value in defaults.__dict__.items():
        if key not in st.session_state:
            st.session_state[key] = value


def init_all_session_state() -> None:
    """
    Initialize all session state variables.

    Call this once at app startup before any UI rendering.
    """
    _init_from_dataclass(AppState())


# =============================================================================
# SHARED RESOURCES
# =============================================================================

@st.cache_resource
def get_store() -> SheetStoreClient:
    """Sheet store client (cached for app lifecycle)."""
    return get_sheet_store()


@st.cache_resource
def get_read_executor() -> Optional[ThreadPoolExecutor]:
    """Worker pool for background reads, if enabled."""
    if not settings.BACKGROUND_READS:
        return None
    return ThreadPoolExecutor(max_workers=settings.READ_WORKERS)


def get_bus() -> ReloadBus:
    return get_reload_bus()


def get_trip_service() -> TripDataService:
    return TripDataService(get_store(), get_bus())


# =============================================================================
# NAVIGATION
# =============================================================================

def get_navigation() -> NavigationState:
    return get_state(StateKeys.NAVIGATION) or NavigationState()


def navigate(transition: Callable[..., NavigationState], *args) -> NavigationState:
    """Apply a navigation transition to the session's state."""
    new_state = transition(get_navigation(), *args)
    set_state(StateKeys.NAVIGATION, new_state)
    return new_state


# =============================================================================
# SYNCHRONIZERS
# =============================================================================

def get_synchronizer(resource: str) -> ResourceSynchronizer:
    """Get or create this session's synchronizer for a resource."""
    synchronizers = get_state(StateKeys.SYNCHRONIZERS)
    if synchronizers is None:
        synchronizers = {}
        set_state(StateKeys.SYNCHRONIZERS, synchronizers)

    if resource not in synchronizers:
        synchronizers[resource] = ResourceSynchronizer(
            resource,
            get_store(),
            bus=get_bus(),
            executor=get_read_executor(),
        )
    return synchronizers[resource]


def retain_synchronizers(resource: Optional[str]) -> None:
    """Drop every synchronizer except the one for the mounted view."""
    synchronizers = get_state(StateKeys.SYNCHRONIZERS) or {}
    set_state(
        StateKeys.SYNCHRONIZERS,
        {name: sync for name, sync in synchronizers.items() if name == resource},
    )


def release_unmounted_synchronizers() -> None:
    """Keep only the synchronizer of the view the navigation state shows."""
    live = live_resource(get_navigation())
    retain_synchronizers(live[0] if live else None)


def flash(level: str, text: str) -> None:
    """Queue a message to show after the next rerun."""
    set_state(StateKeys.FLASH_MESSAGE, (level, text))


def pop_flash() -> Optional[tuple]:
    message = get_state(StateKeys.FLASH_MESSAGE)
    set_state(StateKeys.FLASH_MESSAGE, None)
    return message
