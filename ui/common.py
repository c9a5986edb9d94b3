"""
Shared UI helpers for the trip views.
"""

import streamlit as st
from typing import Optional

from core.state_manager import flash, pop_flash
from core.synchronizer import ResourceSynchronizer
from integrations.sheet_store import WriteResult


def apply_write_result(result: WriteResult, sync: Optional[ResourceSynchronizer] = None) -> None:
    """
    Merge an echoed record into the view and queue feedback, then rerun.

    The rerun picks up the bumped reload token, so the view re-reads the sheet.
    """
    if result.ok:
        if sync is not None and result.record:
            sync.merge(result.record)
    else:
        flash("warning", "Could not reach the sheet, your change may not have been saved.")
    st.rerun()


def render_flash() -> None:
    """Show the message queued before the last rerun, if any."""
    message = pop_flash()
    if not message:
        return
    level, text = message
    if level == "warning":
        st.warning(text)
    elif level == "error":
        st.error(text)
    else:
        st.toast(text)


def render_loading(sync: ResourceSynchronizer, label: str = "Syncing...") -> None:
    if sync.loading:
        st.caption(f"⏳ {label}")
