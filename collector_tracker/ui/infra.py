"""Streamlit run-loop helpers shared by the panels.

The map version is part of the map component key. Bumping it remounts the
map: the old MapSurfaceController is disposed and a fresh one (with a fresh
InteractionDispatcher) is created on the next run.
"""

import logging

import streamlit as st

logger = logging.getLogger(__name__)

MAP_VERSION_KEY = "map_version"


def trigger_rerun(scope: str = "app") -> None:
    """Rerun the script after a selection or toggle change.

    Kept as one function so tests can patch it ('collector_tracker.ui.infra.trigger_rerun');
    st.rerun raises to stop the current run.
    """
    st.rerun(scope=scope)


def get_map_version() -> int:
    return st.session_state.get(MAP_VERSION_KEY, 0)


def bump_map_version() -> int:
    """Advance the map version so the next run mounts a new map. Returns the new version."""
    version = get_map_version() + 1
    st.session_state[MAP_VERSION_KEY] = version
    logger.info(f"[MAP] Remount requested, map version now {version}")
    return version


def reload_map() -> None:
    """Remount the map and rerun."""
    bump_map_version()
    trigger_rerun()
