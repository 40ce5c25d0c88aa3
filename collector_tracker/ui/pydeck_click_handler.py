"""Deck rendering with click capture through streamlit-deckgl.

st.pydeck_chart only reports selections, so the tracker map is rendered with
st_deckgl, which hands back the picked record's properties on every click.
The component keeps returning its last event on every rerun; clicks are
therefore deduplicated per component key before they reach the dispatcher.
"""

import logging
from dataclasses import dataclass
from typing import Any

import pydeck as pdk
import streamlit as st
from streamlit_deckgl import st_deckgl  # type: ignore[import-untyped]

from collector_tracker.constants import ChartConfig

logger = logging.getLogger(__name__)

# Keys st_deckgl adds to every event on top of the picked record
_EVENT_KEYS = ("coordinate", "eventType")


@dataclass(frozen=True)
class MapClick:
    """One click on the tracker map.

    Attributes:
        picked: Layer record under the cursor ("type", "id", ...), None on bare map
        coordinate: [lon, lat] under the cursor
    """

    picked: dict[str, Any] | None = None
    coordinate: tuple[float, float] | None = None

    @property
    def is_empty(self) -> bool:
        return self.picked is None and self.coordinate is None

    @property
    def is_marker_click(self) -> bool:
        return self.picked is not None

    @property
    def picked_type(self) -> str | None:
        return self.picked.get("type") if self.picked else None

    def signature(self) -> str:
        """Stable identity used to drop repeated events for the same click."""
        parts = []
        if self.picked and self.picked.get("type") and self.picked.get("id"):
            parts.append(f"{self.picked['type']}:{self.picked['id']}")
        if self.coordinate is not None:
            parts.append(f"{self.coordinate[0]:.5f},{self.coordinate[1]:.5f}")
        return "@".join(parts)


NO_CLICK = MapClick()


def parse_deckgl_event(event: Any) -> MapClick:
    """Turn a raw st_deckgl event into a MapClick.

    st_deckgl spreads the picked record into the event itself:
        bare map: {"coordinate": [lon, lat], "eventType": "click"}
        marker:   {"type": "collector", "id": ..., "coordinate": [...], "eventType": "click"}
    """
    if not isinstance(event, dict) or not event:
        return NO_CLICK

    coord = event.get("coordinate")
    coordinate = None
    if isinstance(coord, (list, tuple)) and len(coord) >= 2:
        coordinate = (float(coord[0]), float(coord[1]))

    # Every pickable tracker record carries a "type"; "click" is the event's own type
    picked = None
    if event.get("type") and event["type"] != "click":
        picked = {k: v for k, v in event.items() if k not in _EVENT_KEYS}

    return MapClick(picked=picked, coordinate=coordinate)


def render_tracker_map(deck: pdk.Deck, key: str, height: int = ChartConfig.MAP_HEIGHT) -> MapClick:
    """Draw the deck and return the newest click, or NO_CLICK.

    Args:
        deck: Deck assembled by the map surface
        key: Component key (includes the map version)
        height: Map height in pixels
    """
    seen_key = f"_tracker_last_click_{key}"
    event = st_deckgl(deck, key=key, height=height, events=["click"])
    click = parse_deckgl_event(event)
    if click.is_empty:
        return NO_CLICK

    signature = click.signature()
    if signature == st.session_state.get(seen_key):
        return NO_CLICK

    st.session_state[seen_key] = signature
    logger.debug(f"[CLICK] {click.picked_type or 'map'} at {click.coordinate}")
    return click
