"""InteractionDispatcher - routes map clicks back to the host view.

Collector marker clicks are forwarded as a collector ID to the host's
selection callback. Whether clicking the already-selected collector
deselects it is the callback's decision, not the dispatcher's.

The dispatcher also owns the route history visibility toggle. It defaults to
visible and lives as long as one mounted map: a remounted map gets a fresh
dispatcher, so the toggle resets.
"""

import logging
from collections.abc import Callable
from typing import Any

from collector_tracker.constants import ClickConfig

logger = logging.getLogger(__name__)


class InteractionDispatcher:
    """Forwards collector clicks and holds the route history toggle.

    Attributes:
        on_select: Callback receiving the clicked collector ID
        show_route_history: Route history visibility, True by default
    """

    def __init__(self, on_select: Callable[[str], None]) -> None:
        self.on_select = on_select
        self.show_route_history = True

    def dispatch_click(self, clicked_object: dict[str, Any] | None) -> str | None:
        """Handle one picked deck.gl object.

        Args:
            clicked_object: Picked layer record (with "type" and "id"), or None

        Returns:
            The collector ID forwarded to on_select, or None if the click was
            not on a collector marker.
        """
        if clicked_object is None:
            return None

        obj_type = clicked_object.get("type")
        if obj_type != ClickConfig.TYPE_COLLECTOR:
            logger.debug(f"[CLICK] Ignoring click on {obj_type or 'unknown object'}")
            return None

        collector_id = clicked_object.get("id")
        if not collector_id:
            logger.warning(f"[CLICK] Collector click without id: {clicked_object}")
            return None

        logger.info(f"[CLICK] Collector marker {collector_id}")
        self.on_select(collector_id)
        return collector_id

    def set_route_history_visible(self, visible: bool) -> None:
        if visible != self.show_route_history:
            logger.info(f"[CLICK] Route history {'shown' if visible else 'hidden'}")
        self.show_route_history = visible

    def toggle_route_history(self) -> bool:
        """Flip route history visibility and return the new value."""
        self.set_route_history_visible(not self.show_route_history)
        return self.show_route_history
