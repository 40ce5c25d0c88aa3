"""Popup markup for map objects.

Each function maps one data object to a small HTML fragment with a fixed
schema. The fragment is stored on the object's layer record under
"popup_html" and shown by the deck tooltip, so nothing here depends on
pydeck. All text from the roster is HTML-escaped.
"""

from datetime import datetime
from html import escape

from collector_tracker.constants import StyleConfig
from collector_tracker.core.formatting import (
    format_clock_time,
    format_duration_minutes,
    format_inr,
    format_relative_time,
)
from collector_tracker.core.route_reconstructor import Waypoint, WaypointRole
from collector_tracker.model.collector import Collector
from collector_tracker.model.task import Task

_MUTED = "color:#6b7280;font-size:11px"
_BOX = "margin-top:6px;padding:6px;background:#f3f4f6;border-radius:4px"


def _status_badge(status: str) -> str:
    color = StyleConfig.STATUS_COLORS.get(status, StyleConfig.STATUS_COLORS[StyleConfig.DEFAULT_STATUS])
    return (
        f"<span style='background:{color};color:#fff;padding:1px 6px;"
        f"border-radius:8px;font-size:11px'>{escape(status)}</span>"
    )


def _task_amounts(task: Task) -> str:
    return (
        f"<div style='display:flex;justify-content:space-between;gap:12px'>"
        f"<span>To collect: <b>{format_inr(task.amount_to_collect)}</b></span>"
        f"<span>Collected: <b style='color:#16a34a'>{format_inr(task.amount_collected)}</b></span>"
        f"</div>"
    )


def collector_popup(collector: Collector, now: datetime | None = None) -> str:
    """Name, status, address, current task and recency of the last update."""
    address = collector.current_location.address or "Unknown location"
    parts = [
        "<div style='min-width:200px'>",
        f"<div><b>{escape(collector.name)}</b> {_status_badge(collector.status_enum.value)}</div>",
        f"<div style='{_MUTED}'>📍 {escape(address)}</div>",
    ]
    task = collector.current_task
    if task is not None:
        parts.append(
            f"<div style='{_BOX}'>"
            f"<div style='{_MUTED}'>Current task</div>"
            f"<div><b>{escape(task.client.company_name)}</b></div>"
            f"<div>{format_inr(task.amount_to_collect)}</div>"
            f"</div>"
        )
    updated = format_relative_time(collector.current_location.timestamp, now=now)
    parts.append(f"<div style='{_MUTED};margin-top:4px'>Last update: {updated}</div>")
    parts.append("</div>")
    return "".join(parts)


def client_popup(task: Task) -> str:
    """Client identity and the task being collected there."""
    client = task.client
    return (
        f"<div style='min-width:200px'>"
        f"<div><b>{escape(client.company_name)}</b></div>"
        f"<div style='{_MUTED}'>{escape(client.name)}</div>"
        f"<div style='{_MUTED}'>📍 {escape(client.address)}</div>"
        f"<div style='{_BOX}'>"
        f"<div>{escape(task.description)}</div>"
        f"{_task_amounts(task)}"
        f"</div>"
        f"</div>"
    )


def waypoint_popup(waypoint: Waypoint, now: datetime | None = None) -> str:
    """Role-specific content: start point, numbered stop, or current location."""
    location = waypoint.location
    address = escape(location.address or "Unknown location")
    clock = format_clock_time(location.timestamp)

    if waypoint.role is WaypointRole.CURRENT:
        updated = format_relative_time(location.timestamp, now=now)
        return (
            f"<div style='min-width:180px'>"
            f"<div><b>{StyleConfig.WAYPOINT_LABELS['current']}</b></div>"
            f"<div style='{_MUTED}'>📍 {address}</div>"
            f"<div style='{_MUTED}'>Updated {updated}</div>"
            f"</div>"
        )

    if waypoint.role is WaypointRole.START:
        title = f"{StyleConfig.WAYPOINT_LABELS['start']} point"
    else:
        title = f"Stop {waypoint.index + 1}"

    parts = [
        "<div style='min-width:180px'>",
        f"<div><b>{title}</b> <span style='{_MUTED}'>{clock}</span></div>",
        f"<div style='{_MUTED}'>📍 {address}</div>",
    ]
    if waypoint.duration_minutes > 0:
        parts.append(f"<div>Stayed {format_duration_minutes(waypoint.duration_minutes)}</div>")
    if waypoint.client_visited is not None:
        parts.append(
            f"<div style='{_BOX}'>Visited <b>{escape(waypoint.client_visited.company_name)}</b></div>"
        )
    parts.append("</div>")
    return "".join(parts)
