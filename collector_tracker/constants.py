"""Configuration constants for Collector Tracker.

All configurable parameters are centralized here for easy tuning.

Classes:
    AppConfig: UI application settings
    MapConfig: Default map view and viewport fit parameters
    TileConfig: Satellite and label tile sources
    StyleConfig: Status, client and waypoint colors
    MarkerConfig: Marker sizes and anchors
    RouteConfig: Route line styling
    ClickConfig: Pickable object types and tooltip styling
    CurrencyConfig: Rupee formatting thresholds
    ChartConfig: Chart rendering dimensions
    RosterConfig: Roster file and financial year defaults
"""

from pathlib import Path

# Package root directory (where collector_tracker/ lives)
PACKAGE_DIR = Path(__file__).parent

# Sample data shipped with the package
DATA_DIR = PACKAGE_DIR / "data"

COLLECTOR_STATUSES = ["active", "traveling", "offline", "idle"]
TASK_STATUSES = ["pending", "in-progress", "completed", "failed"]
WAYPOINT_ROLES = ["start", "stop", "client_visit", "current"]


class AppConfig:
    """UI application settings."""

    TITLE = "Collection Tracker"
    SUBTITLE = "Real-time field force monitoring"
    ICON = "📍"
    LAYOUT = "wide"


class MapConfig:
    """Default map view and viewport fit parameters."""

    # Initial center: Ahmedabad city center
    START_CENTER_LAT = 23.0225
    START_CENTER_LON = 72.5714
    DEFAULT_ZOOM = 12

    # Close zoom when centering on a selected collector
    SELECTED_ZOOM = 15
    # Fits never zoom in further than this (single point or tiny spread)
    MAX_FIT_ZOOM = 16
    MIN_ZOOM = 1

    # Symmetric pixel padding applied before a bounds fit
    FIT_PADDING_PX = 50
    ROUTE_FIT_PADDING_PX = 60

    # Nominal viewport size used for fit zoom calculation
    VIEWPORT_WIDTH_PX = 900
    VIEWPORT_HEIGHT_PX = 600

    # Camera animation
    TRANSITION_DURATION_MS = 1000

    # Web Mercator
    TILE_SIZE_PX = 256
    MAX_MERCATOR_LAT = 85.05112878


class TileConfig:
    """Externally sourced tile services for the base surface."""

    SATELLITE_TILES = "https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}"
    SATELLITE_ATTRIBUTION = "© Esri — Source: Esri, i-cubed, USDA, AEX, GeoEye, Getmapping"

    LABEL_TILES = [
        "https://a.basemaps.cartocdn.com/light_only_labels/{z}/{x}/{y}.png",
        "https://b.basemaps.cartocdn.com/light_only_labels/{z}/{x}/{y}.png",
        "https://c.basemaps.cartocdn.com/light_only_labels/{z}/{x}/{y}.png",
    ]
    LABEL_ATTRIBUTION = "© OpenStreetMap contributors © CARTO"
    LABEL_OPACITY = 0.7

    MAX_ZOOM = 19


class StyleConfig:
    """Visual colors and styling."""

    STATUS_COLORS = {
        "active": "#22c55e",  # green-500
        "traveling": "#f59e0b",  # amber-500
        "offline": "#ef4444",  # red-500
        "idle": "#6b7280",  # gray-500
    }
    assert set(STATUS_COLORS.keys()) == set(COLLECTOR_STATUSES)

    STATUS_EMOJIS = {
        "active": "🟢",
        "traveling": "🟠",
        "offline": "🔴",
        "idle": "⚪",
    }
    assert set(STATUS_EMOJIS.keys()) == set(COLLECTOR_STATUSES)

    DEFAULT_STATUS = "idle"

    CLIENT_COLOR = "#06b6d4"  # cyan-500

    WAYPOINT_COLORS = {
        "start": "#22c55e",  # green - where the day began
        "stop": "#06b6d4",  # cyan - plain stop
        "client_visit": "#f59e0b",  # amber - stop with a client visit
        "current": "#8b5cf6",  # violet - live endpoint
    }
    assert set(WAYPOINT_COLORS.keys()) == set(WAYPOINT_ROLES)

    WAYPOINT_LABELS = {
        "start": "Start",
        "stop": "Stop",
        "client_visit": "Client visit",
        "current": "Current location",
    }
    assert set(WAYPOINT_LABELS.keys()) == set(WAYPOINT_ROLES)

    MARKER_BORDER_COLOR = "#ffffff"


class MarkerConfig:
    """Marker sizes (pixels) and anchors ([x, y] offset from top-left)."""

    COLLECTOR_SIZE_PX = 40
    COLLECTOR_ANCHOR = (20, 40)
    COLLECTOR_POPUP_ANCHOR = (0, -40)
    COLLECTOR_BORDER_PX = 3

    # Pulsing halo drawn around active collectors
    PULSE_RADIUS_PX = 28
    PULSE_ALPHA = 90

    CLIENT_SIZE_PX = 32
    CLIENT_ANCHOR = (16, 32)
    CLIENT_POPUP_ANCHOR = (0, -32)
    CLIENT_CORNER_RADIUS_PX = 8

    WAYPOINT_SIZE_PX = 24
    WAYPOINT_ANCHOR = (12, 12)
    WAYPOINT_POPUP_ANCHOR = (0, -12)
    CURRENT_SIZE_PX = 30
    CURRENT_ANCHOR = (15, 15)


class RouteConfig:
    """Route history line styling (widths in pixels, opacity 0-255)."""

    LINE_COLOR = "#06b6d4"

    SHADOW_WIDTH_PX = 12
    SHADOW_ALPHA = 60

    LINE_WIDTH_PX = 5
    LINE_ALPHA = 230

    DIRECTION_COLOR = "#ffffff"
    DIRECTION_WIDTH_PX = 2
    DIRECTION_ALPHA = 220
    DIRECTION_DASH = (8, 6)  # dash, gap


class ClickConfig:
    """Pickable object types and tooltip styling."""

    TYPE_COLLECTOR = "collector"
    TYPE_CLIENT = "client"
    TYPE_WAYPOINT = "waypoint"

    PICKING_RADIUS_PX = 8

    TOOLTIP_STYLE = {
        "backgroundColor": "rgba(255, 255, 255, 0.97)",
        "color": "#111827",
        "padding": "8px 10px",
        "borderRadius": "6px",
        "fontSize": "12px",
    }


class CurrencyConfig:
    """Indian rupee formatting."""

    SYMBOL = "₹"
    LAKH = 100_000
    CRORE = 10_000_000
    LAKH_SUFFIX = "L"
    CRORE_SUFFIX = "Cr"
    COMPACT_DECIMALS = 2


class ChartConfig:
    """Chart rendering dimensions and settings."""

    MAP_HEIGHT = 600
    COLLECTION_CHART_HEIGHT = 320


class RosterConfig:
    """Roster source and financial year defaults."""

    SAMPLE_ROSTER_PATH = DATA_DIR / "sample_roster.json"
    DEFAULT_FINANCIAL_YEAR = "FY2024-25"
    STATUS_FILTERS = ["all"] + COLLECTOR_STATUSES
