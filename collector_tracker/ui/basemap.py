"""Satellite basemap with a semi-transparent label overlay.

The base surface is a Mapbox GL style dict rather than a TileLayer: pydeck's
TileLayer fetches tiles but cannot render them without a renderSubLayers
callback, which pydeck does not expose to Python. The style dict defines:
- sources: satellite imagery and road/place labels
- layers: imagery at full opacity, labels on top at TileConfig.LABEL_OPACITY

Both layers are created once when the map surface mounts and persist until it
is disposed. No API key required.
"""

import logging

from collector_tracker.constants import MapConfig, TileConfig

logger = logging.getLogger(__name__)

SATELLITE_SOURCE_ID = "satellite"
LABELS_SOURCE_ID = "labels"


def build_basemap_style() -> dict[str, object]:
    """Build a fresh style dict for one mounted map surface."""
    style: dict[str, object] = {
        "version": 8,
        "sources": {
            SATELLITE_SOURCE_ID: {
                "type": "raster",
                "tiles": [TileConfig.SATELLITE_TILES],
                "tileSize": MapConfig.TILE_SIZE_PX,
                "attribution": TileConfig.SATELLITE_ATTRIBUTION,
            },
            LABELS_SOURCE_ID: {
                "type": "raster",
                "tiles": list(TileConfig.LABEL_TILES),
                "tileSize": MapConfig.TILE_SIZE_PX,
                "attribution": TileConfig.LABEL_ATTRIBUTION,
            },
        },
        "layers": [
            {
                "id": SATELLITE_SOURCE_ID,
                "type": "raster",
                "source": SATELLITE_SOURCE_ID,
                "minzoom": 0,
                "maxzoom": TileConfig.MAX_ZOOM,
            },
            {
                "id": LABELS_SOURCE_ID,
                "type": "raster",
                "source": LABELS_SOURCE_ID,
                "minzoom": 0,
                "maxzoom": TileConfig.MAX_ZOOM,
                "paint": {"raster-opacity": TileConfig.LABEL_OPACITY},
            },
        ],
    }
    logger.debug("[MAP] Built satellite + labels basemap style")
    return style
