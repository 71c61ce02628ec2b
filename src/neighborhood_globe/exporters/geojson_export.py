"""GeoJSON exporter for globe scenes."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from neighborhood_globe.geo import unproject
from neighborhood_globe.models import GlobeScene, Marker


def _make_marker_feature(marker: Marker) -> dict[str, Any]:
    """Create a GeoJSON Feature at the marker's (offset) location."""
    lat, lon = unproject(marker.position)
    return {
        "type": "Feature",
        "geometry": {
            "type": "Point",
            "coordinates": [round(lon, 6), round(lat, 6)],
        },
        "properties": {
            "person_id": marker.person_id,
            "name": marker.label,
            "href": marker.href,
            "airport_code": marker.airport_code,
            "color": marker.color.value,
            "base_size": marker.base_size,
        },
    }


def export_geojson(
    scene: GlobeScene,
    output_path: Path,
) -> Path:
    """Export markers as a GeoJSON FeatureCollection of Points.

    GeoJSON coordinates are [longitude, latitude] per RFC 7946.
    """
    geojson = {
        "type": "FeatureCollection",
        "metadata": {
            "generated": datetime.now(tz=timezone.utc).isoformat(),
            "source": "neighborhood-globe",
            "marker_count": len(scene.markers),
            "airport_count": len({m.airport_code for m in scene.markers}),
            "unmatched_codes": list(scene.unmatched_codes),
        },
        "features": [_make_marker_feature(m) for m in scene.markers],
    }

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(geojson, f, indent=2, ensure_ascii=False)

    return output_path
