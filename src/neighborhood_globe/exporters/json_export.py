"""JSON exporter for globe scenes."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from neighborhood_globe.models import GlobeScene, Marker


def marker_to_dict(marker: Marker) -> dict[str, Any]:
    return {
        "person_id": marker.person_id,
        "href": marker.href,
        "label": marker.label,
        "airport_code": marker.airport_code,
        "position": list(marker.position),
        "color": marker.color.value,
        "base_size": marker.base_size,
    }


def scene_to_dict(scene: GlobeScene) -> dict[str, Any]:
    return {
        "markers": [marker_to_dict(m) for m in scene.markers],
        "unmatched_codes": list(scene.unmatched_codes),
        "excluded_count": scene.excluded_count,
    }


def export_json(
    scene: GlobeScene,
    output_path: Path,
    indent: int = 2,
) -> Path:
    """Export a globe scene to a JSON file."""
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(scene_to_dict(scene), f, indent=indent, ensure_ascii=False)
    return output_path
