"""CSV exporter for globe scenes."""

from __future__ import annotations

import csv
from pathlib import Path

from neighborhood_globe.models import GlobeScene

FIELDNAMES = [
    "person_id",
    "name",
    "airport_code",
    "color",
    "base_size",
    "x",
    "y",
    "z",
    "href",
]


def export_csv(
    scene: GlobeScene,
    output_path: Path,
) -> Path:
    """Export the scene as a flat CSV with one row per marker."""
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()

        for marker in scene.markers:
            x, y, z = marker.position
            writer.writerow({
                "person_id": marker.person_id,
                "name": marker.label,
                "airport_code": marker.airport_code,
                "color": marker.color.value,
                "base_size": marker.base_size,
                "x": round(x, 6),
                "y": round(y, 6),
                "z": round(z, 6),
                "href": marker.href,
            })

    return output_path
