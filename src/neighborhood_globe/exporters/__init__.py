"""Exporters for globe scenes."""

from neighborhood_globe.exporters.csv_export import export_csv
from neighborhood_globe.exporters.geojson_export import export_geojson
from neighborhood_globe.exporters.html_export import export_html
from neighborhood_globe.exporters.json_export import export_json, scene_to_dict

__all__ = ["export_csv", "export_geojson", "export_html", "export_json", "scene_to_dict"]
