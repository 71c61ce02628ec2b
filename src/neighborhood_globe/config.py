"""Configuration model for the neighborhood globe."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

OutputFormat = Literal["json", "geojson", "html", "csv"]
SortType = Literal["largest_logged", "smallest_logged", "largest_checked", "smallest_checked"]


class NeighborhoodConfig(BaseSettings):
    """All configurable parameters for the roster and globe.

    Values can be set via constructor arguments, environment variables
    prefixed with NEIGHBORHOOD_, or defaults.
    """

    model_config = {"env_prefix": "NEIGHBORHOOD_"}

    airtable_api_key: str = Field(default="", description="Airtable personal access token.")
    airtable_base_id: str = Field(default="", description="Airtable base holding the roster.")
    airtable_table: str = Field(default="Neighbors", description="Airtable table name.")
    min_logged_hours: float = Field(
        default=1.0, ge=0.0, description="Minimum Hackatime hours for a neighbor to be listed."
    )
    airports_source: str | None = Field(
        default=None,
        description="URL or local path of the airport reference table (JSON or CSV).",
    )
    request_timeout: int = Field(
        default=30, ge=5, le=300, description="HTTP request timeout in seconds."
    )
    marker_radius: float = Field(
        default=1.001, gt=0.0, description="Sphere radius markers are projected onto."
    )
    cluster_spread: float = Field(
        default=0.01, gt=0.0, lt=0.5, description="Offset radius for markers sharing an airport."
    )
    base_marker_size: float = Field(
        default=0.015, gt=0.0, description="Size of an approved (green) marker."
    )
    cache_enabled: bool = Field(
        default=True, description="Enable disk caching for the airport table."
    )
    output_file: Path = Field(
        default=Path("neighborhood_globe.json"), description="Output file path."
    )
    output_format: OutputFormat = Field(
        default="json", description="Output format: json, geojson, html, or csv."
    )
