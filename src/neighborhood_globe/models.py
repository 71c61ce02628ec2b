"""Data models for the neighborhood roster and globe."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

Vec3 = tuple[float, float, float]
Coordinate = float | int | str | None

TIER_ONE_HOURS = 100.0


class MarkerColor(str, Enum):
    """Marker colours, valued as the CSS colour the globe page draws."""

    GREEN = "#00ff00"
    YELLOW = "#ffff00"
    RED = "red"


@dataclass(frozen=True)
class Person:
    """A neighbor as returned by the Airtable roster."""

    id: str
    full_name: str | None = None
    slack_id: str | None = None
    slack_full_name: str | None = None
    github_username: str | None = None
    pfp_url: str | None = None
    airport: str | None = None
    logged_hours: float | None = 0.0
    logged_hours_combined: float = 0.0
    stopwatch_hours: float = 0.0
    checked_hours: float = 0.0
    approved: bool | None = False

    @property
    def display_name(self) -> str:
        return self.full_name or self.slack_full_name or self.slack_id or "unnamed"

    @property
    def profile_path(self) -> str:
        """Path of the neighbor's profile page, keyed by Slack ID when known."""
        return f"/neighborhood/{self.slack_id or self.id}"

    @property
    def is_tier_one(self) -> bool:
        return self.logged_hours is not None and self.logged_hours >= TIER_ONE_HOURS


@dataclass(frozen=True)
class Airport:
    """An entry of the airport reference table.

    Coordinates are kept as delivered; they are validated when people are
    joined onto the table.
    """

    key: str
    iata: str | None
    icao: str | None
    latitude: Coordinate
    longitude: Coordinate
    name: str = ""
    city: str = ""
    country: str = ""


@dataclass(frozen=True)
class AirportGroup:
    """People sharing one normalized airport code."""

    code: str
    airport: Airport
    persons: tuple[Person, ...] = ()


@dataclass(frozen=True)
class MarkerStyle:
    color: MarkerColor
    base_size: float


@dataclass(frozen=True)
class Marker:
    """Render entity for one person on the globe."""

    person_id: str
    href: str
    label: str
    airport_code: str
    position: Vec3
    color: MarkerColor
    base_size: float
    scale: float = 1.0

    @property
    def size(self) -> float:
        return self.base_size * self.scale


@dataclass
class GlobeScene:
    """Outcome of one layout pass over the roster and airport table."""

    markers: list[Marker] = field(default_factory=list)
    unmatched_codes: list[str] = field(default_factory=list)
    excluded_count: int = 0
