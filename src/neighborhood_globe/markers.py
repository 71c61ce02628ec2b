"""Marker classification and assembly of the globe scene."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from neighborhood_globe.geo import CLUSTER_SPREAD, MARKER_RADIUS, offset_positions, project
from neighborhood_globe.join import (
    AirportIndex,
    group_by_airport,
    normalize_code,
    resolve_coordinates,
)
from neighborhood_globe.models import (
    TIER_ONE_HOURS,
    Airport,
    GlobeScene,
    Marker,
    MarkerColor,
    MarkerStyle,
    Person,
)

logger = logging.getLogger(__name__)

BASE_MARKER_SIZE = 0.015

_SIZE_FACTORS: dict[MarkerColor, float] = {
    MarkerColor.GREEN: 1.0,
    MarkerColor.YELLOW: 0.7,
    MarkerColor.RED: 0.5,
}


def classify(person: Person, base_size: float = BASE_MARKER_SIZE) -> MarkerStyle:
    """Pick the marker colour and size for a person.

    Approved travellers are green, unapproved people at or past the
    100-hour tier are yellow, everyone else is red. Unset fields count as
    not meeting their threshold.
    """
    if person.approved:
        color = MarkerColor.GREEN
    elif person.logged_hours is not None and person.logged_hours >= TIER_ONE_HOURS:
        color = MarkerColor.YELLOW
    else:
        color = MarkerColor.RED
    return MarkerStyle(color=color, base_size=base_size * _SIZE_FACTORS[color])


def build_markers(
    persons: Iterable[Person],
    airports: AirportIndex | Iterable[Airport],
    *,
    radius: float = MARKER_RADIUS,
    spread: float = CLUSTER_SPREAD,
    base_size: float = BASE_MARKER_SIZE,
) -> GlobeScene:
    """Derive one marker per placeable person.

    Markers come out grouped by airport in order of first appearance, and
    in input order within a group.
    """
    persons = list(persons)
    excluded = sum(1 for p in persons if normalize_code(p.airport) is None)

    unmatched: list[str] = []
    groups = group_by_airport(persons, airports, unmatched=unmatched)

    markers: list[Marker] = []
    for code, group in groups.items():
        lat, lon = resolve_coordinates(group.airport)
        base = project(lat, lon, radius)
        positions = offset_positions(base, len(group.persons), spread)
        for person, position in zip(group.persons, positions, strict=True):
            style = classify(person, base_size)
            markers.append(
                Marker(
                    person_id=person.id,
                    href=person.profile_path,
                    label=person.display_name,
                    airport_code=code,
                    position=position,
                    color=style.color,
                    base_size=style.base_size,
                )
            )

    logger.debug(
        "Built %d markers over %d airports (%d without airport, %d unmatched codes)",
        len(markers),
        len(groups),
        excluded,
        len(unmatched),
    )
    return GlobeScene(markers=markers, unmatched_codes=unmatched, excluded_count=excluded)
