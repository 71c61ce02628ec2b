"""Join the roster onto the airport reference table."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

from neighborhood_globe.exceptions import DataValidationError
from neighborhood_globe.models import Airport, AirportGroup, Coordinate, Person

logger = logging.getLogger(__name__)


def normalize_code(code: str | None) -> str | None:
    """Uppercase an airport code; blank codes become None."""
    if code is None:
        return None
    code = str(code).strip().upper()
    return code or None


class AirportIndex:
    """Lookup of airports by IATA or ICAO code.

    When two entries claim the same code the first one in table order wins.
    """

    def __init__(self, airports: Iterable[Airport]) -> None:
        self._by_code: dict[str, Airport] = {}
        self._size = 0
        for airport in airports:
            self._size += 1
            for code in (airport.iata, airport.icao):
                norm = normalize_code(code)
                if norm is not None:
                    self._by_code.setdefault(norm, airport)

    def __len__(self) -> int:
        return self._size

    def lookup(self, code: str | None) -> Airport | None:
        norm = normalize_code(code)
        if norm is None:
            return None
        return self._by_code.get(norm)


def _coerce_coordinate(value: Coordinate, axis: str, airport: Airport) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise DataValidationError(
            f"Airport {airport.key!r} has non-numeric {axis} {value!r}"
        ) from None
    if not math.isfinite(number):
        raise DataValidationError(f"Airport {airport.key!r} has non-finite {axis} {value!r}")
    return number


def has_coordinates(airport: Airport) -> bool:
    """True when both coordinates are present (they may still be malformed)."""
    return all(v is not None and v != "" for v in (airport.latitude, airport.longitude))


def resolve_coordinates(airport: Airport) -> tuple[float, float]:
    """Return (lat, lon) as floats, raising DataValidationError when malformed."""
    return (
        _coerce_coordinate(airport.latitude, "latitude", airport),
        _coerce_coordinate(airport.longitude, "longitude", airport),
    )


def bucket_by_code(persons: Iterable[Person]) -> dict[str, list[Person]]:
    """Group people by normalized airport code, preserving input order.

    People without an airport are left out.
    """
    buckets: dict[str, list[Person]] = {}
    for person in persons:
        code = normalize_code(person.airport)
        if code is None:
            continue
        buckets.setdefault(code, []).append(person)
    return buckets


def group_by_airport(
    persons: Iterable[Person],
    airports: AirportIndex | Iterable[Airport],
    unmatched: list[str] | None = None,
) -> dict[str, AirportGroup]:
    """Group people by the airport they fly from.

    Codes naming the same airport (``SFO`` and ``KSFO``) share one group,
    keyed by whichever spelling appeared first. Groups whose code matches
    no airport, or whose airport has no coordinates, are dropped with a
    warning; their codes are appended to *unmatched* when a list is passed.
    Malformed coordinates on a matched airport raise DataValidationError.
    """
    index = airports if isinstance(airports, AirportIndex) else AirportIndex(airports)
    persons = list(persons)

    matched: dict[str, Airport] = {}
    for code, members in bucket_by_code(persons).items():
        airport = index.lookup(code)
        if airport is None or not has_coordinates(airport):
            logger.warning(
                "No airport with coordinates for code %s; skipping %d neighbor(s)",
                code,
                len(members),
            )
            if unmatched is not None:
                unmatched.append(code)
            continue
        resolve_coordinates(airport)
        matched[code] = airport

    group_codes: dict[Airport, str] = {}
    members_by_code: dict[str, list[Person]] = {}
    for person in persons:
        code = normalize_code(person.airport)
        if code not in matched:
            continue
        group_code = group_codes.setdefault(matched[code], code)
        members_by_code.setdefault(group_code, []).append(person)

    return {
        code: AirportGroup(code=code, airport=matched[code], persons=tuple(members))
        for code, members in members_by_code.items()
    }
