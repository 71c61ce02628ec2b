"""Neighborhood roster: the sorted list of contributors."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from neighborhood_globe.config import SortType
from neighborhood_globe.models import Person

_SORT_KEYS: dict[str, tuple[Callable[[Person], float], bool]] = {
    "largest_logged": (lambda p: p.logged_hours or 0.0, True),
    "smallest_logged": (lambda p: p.logged_hours or 0.0, False),
    "largest_checked": (lambda p: p.checked_hours, True),
    "smallest_checked": (lambda p: p.checked_hours, False),
}


@dataclass(frozen=True)
class RosterEntry:
    """One row of the roster list."""

    id: str
    name: str
    href: str
    logged_hours: float
    checked_hours: float

    @property
    def summary(self) -> str:
        return f"{self.name} ({self.logged_hours:g}hr logged) ({self.checked_hours:.1f}hr checked)"


def filter_named(persons: Iterable[Person]) -> list[Person]:
    """Drop people with neither a full name nor a Slack name."""
    return [p for p in persons if p.full_name or p.slack_full_name]


def sort_persons(persons: Iterable[Person], sort: SortType = "largest_logged") -> list[Person]:
    """Stable sort by logged or checked hours."""
    try:
        key, reverse = _SORT_KEYS[sort]
    except KeyError:
        raise ValueError(f"Unknown sort type: {sort!r}") from None
    return sorted(persons, key=key, reverse=reverse)


def build_roster(persons: Iterable[Person], sort: SortType = "largest_logged") -> list[RosterEntry]:
    return [
        RosterEntry(
            id=p.id,
            name=p.display_name,
            href=p.profile_path,
            logged_hours=p.logged_hours or 0.0,
            checked_hours=p.checked_hours,
        )
        for p in sort_persons(filter_named(persons), sort)
    ]
