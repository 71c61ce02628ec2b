"""Airtable roster fetcher."""

from __future__ import annotations

import logging
import math
from typing import Any

from requests import RequestException, Session

from neighborhood_globe.exceptions import NeighborsFetchError
from neighborhood_globe.http import create_session
from neighborhood_globe.models import Person

logger = logging.getLogger(__name__)

AIRTABLE_API_BASE = "https://api.airtable.com/v0"

NEIGHBOR_FIELDS = [
    "Pfp (from slackNeighbor)",
    "Slack ID (from slackNeighbor)",
    "Full Name (from slackNeighbor)",
    "githubUsername",
    "totalTimeCombinedHours",
    "totalTimeHackatimeHours",
    "totalTimeStopwatchHours",
    "totalCheckedTime",
    "Full Name",
    "airport",
    "approvedFlightStipend",
]

_MAX_PAGES = 100


def _first(value: Any) -> Any:
    """Unwrap Airtable lookup fields, which arrive as single-item lists."""
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _number(value: Any) -> float:
    value = _first(value)
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


def parse_neighbor(record: dict[str, Any]) -> Person:
    """Build a Person from one Airtable record."""
    fields = record.get("fields", {})
    pfp = _first(fields.get("Pfp (from slackNeighbor)"))
    airport = _first(fields.get("airport"))
    return Person(
        id=record["id"],
        full_name=fields.get("Full Name") or None,
        slack_id=_first(fields.get("Slack ID (from slackNeighbor)")) or None,
        slack_full_name=_first(fields.get("Full Name (from slackNeighbor)")) or None,
        github_username=fields.get("githubUsername") or None,
        pfp_url=pfp.get("url") if isinstance(pfp, dict) else None,
        airport=str(airport) if airport else None,
        logged_hours=_round_half_up(_number(fields.get("totalTimeHackatimeHours"))),
        logged_hours_combined=_number(fields.get("totalTimeCombinedHours")),
        stopwatch_hours=_number(fields.get("totalTimeStopwatchHours")),
        checked_hours=_number(fields.get("totalCheckedTime")),
        approved=bool(_first(fields.get("approvedFlightStipend"))),
    )


def to_api_record(person: Person) -> dict[str, Any]:
    """Serialize a Person in the camelCase shape the web pages consume."""
    return {
        "id": person.id,
        "pfp": person.pfp_url,
        "slackId": person.slack_id,
        "slackFullName": person.slack_full_name,
        "githubUsername": person.github_username,
        "totalTimeCombinedHours": person.logged_hours_combined,
        "totalTimeHackatimeHours": person.logged_hours,
        "totalTimeStopwatchHours": person.stopwatch_hours,
        "fullName": person.full_name,
        "totalCheckedTime": person.checked_hours,
        "airport": person.airport,
        "approvedFlightStipend": bool(person.approved),
    }


def fetch_neighbors(
    api_key: str,
    base_id: str,
    table: str = "Neighbors",
    min_logged_hours: float = 1.0,
    timeout: int = 30,
    base_url: str = AIRTABLE_API_BASE,
    session: Session | None = None,
) -> list[Person]:
    """Fetch every neighbor with at least *min_logged_hours* Hackatime hours.

    Results are sorted by Hackatime hours, largest first. Follows Airtable's
    ``offset`` pagination until the last page.

    Raises:
        NeighborsFetchError: credentials are missing or Airtable could not
            be read.
    """
    if not api_key or not base_id:
        raise NeighborsFetchError("Airtable API key and base ID are required")
    if session is None:
        session = create_session(api_key=api_key)

    url = f"{base_url}/{base_id}/{table}"
    params: dict[str, Any] = {
        "fields[]": NEIGHBOR_FIELDS,
        "filterByFormula": f"totalTimeHackatimeHours >= {min_logged_hours}",
        "sort[0][field]": "totalTimeHackatimeHours",
        "sort[0][direction]": "desc",
    }
    headers = {"Authorization": f"Bearer {api_key}"}

    persons: list[Person] = []
    offset: str | None = None
    for page in range(_MAX_PAGES):
        if offset is not None:
            params["offset"] = offset
        try:
            resp = session.get(url, params=params, headers=headers, timeout=timeout)
            resp.raise_for_status()
            data = resp.json()
        except (RequestException, ValueError) as exc:
            raise NeighborsFetchError(f"Error fetching neighbors: {exc}") from exc

        records = data.get("records", [])
        persons.extend(parse_neighbor(r) for r in records)
        logger.debug("Fetched page %d (%d records)", page + 1, len(records))

        offset = data.get("offset")
        if not offset:
            break
    else:
        logger.warning("Stopped paging %s after %d pages", table, _MAX_PAGES)

    logger.info("Retrieved %d neighbors", len(persons))
    return persons
