"""Airport reference table fetcher.

Two layouts are understood:

* a JSON object mapping a record key to ``{iata, icao, lat, lon, ...}``
  (the layout of the mwgg/Airports dataset, and of ``airports.json``);
* an OurAirports-style CSV with ``ident``, ``iata_code``, ``gps_code``,
  ``latitude_deg`` and ``longitude_deg`` columns.
"""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path
from typing import Any

import pandas as pd
from requests import Session

from neighborhood_globe.cache import AIRPORTS_TTL, cache_get, cache_key, cache_put
from neighborhood_globe.http import create_session
from neighborhood_globe.models import Airport

logger = logging.getLogger(__name__)

AIRPORTS_JSON_URL = "https://raw.githubusercontent.com/mwgg/Airports/master/airports.json"


def _is_csv(source: str) -> bool:
    return Path(source.split("?", 1)[0]).suffix.lower() == ".csv"


def _read_source(source: str, session: Session, timeout: int, use_cache: bool) -> bytes:
    """Download via session (retry-enabled) or read a local path.

    For HTTP URLs, checks the disk cache first (24h TTL).
    """
    if source.startswith(("http://", "https://")):
        key = cache_key(source)
        if use_cache:
            cached = cache_get(key, AIRPORTS_TTL)
            if cached is not None:
                logger.info("Using cached airports data")
                return cached

        resp = session.get(source, timeout=timeout)
        resp.raise_for_status()

        if use_cache:
            cache_put(key, resp.content, source=source)
        return resp.content

    return Path(source).read_bytes()


def _text(value: Any) -> str | None:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    value = str(value).strip()
    return value or None


def parse_airports_json(data: dict[str, Any]) -> list[Airport]:
    """Build Airport records from a key -> record mapping."""
    airports: list[Airport] = []
    for key, rec in data.items():
        if not isinstance(rec, dict):
            logger.warning("Skipping airport entry %s: not an object", key)
            continue
        airports.append(
            Airport(
                key=str(key),
                iata=_text(rec.get("iata")),
                icao=_text(rec.get("icao")),
                latitude=rec.get("lat"),
                longitude=rec.get("lon"),
                name=rec.get("name") or "",
                city=rec.get("city") or "",
                country=rec.get("country") or "",
            )
        )
    return airports


def parse_airports_csv(df: pd.DataFrame) -> list[Airport]:
    """Build Airport records from an OurAirports-style frame."""
    icao_col = "icao_code" if "icao_code" in df.columns else "gps_code"
    df = df.astype(object).where(pd.notna(df), None)

    airports: list[Airport] = []
    for _, row in df.iterrows():
        airports.append(
            Airport(
                key=str(row["ident"]),
                iata=_text(row.get("iata_code")),
                icao=_text(row.get(icao_col)) or _text(row["ident"]),
                latitude=row.get("latitude_deg"),
                longitude=row.get("longitude_deg"),
                name=_text(row.get("name")) or "",
                city=_text(row.get("municipality")) or "",
                country=_text(row.get("iso_country")) or "",
            )
        )
    return airports


def fetch_airports(
    source: str | None = None,
    timeout: int = 60,
    session: Session | None = None,
    use_cache: bool = True,
) -> list[Airport]:
    """Load the airport reference table from a URL or local path."""
    if source is None:
        source = AIRPORTS_JSON_URL
    if session is None:
        session = create_session()

    raw = _read_source(source, session, timeout, use_cache)
    if _is_csv(source):
        # "NA" is a real IATA code; only empty cells are missing
        df = pd.read_csv(io.BytesIO(raw), keep_default_na=False, na_values=[""])
        airports = parse_airports_csv(df)
    else:
        airports = parse_airports_json(json.loads(raw))

    logger.info("Loaded %d airports", len(airports))
    return airports
