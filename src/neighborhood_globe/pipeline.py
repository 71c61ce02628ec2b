"""Pipeline orchestrator: fetch roster -> fetch airports -> lay out markers."""

from __future__ import annotations

import logging

from requests import Session

from neighborhood_globe.config import NeighborhoodConfig
from neighborhood_globe.fetchers.airports import fetch_airports
from neighborhood_globe.fetchers.neighbors import fetch_neighbors
from neighborhood_globe.http import create_session
from neighborhood_globe.markers import build_markers
from neighborhood_globe.models import Airport, GlobeScene, Person

logger = logging.getLogger(__name__)


def load_neighbors(config: NeighborhoodConfig, session: Session | None = None) -> list[Person]:
    logger.info(
        "Fetching neighbors with >= %.1f logged hours from %s...",
        config.min_logged_hours,
        config.airtable_table,
    )
    return fetch_neighbors(
        api_key=config.airtable_api_key,
        base_id=config.airtable_base_id,
        table=config.airtable_table,
        min_logged_hours=config.min_logged_hours,
        timeout=config.request_timeout,
        session=session,
    )


def load_airports(config: NeighborhoodConfig, session: Session | None = None) -> list[Airport]:
    logger.info("Fetching airport reference table...")
    return fetch_airports(
        source=config.airports_source,
        timeout=config.request_timeout,
        session=session,
        use_cache=config.cache_enabled,
    )


def build_scene(config: NeighborhoodConfig) -> GlobeScene:
    """Fetch the roster and airport table and lay out the globe markers.

    Steps:
    1. Fetch neighbors from Airtable
    2. Fetch the airport reference table (cached)
    3. Group by airport, offset clusters, classify
    """
    with create_session(api_key=config.airtable_api_key) as session:
        neighbors = load_neighbors(config, session=session)
    if not neighbors:
        logger.warning("No neighbors found.")
        return GlobeScene()

    with create_session() as session:
        airports = load_airports(config, session=session)

    scene = build_markers(
        neighbors,
        airports,
        radius=config.marker_radius,
        spread=config.cluster_spread,
        base_size=config.base_marker_size,
    )
    logger.info(
        "Placed %d of %d neighbors (%d without airport, %d unmatched codes)",
        len(scene.markers),
        len(neighbors),
        scene.excluded_count,
        len(scene.unmatched_codes),
    )
    return scene
