"""FastAPI wrapper serving the roster and the globe."""

from __future__ import annotations

import logging
import tempfile
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Any

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from requests import RequestException

from neighborhood_globe import __version__
from neighborhood_globe.config import NeighborhoodConfig, OutputFormat, SortType
from neighborhood_globe.exceptions import DataValidationError, NeighborsFetchError
from neighborhood_globe.exporters import export_csv, export_geojson, scene_to_dict
from neighborhood_globe.exporters.html_export import render_html
from neighborhood_globe.fetchers.neighbors import to_api_record
from neighborhood_globe.models import GlobeScene
from neighborhood_globe.pipeline import build_scene, load_neighbors
from neighborhood_globe.roster import build_roster

logger = logging.getLogger(__name__)

_CONTENT_TYPES: dict[str, str] = {
    "geojson": "application/geo+json",
    "csv": "text/csv; charset=utf-8",
}

_SUFFIX: dict[str, str] = {
    "geojson": ".geojson",
    "csv": ".csv",
}

_EXPORTERS: dict[str, Any] = {
    "geojson": export_geojson,
    "csv": export_csv,
}


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncGenerator[None, None]:
    """Store startup state for the /health endpoint."""
    application.state.start_time = datetime.now(tz=timezone.utc)
    application.state.last_fetch = None
    application.state.fetch_count = 0
    yield


app = FastAPI(
    title="Neighborhood Globe API",
    description="Neighborhood roster and airport globe backed by Airtable.",
    version=__version__,
    lifespan=lifespan,
)


def get_config() -> NeighborhoodConfig:
    """Per-request settings, read from NEIGHBORHOOD_* environment variables."""
    return NeighborhoodConfig()


ConfigDep = Annotated[NeighborhoodConfig, Depends(get_config)]


def _record_fetch() -> None:
    app.state.last_fetch = datetime.now(tz=timezone.utc)
    app.state.fetch_count += 1


def _export(scene: GlobeScene, fmt: OutputFormat) -> Response:
    """Serialize a scene into the requested format."""
    if fmt == "json":
        return JSONResponse(content=scene_to_dict(scene))
    if fmt == "html":
        return HTMLResponse(content=render_html(scene))

    exporter = _EXPORTERS[fmt]
    with tempfile.NamedTemporaryFile(suffix=_SUFFIX[fmt], delete=False) as tmp:
        tmp_path = Path(tmp.name)
    try:
        exporter(scene, tmp_path)
        content = tmp_path.read_text(encoding="utf-8")
    finally:
        tmp_path.unlink(missing_ok=True)

    return Response(content=content, media_type=_CONTENT_TYPES[fmt])


@app.get("/health")
def health() -> dict[str, Any]:
    """Server health check with uptime, version, and fetch count."""
    now = datetime.now(tz=timezone.utc)
    return {
        "status": "ok",
        "version": __version__,
        "uptime_seconds": round((now - app.state.start_time).total_seconds(), 1),
        "last_fetch": app.state.last_fetch.isoformat() if app.state.last_fetch else None,
        "fetch_count": app.state.fetch_count,
    }


@app.api_route("/api/getNeighborsSecurely", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
def get_neighbors_securely(request: Request, config: ConfigDep) -> JSONResponse:
    """Neighbors with at least one logged hour, most hours first."""
    if request.method != "GET":
        return JSONResponse(status_code=405, content={"message": "Method not allowed"})

    try:
        neighbors = load_neighbors(config)
    except NeighborsFetchError:
        logger.exception("Error fetching neighbors")
        return JSONResponse(status_code=500, content={"message": "Error fetching neighbors"})

    _record_fetch()
    return JSONResponse(content={"neighbors": [to_api_record(p) for p in neighbors]})


@app.get("/neighborhood")
def get_roster(
    config: ConfigDep,
    sort: Annotated[SortType, Query(description="Roster ordering.")] = "largest_logged",
) -> JSONResponse:
    """Named neighbors in the requested order."""
    try:
        neighbors = load_neighbors(config)
    except NeighborsFetchError:
        logger.exception("Error fetching neighbors")
        return JSONResponse(status_code=500, content={"message": "Failed to load neighbors"})

    _record_fetch()
    entries = build_roster(neighbors, sort)
    return JSONResponse(content={"sort": sort, "neighbors": [asdict(e) for e in entries]})


@app.get("/neighborhood/globe")
def get_globe(
    config: ConfigDep,
    format: Annotated[OutputFormat, Query(description="Output format.")] = "json",
) -> Response:
    """Lay out the globe markers and return them in the requested format."""
    try:
        scene = build_scene(config)
    except NeighborsFetchError:
        logger.exception("Error fetching neighbors")
        return JSONResponse(status_code=500, content={"message": "Error fetching neighbors"})
    except DataValidationError as exc:
        logger.error("Airport reference data rejected: %s", exc)
        return JSONResponse(status_code=502, content={"detail": f"Invalid airport data: {exc}"})
    except RequestException as exc:
        logger.exception("Airport table fetch failed")
        return JSONResponse(status_code=502, content={"detail": f"Upstream error: {exc}"})
    except Exception as exc:
        logger.exception("Globe pipeline failed")
        return JSONResponse(status_code=502, content={"detail": f"Upstream pipeline error: {exc}"})

    _record_fetch()
    return _export(scene, format)
