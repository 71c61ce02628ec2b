"""Shared fixtures for neighborhood_globe tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from neighborhood_globe.config import NeighborhoodConfig
from neighborhood_globe.markers import build_markers
from neighborhood_globe.models import Airport, GlobeScene, Person

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_cache(monkeypatch, tmp_path: Path) -> Path:
    """Keep every test away from the real ~/.cache directory."""
    cache_dir = tmp_path / "cache"
    monkeypatch.setattr("neighborhood_globe.cache._CACHE_DIR", cache_dir)
    return cache_dir


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def airports_json_path() -> Path:
    return FIXTURES_DIR / "airports_sample.json"


@pytest.fixture
def airports_csv_path() -> Path:
    return FIXTURES_DIR / "airports_sample.csv"


@pytest.fixture
def airtable_pages() -> list[dict]:
    return [
        json.loads((FIXTURES_DIR / "airtable_page1.json").read_text()),
        json.loads((FIXTURES_DIR / "airtable_page2.json").read_text()),
    ]


@pytest.fixture
def sample_airports() -> list[Airport]:
    """Pre-built Airport objects for unit tests."""
    return [
        Airport(
            key="KSFO",
            iata="SFO",
            icao="KSFO",
            latitude=37.619,
            longitude=-122.375,
            name="San Francisco International Airport",
            city="San Francisco",
            country="US",
        ),
        Airport(
            key="EGLL",
            iata="LHR",
            icao="EGLL",
            latitude=51.4706,
            longitude=-0.461941,
            name="London Heathrow Airport",
            city="London",
            country="GB",
        ),
        Airport(
            key="VIDP",
            iata="DEL",
            icao="VIDP",
            latitude="28.5665",
            longitude="77.103104",
            name="Indira Gandhi International Airport",
            city="New Delhi",
            country="IN",
        ),
    ]


@pytest.fixture
def sample_persons() -> list[Person]:
    """Pre-built Person objects for unit tests."""
    return [
        Person(id="rec001", full_name="Ada Lovelace", slack_id="U001",
               airport="sfo", logged_hours=150.0, checked_hours=120.0, approved=True),
        Person(id="rec002", slack_full_name="Grace Hopper", slack_id="U002",
               airport="SFO", logged_hours=120.0, checked_hours=80.0),
        Person(id="rec003", full_name="Alan Turing", slack_id="U003",
               airport="EGLL", logged_hours=12.0, checked_hours=3.3),
        Person(id="rec004", slack_id="U004", logged_hours=4.0),
        Person(id="rec005", full_name="Nobody Known", slack_id="U005",
               airport="xyz", logged_hours=30.0, checked_hours=1.0),
    ]


@pytest.fixture
def sample_scene(sample_persons, sample_airports) -> GlobeScene:
    return build_markers(sample_persons, sample_airports)


@pytest.fixture
def default_config(tmp_path: Path, airports_json_path: Path) -> NeighborhoodConfig:
    """Config with test credentials, local airports, writing to tmp_path."""
    return NeighborhoodConfig(
        airtable_api_key="keyTEST",
        airtable_base_id="appTEST",
        airports_source=str(airports_json_path),
        output_file=tmp_path / "output.json",
    )
