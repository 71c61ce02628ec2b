"""Tests for the Typer CLI."""

from __future__ import annotations

import json

import responses
from typer.testing import CliRunner

from neighborhood_globe import __version__
from neighborhood_globe.cli import app

AIRTABLE_URL = "https://api.airtable.com/v0/appTEST/Neighbors"

runner = CliRunner()


def _env() -> dict[str, str]:
    return {
        "NEIGHBORHOOD_AIRTABLE_API_KEY": "keyTEST",
        "NEIGHBORHOOD_AIRTABLE_BASE_ID": "appTEST",
    }


class TestCLI:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    @responses.activate
    def test_neighbors_table(self, airtable_pages):
        for page in airtable_pages:
            responses.add(responses.GET, AIRTABLE_URL, json=page, status=200)

        result = runner.invoke(app, ["neighbors", "--sort", "largest_checked"], env=_env())

        assert result.exit_code == 0
        assert "Ada Lovelace" in result.output
        assert "Grace Hopper" in result.output

    def test_neighbors_without_credentials_fails(self, monkeypatch):
        monkeypatch.delenv("NEIGHBORHOOD_AIRTABLE_API_KEY", raising=False)
        result = runner.invoke(app, ["neighbors"], env={"NEIGHBORHOOD_AIRTABLE_API_KEY": ""})
        assert result.exit_code == 1
        assert "Failed to load neighbors" in result.output

    @responses.activate
    def test_globe_writes_export(self, airtable_pages, airports_json_path, tmp_path):
        for page in airtable_pages:
            responses.add(responses.GET, AIRTABLE_URL, json=page, status=200)
        output = tmp_path / "globe.json"

        result = runner.invoke(
            app,
            ["globe", "-o", str(output), "--airports", str(airports_json_path)],
            env=_env(),
        )

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert len(data["markers"]) == 3
        assert "written to" in result.output

    def test_unknown_sort_is_usage_error(self):
        result = runner.invoke(app, ["neighbors", "--sort", "alphabetical"], env=_env())
        assert result.exit_code == 2
