"""Tests for the globe view state container."""

from __future__ import annotations

import pytest

from neighborhood_globe.animation import FrameLoop
from neighborhood_globe.exceptions import DataValidationError
from neighborhood_globe.models import Airport, Person
from neighborhood_globe.view import GlobeView


class TestGlobeView:
    def test_no_markers_until_both_snapshots_arrive(self, sample_persons, sample_airports):
        view = GlobeView()
        view.set_persons(sample_persons)
        assert view.markers == []
        view.set_airports(sample_airports)
        assert len(view.markers) == 3

    def test_rebuilds_from_scratch_on_new_roster(self, sample_persons, sample_airports):
        view = GlobeView()
        view.set_airports(sample_airports)
        view.set_persons(sample_persons)
        view.set_persons([Person(id="solo", airport="DEL")])
        assert [m.person_id for m in view.markers] == ["solo"]
        assert view.scene.unmatched_codes == []

    def test_frame_callback_scales_markers(self, sample_persons, sample_airports):
        loop = FrameLoop(clock=lambda: 0.0)
        view = GlobeView()
        view.set_airports(sample_airports)
        view.set_persons(sample_persons)
        view.mount(loop)

        loop.tick(now=0.0)
        assert all(m.scale == 0.0 for m in view.frame)
        loop.tick(now=0.25)
        assert all(m.scale == pytest.approx(0.479425538604203) for m in view.frame)

    def test_blink_time_counts_from_mount(self, sample_persons, sample_airports):
        now = [0.0]
        loop = FrameLoop(clock=lambda: now[0])
        view = GlobeView()
        view.set_airports(sample_airports)
        view.set_persons(sample_persons)

        now[0] = 10.0
        view.mount(loop)
        loop.tick()
        assert all(m.scale == 0.0 for m in view.frame)

        now[0] = 10.25
        loop.tick()
        assert all(m.scale == pytest.approx(0.479425538604203) for m in view.frame)

    def test_remount_restarts_blink_time(self):
        now = [0.0]
        loop = FrameLoop(clock=lambda: now[0])
        view = GlobeView()
        view.mount(loop)
        view.unmount()

        now[0] = 3.0
        view.mount(loop)
        view.set_persons([Person(id="a", airport="SFO")])
        view.set_airports(
            [Airport(key="KSFO", iata="SFO", icao="KSFO", latitude=37.6, longitude=-122.4)]
        )
        loop.tick()
        assert view.frame[0].scale == 0.0

    def test_rejected_airports_keep_previous_state(self, sample_persons, sample_airports):
        view = GlobeView()
        view.set_airports(sample_airports)
        view.set_persons(sample_persons)
        before = list(view.markers)

        bad = Airport(key="KSFO", iata="SFO", icao="KSFO", latitude="north", longitude=1.0)
        with pytest.raises(DataValidationError):
            view.set_airports([bad])

        assert view.markers == before
        assert view.frame == before

        view.set_persons(sample_persons[:1])
        assert [m.person_id for m in view.markers] == [sample_persons[0].id]

    def test_rejected_roster_keeps_previous_state(self):
        bad = Airport(key="BAD", iata="BAD", icao=None, latitude="north", longitude=1.0)
        good = Airport(key="KSFO", iata="SFO", icao="KSFO", latitude=37.6, longitude=-122.4)
        view = GlobeView()
        view.set_airports([good, bad])
        view.set_persons([Person(id="a", airport="SFO")])

        with pytest.raises(DataValidationError):
            view.set_persons([Person(id="b", airport="BAD")])

        assert [m.person_id for m in view.markers] == ["a"]
        view.set_airports([good])
        assert [m.person_id for m in view.markers] == ["a"]

    def test_unmount_releases_registration(self):
        loop = FrameLoop()
        view = GlobeView()
        view.mount(loop)
        assert view.mounted and len(loop) == 1
        view.unmount()
        assert not view.mounted and len(loop) == 0

    def test_double_mount_rejected(self):
        view = GlobeView()
        view.mount(FrameLoop())
        with pytest.raises(RuntimeError):
            view.mount(FrameLoop())

    def test_context_manager_mounts_and_unmounts(self):
        with GlobeView() as view:
            assert view.mounted
        assert not view.mounted

    def test_click_emits_navigation(self, sample_persons, sample_airports):
        visited: list[str] = []
        view = GlobeView(on_navigate=visited.append)
        view.set_airports(sample_airports)
        view.set_persons(sample_persons)

        assert view.click("rec003") == "/neighborhood/U003"
        assert visited == ["/neighborhood/U003"]

    def test_click_unknown_marker(self, sample_airports):
        visited: list[str] = []
        view = GlobeView(on_navigate=visited.append)
        view.set_airports(sample_airports)
        assert view.click("missing") is None
        assert visited == []
