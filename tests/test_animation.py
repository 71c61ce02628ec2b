"""Tests for the blink animation and the frame loop."""

from __future__ import annotations

import math

import pytest

from neighborhood_globe.animation import FrameLoop, animate, blink_scale
from neighborhood_globe.models import Marker, MarkerColor


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


def _marker(person_id: str = "a", base_size: float = 0.015) -> Marker:
    return Marker(
        person_id=person_id,
        href=f"/neighborhood/{person_id}",
        label=person_id,
        airport_code="SFO",
        position=(1.0, 0.0, 0.0),
        color=MarkerColor.GREEN,
        base_size=base_size,
    )


class TestBlinkScale:
    @pytest.mark.parametrize("t", [0.0, 0.1, 0.785, 1.0, 2.5, 100.0, 12345.678])
    def test_in_unit_range(self, t):
        assert 0.0 <= blink_scale(t) <= 1.0

    def test_starts_at_zero(self):
        assert blink_scale(0.0) == 0.0

    def test_peaks_at_quarter_period(self):
        assert blink_scale(math.pi / 4) == pytest.approx(1.0)

    def test_period_is_half_pi(self):
        assert blink_scale(0.3) == pytest.approx(blink_scale(0.3 + math.pi / 2))


class TestAnimate:
    def test_lockstep_scale(self):
        frame = animate([_marker("a", 0.015), _marker("b", 0.0075)], 0.5)
        assert frame[0].scale == frame[1].scale == pytest.approx(abs(math.sin(1.0)))
        assert frame[1].size == pytest.approx(0.0075 * abs(math.sin(1.0)))

    def test_does_not_mutate_input(self):
        before = _marker()
        animate([before], 0.5)
        assert before.scale == 1.0


class TestFrameLoop:
    def test_tick_passes_elapsed_time(self):
        clock = FakeClock()
        loop = FrameLoop(clock=clock)
        seen: list[float] = []
        loop.start(seen.append)

        clock.now = 101.5
        assert loop.tick() == pytest.approx(1.5)
        assert seen == [pytest.approx(1.5)]
        assert loop.frame_count == 1

    def test_explicit_now(self):
        loop = FrameLoop(clock=FakeClock(10.0))
        assert loop.tick(now=12.0) == pytest.approx(2.0)

    def test_stop_releases_callback(self):
        loop = FrameLoop(clock=FakeClock())
        seen: list[float] = []
        handle = loop.start(seen.append)
        assert loop.stop(handle) is True
        assert loop.stop(handle) is False
        loop.tick()
        assert seen == []
        assert len(loop) == 0

    def test_subscribed_releases_on_exit(self):
        loop = FrameLoop(clock=FakeClock())
        with loop.subscribed(lambda t: None):
            assert len(loop) == 1
        assert len(loop) == 0

    def test_subscribed_releases_on_error(self):
        loop = FrameLoop(clock=FakeClock())
        with pytest.raises(RuntimeError), loop.subscribed(lambda t: None):
            raise RuntimeError("teardown")
        assert len(loop) == 0

    def test_failing_callback_is_dropped(self, caplog):
        loop = FrameLoop(clock=FakeClock())
        seen: list[float] = []

        def boom(t: float) -> None:
            raise ValueError("bad frame")

        loop.start(boom)
        loop.start(seen.append)
        loop.tick()
        loop.tick()
        assert len(seen) == 2
        assert len(loop) == 1
        assert "bad frame" in caplog.text

    def test_callback_may_stop_itself(self):
        loop = FrameLoop(clock=FakeClock())
        calls: list[float] = []
        handles: list[int] = []

        def once(t: float) -> None:
            calls.append(t)
            loop.stop(handles[0])

        handles.append(loop.start(once))
        loop.tick()
        loop.tick()
        assert len(calls) == 1

    def test_run_sleeps_between_frames(self):
        clock = FakeClock()
        loop = FrameLoop(clock=clock)
        sleeps: list[float] = []

        def sleep(interval: float) -> None:
            sleeps.append(interval)
            clock.now += interval

        seen: list[float] = []
        loop.start(seen.append)
        loop.run(frames=3, interval=0.5, sleep=sleep)
        assert seen == [pytest.approx(0.0), pytest.approx(0.5), pytest.approx(1.0)]
        assert sleeps == [0.5, 0.5]

    def test_run_stops_without_subscribers(self):
        loop = FrameLoop(clock=FakeClock())
        loop.run(frames=5, sleep=lambda _: None)
        assert loop.frame_count == 0

    def test_reset_restarts_elapsed(self):
        clock = FakeClock()
        loop = FrameLoop(clock=clock)
        clock.now = 150.0
        loop.reset()
        assert loop.elapsed() == 0.0
