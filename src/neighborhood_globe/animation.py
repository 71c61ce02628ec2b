"""Per-frame marker animation and the frame-callback registry."""

from __future__ import annotations

import itertools
import logging
import math
import time
from collections.abc import Callable, Generator, Iterable
from contextlib import contextmanager
from dataclasses import replace

from neighborhood_globe.models import Marker

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]

BLINK_RATE = 2.0


def blink_scale(elapsed: float) -> float:
    """Scale multiplier in [0, 1] for a marker *elapsed* seconds after mount.

    There is no per-marker phase, so every marker blinks in lockstep.
    """
    return abs(math.sin(elapsed * BLINK_RATE))


def animate(markers: Iterable[Marker], elapsed: float) -> list[Marker]:
    """Return copies of *markers* scaled for the frame at *elapsed* seconds."""
    scale = blink_scale(elapsed)
    return [replace(m, scale=scale) for m in markers]


class FrameLoop:
    """Registry of frame callbacks driven by an external tick.

    Each tick passes the seconds elapsed since the loop was created (or
    last reset) to every subscriber. A subscriber that raises is logged and
    unsubscribed; the remaining subscribers still run.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._origin = clock()
        self._callbacks: dict[int, FrameCallback] = {}
        self._handles = itertools.count(1)
        self.frame_count = 0

    def __len__(self) -> int:
        return len(self._callbacks)

    def reset(self) -> None:
        self._origin = self._clock()
        self.frame_count = 0

    def elapsed(self, now: float | None = None) -> float:
        return (self._clock() if now is None else now) - self._origin

    def start(self, callback: FrameCallback) -> int:
        """Register *callback* for every subsequent frame and return its handle."""
        handle = next(self._handles)
        self._callbacks[handle] = callback
        return handle

    def stop(self, handle: int) -> bool:
        """Release a registration. Returns False if it was already gone."""
        return self._callbacks.pop(handle, None) is not None

    @contextmanager
    def subscribed(self, callback: FrameCallback) -> Generator[int, None, None]:
        """Register *callback* for the duration of a with-block."""
        handle = self.start(callback)
        try:
            yield handle
        finally:
            self.stop(handle)

    def tick(self, now: float | None = None) -> float:
        """Run one frame and return its elapsed time."""
        elapsed = self.elapsed(now)
        self.frame_count += 1
        # copy: callbacks may stop themselves or others mid-frame
        for handle, callback in list(self._callbacks.items()):
            if handle not in self._callbacks:
                continue
            try:
                callback(elapsed)
            except Exception:
                logger.exception("Frame callback %d failed; unsubscribing", handle)
                self._callbacks.pop(handle, None)
        return elapsed

    def run(
        self,
        frames: int,
        interval: float = 1 / 60,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Drive *frames* ticks, sleeping *interval* seconds between them.

        Stops early once nothing is subscribed.
        """
        for i in range(frames):
            if not self._callbacks:
                break
            self.tick()
            if i < frames - 1:
                sleep(interval)
