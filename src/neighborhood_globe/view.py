"""State container for the globe page."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from neighborhood_globe.animation import FrameLoop, animate
from neighborhood_globe.config import NeighborhoodConfig
from neighborhood_globe.join import AirportIndex
from neighborhood_globe.markers import build_markers
from neighborhood_globe.models import Airport, GlobeScene, Marker, Person

logger = logging.getLogger(__name__)

NavigateCallback = Callable[[str], None]


class GlobeView:
    """Owns the roster and airport snapshots and the markers derived from them.

    Markers are rebuilt from scratch whenever either snapshot is replaced.
    A snapshot whose layout fails is rejected and the previous state kept.
    Mounting registers a frame callback on a FrameLoop; unmounting (or
    leaving the with-block) releases it. Blink time counts from the mount.
    """

    def __init__(
        self,
        config: NeighborhoodConfig | None = None,
        on_navigate: NavigateCallback | None = None,
    ) -> None:
        self.config = config or NeighborhoodConfig()
        self.on_navigate = on_navigate
        self._persons: tuple[Person, ...] = ()
        self._airports = AirportIndex(())
        self._scene = GlobeScene()
        self._frame: list[Marker] = []
        self._loop: FrameLoop | None = None
        self._handle: int | None = None
        self._mounted_at = 0.0

    @property
    def scene(self) -> GlobeScene:
        return self._scene

    @property
    def markers(self) -> list[Marker]:
        return self._scene.markers

    @property
    def frame(self) -> list[Marker]:
        """Markers as scaled by the most recent frame."""
        return self._frame

    @property
    def mounted(self) -> bool:
        return self._handle is not None

    def set_persons(self, persons: Iterable[Person]) -> None:
        persons = tuple(persons)
        self._apply(persons, self._airports)

    def set_airports(self, airports: Iterable[Airport]) -> None:
        self._apply(self._persons, AirportIndex(airports))

    def _apply(self, persons: tuple[Person, ...], airports: AirportIndex) -> None:
        # build_markers raises DataValidationError before any state changes
        scene = self._layout(persons, airports)
        self._persons = persons
        self._airports = airports
        self._scene = scene
        self._frame = list(scene.markers)

    def _layout(self, persons: tuple[Person, ...], airports: AirportIndex) -> GlobeScene:
        if not persons or not len(airports):
            return GlobeScene()
        return build_markers(
            persons,
            airports,
            radius=self.config.marker_radius,
            spread=self.config.cluster_spread,
            base_size=self.config.base_marker_size,
        )

    def on_frame(self, elapsed: float) -> None:
        """Frame callback; *elapsed* is loop time, rebased onto the mount."""
        self._frame = animate(self._scene.markers, elapsed - self._mounted_at)

    def mount(self, loop: FrameLoop) -> None:
        if self._handle is not None:
            raise RuntimeError("GlobeView is already mounted")
        self._loop = loop
        self._mounted_at = loop.elapsed()
        self._handle = loop.start(self.on_frame)

    def unmount(self) -> None:
        if self._loop is not None and self._handle is not None:
            self._loop.stop(self._handle)
        self._loop = None
        self._handle = None
        self._mounted_at = 0.0

    def __enter__(self) -> GlobeView:
        if self._handle is None:
            self.mount(FrameLoop())
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unmount()

    def click(self, person_id: str) -> str | None:
        """Emit the navigation path of the marker for *person_id*."""
        for marker in self._scene.markers:
            if marker.person_id == person_id:
                if self.on_navigate is not None:
                    self.on_navigate(marker.href)
                return marker.href
        logger.debug("Click on unknown marker %s ignored", person_id)
        return None
