"""Rotation snapshot sources.

The SO(4) core never owns a clock or chooses angles; providers do. Real
ingestion (IMU streams, sliders) plugs in by subclassing ``SnapshotProvider``.
"""

from __future__ import annotations

import time
from typing import Callable

from ..math4d.angles import RotationAngles, apply_plane_weights
from ..math4d.planes import UNIT_PLANE_WEIGHTS, PlaneWeights
from .orbit import HarmonicOrbit
from .snapshot import RotationSnapshot, make_snapshot


class SnapshotProvider:
    """Base interface for per-frame rotation sources."""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.clock = clock
        self.sleep = sleep

    def get_snapshot(self) -> RotationSnapshot:
        raise NotImplementedError

    def run(self, on_tick: Callable[[], None], frames: int, frame_hz: float = 60.0) -> None:
        """Call on_tick ``frames`` times, paced at ``frame_hz`` (<= 0: unpaced)."""
        interval = (1.0 / frame_hz) if frame_hz > 0.0 else 0.0
        next_t = self.clock()
        for _ in range(frames):
            on_tick()
            if interval <= 0.0:
                continue
            next_t += interval
            delay = next_t - self.clock()
            if delay > 0.0:
                self.sleep(delay)

    def close(self) -> None:
        pass


class OrbitSnapshotProvider(SnapshotProvider):
    """Harmonic orbit sampled at elapsed time since the first snapshot."""

    def __init__(
        self,
        orbit: HarmonicOrbit,
        weights: PlaneWeights = UNIT_PLANE_WEIGHTS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__(clock=clock, sleep=sleep)
        self.orbit = orbit
        self.weights = weights
        self._t0: float | None = None

    def get_snapshot(self) -> RotationSnapshot:
        now = float(self.clock())
        if self._t0 is None:
            self._t0 = now
        angles = apply_plane_weights(self.orbit.angles_at(now - self._t0), self.weights)
        return make_snapshot(angles, timestamp=now, confidence=1.0)


class StaticSnapshotProvider(SnapshotProvider):
    """Fixed angles every frame (debugging a specific rotation)."""

    def __init__(
        self,
        angles: RotationAngles,
        weights: PlaneWeights = UNIT_PLANE_WEIGHTS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__(clock=clock, sleep=sleep)
        self.angles = apply_plane_weights(angles, weights)

    def get_snapshot(self) -> RotationSnapshot:
        return make_snapshot(self.angles, timestamp=float(self.clock()), confidence=1.0)
