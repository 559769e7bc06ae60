"""Per-frame rotation snapshot handed to the SO(4) core."""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..math4d.angles import ZERO_ROTATION, RotationAngles


@dataclass(frozen=True, slots=True)
class RotationSnapshot:
    """Six-plane angles for one frame.

    timestamp:
      Monotonic time in seconds.
    confidence:
      Ingestion confidence in [0, 1].
    """

    angles: RotationAngles
    timestamp: float = 0.0
    confidence: float = 1.0


def make_snapshot(angles: RotationAngles, timestamp: float, confidence: float = 1.0) -> RotationSnapshot:
    c = float(confidence)
    c = 0.0 if not math.isfinite(c) else max(0.0, min(1.0, c))
    return RotationSnapshot(angles=angles, timestamp=float(timestamp), confidence=c)


ZERO_SNAPSHOT = RotationSnapshot(angles=ZERO_ROTATION, timestamp=0.0, confidence=1.0)
