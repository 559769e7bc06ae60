"""Per-plane angular velocity between two rotation snapshots."""

from __future__ import annotations

import math

from .angles import ZERO_ROTATION, RotationAngles
from .planes import CANONICAL_PLANE_ORDER

DEFAULT_MIN_DELTA_SECONDS = 1e-3
DEFAULT_MAX_ANGULAR_VELOCITY = math.pi * 12.0


def _clamp_velocity(value: float, max_magnitude: float) -> float:
    if not math.isfinite(value) or max_magnitude <= 0.0:
        return 0.0
    if not math.isfinite(max_magnitude):
        return value
    return max(-max_magnitude, min(max_magnitude, value))


def compute_angular_velocity(
    previous,
    current,
    min_delta_seconds: float = DEFAULT_MIN_DELTA_SECONDS,
    max_magnitude: float = DEFAULT_MAX_ANGULAR_VELOCITY,
) -> RotationAngles:
    """Finite-difference rad/s per plane.

    ``previous``/``current`` are RotationSnapshot-like (``angles`` and
    ``timestamp`` in seconds). Time deltas that are non-finite, non-positive
    or below ``min_delta_seconds`` yield the zero rotation rather than a spike.
    """
    dt = float(current.timestamp) - float(previous.timestamp)
    if not math.isfinite(dt) or dt <= 0.0 or dt < min_delta_seconds:
        return ZERO_ROTATION

    limit = abs(float(max_magnitude))
    return RotationAngles(
        *(
            _clamp_velocity(
                (current.angles.angle(p) - previous.angles.angle(p)) / dt,
                limit,
            )
            for p in CANONICAL_PLANE_ORDER
        )
    )
