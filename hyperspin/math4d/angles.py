"""Six-plane rotation angles (radians)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .planes import CANONICAL_PLANE_ORDER, PlaneWeights, RotationPlane

TAU = 2.0 * math.pi


def wrap_angle(theta: float) -> float:
    """Wrap to (-pi, pi]. Zero stays exactly zero; non-finite passes through."""
    theta = float(theta)
    if not math.isfinite(theta):
        return theta
    wrapped = math.remainder(theta, TAU)
    if wrapped <= -math.pi:
        wrapped += TAU
    return wrapped


@dataclass(frozen=True, slots=True)
class RotationAngles:
    """One angle per coordinate plane. Range is unconstrained; see wrapped()."""

    xy: float = 0.0
    xz: float = 0.0
    yz: float = 0.0
    xw: float = 0.0
    yw: float = 0.0
    zw: float = 0.0

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "RotationAngles":
        """Build from six values in canonical plane order."""
        if len(values) != len(CANONICAL_PLANE_ORDER):
            raise ValueError(f"Expected 6 plane angles, got {len(values)}")
        return cls(*(float(v) for v in values))

    def angle(self, plane: RotationPlane) -> float:
        return getattr(self, plane.value)

    def as_array(self) -> np.ndarray:
        return np.array(
            [self.xy, self.xz, self.yz, self.xw, self.yw, self.zw],
            dtype=np.float64,
        )

    def spatial(self) -> np.ndarray:
        return np.array([self.xy, self.xz, self.yz], dtype=np.float64)

    def hyperspatial(self) -> np.ndarray:
        return np.array([self.xw, self.yw, self.zw], dtype=np.float64)

    def wrapped(self) -> "RotationAngles":
        return RotationAngles(*(wrap_angle(self.angle(p)) for p in CANONICAL_PLANE_ORDER))

    def is_zero(self) -> bool:
        return all(self.angle(p) == 0.0 for p in CANONICAL_PLANE_ORDER)

    def is_finite(self) -> bool:
        return all(math.isfinite(self.angle(p)) for p in CANONICAL_PLANE_ORDER)


ZERO_ROTATION = RotationAngles()


def apply_plane_weights(angles: RotationAngles, weights: PlaneWeights) -> RotationAngles:
    return RotationAngles(
        *(angles.angle(p) * weights.weight(p) for p in CANONICAL_PLANE_ORDER)
    )
