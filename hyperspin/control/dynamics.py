"""Bounded modulation metrics derived from a rotation.

Pure functions of the angles (and optionally the left/right quaternion pair);
the results drive colour, line thickness and audio modulation downstream.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..math4d.angles import ZERO_ROTATION, RotationAngles
from ..math4d.isoclinic import DualQuaternionComposer, DualQuaternionPair
from ..math4d.quaternion import q_dot

MAX_PLANE_MAGNITUDE = math.pi * math.sqrt(3.0)
MAX_TOTAL_MAGNITUDE = math.pi * math.sqrt(6.0)
# Thickness is a multiplicative line-width scale, not a proportion.
THICKNESS_RANGE = (0.45, 2.4)


def clamp01(value: float) -> float:
    if value <= 0.0:
        return 0.0
    if value >= 1.0:
        return 1.0
    return value


@dataclass(frozen=True, slots=True)
class RotationDynamics:
    energy: float
    spatial: float
    hyperspatial: float
    harmonic: float
    saturation: float
    brightness: float
    thickness: float
    chaos: float

    def as_array(self) -> np.ndarray:
        return np.array(
            [
                self.energy,
                self.spatial,
                self.hyperspatial,
                self.harmonic,
                self.saturation,
                self.brightness,
                self.thickness,
                self.chaos,
            ],
            dtype=np.float64,
        )


def _interference_harmonic(a: RotationAngles) -> float:
    with np.errstate(invalid="ignore"):
        interference = (
            np.sin(a.xy * 0.5)
            + np.sin(a.xz * 0.33 + a.yw * 0.25)
            + np.sin(a.yz * 0.42 - a.zw * 0.37)
        )
    return float((interference / 3.0 + 1.0) * 0.5)


def _finish(energy: float, spatial: float, hyperspatial: float, harmonic: float) -> RotationDynamics:
    imbalance = spatial - hyperspatial
    saturation = clamp01(0.3 + energy * 0.6 + 0.15 * (harmonic - 0.5))
    brightness = clamp01(0.35 + 0.4 * (1.0 - abs(harmonic - 0.5) * 1.6))
    lo, hi = THICKNESS_RANGE
    thickness = min(max(0.7 + energy * 1.2 + imbalance * 0.35, lo), hi)
    chaos = clamp01(abs(imbalance) * 0.8 + energy * 0.25)
    return RotationDynamics(
        energy=energy,
        spatial=spatial,
        hyperspatial=hyperspatial,
        harmonic=harmonic,
        saturation=saturation,
        brightness=brightness,
        thickness=thickness,
        chaos=chaos,
    )


def derive_rotation_dynamics(angles: RotationAngles) -> RotationDynamics:
    a = angles.wrapped()
    spatial_mag = float(np.linalg.norm(a.spatial()))
    hyper_mag = float(np.linalg.norm(a.hyperspatial()))
    total_mag = float(np.linalg.norm(a.as_array()))
    return _finish(
        energy=clamp01(total_mag / MAX_TOTAL_MAGNITUDE),
        spatial=clamp01(spatial_mag / MAX_PLANE_MAGNITUDE),
        hyperspatial=clamp01(hyper_mag / MAX_PLANE_MAGNITUDE),
        harmonic=clamp01(_interference_harmonic(a)),
    )


def derive_isoclinic_dynamics(angles: RotationAngles, pair: DualQuaternionPair) -> RotationDynamics:
    """Angle metrics enriched with the left/right quaternion relationship.

    chiral spread |left - right| lies in [0, 2] and is zero for purely spatial
    rotations (w axis fixed); it boosts energy. The isoclinic term
    (left . right + 1) / 2 is blended into the harmonic index.
    """
    base = derive_rotation_dynamics(angles)
    spread = min(float(np.linalg.norm(pair.left - pair.right)), 2.0)
    isoclinic = clamp01((q_dot(pair.left, pair.right) + 1.0) * 0.5)
    return _finish(
        energy=clamp01(base.energy * (1.0 + 0.5 * spread)),
        spatial=base.spatial,
        hyperspatial=base.hyperspatial,
        harmonic=clamp01(0.75 * base.harmonic + 0.25 * isoclinic),
    )


ZERO_DYNAMICS = derive_rotation_dynamics(ZERO_ROTATION)


class DynamicsDeriver:
    """Base interface for angle -> dynamics mapping."""

    name: str = "base"

    def derive(self, angles: RotationAngles, pair: Optional[DualQuaternionPair] = None) -> RotationDynamics:
        raise NotImplementedError


class AngleDynamicsDeriver(DynamicsDeriver):
    """Angles only; ignores any quaternion pair."""

    name = "angles"

    def derive(self, angles: RotationAngles, pair: Optional[DualQuaternionPair] = None) -> RotationDynamics:  # noqa: ARG002
        return derive_rotation_dynamics(angles)


class IsoclinicDynamicsDeriver(DynamicsDeriver):
    """Angles plus left/right pair; composes the pair when not supplied."""

    name = "isoclinic"

    def __init__(self, composer: Optional[DualQuaternionComposer] = None):
        self.composer = composer or DualQuaternionComposer()

    def derive(self, angles: RotationAngles, pair: Optional[DualQuaternionPair] = None) -> RotationDynamics:
        if pair is None:
            pair = self.composer.compose(angles)
        return derive_isoclinic_dynamics(angles, pair)
