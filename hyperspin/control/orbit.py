"""Harmonic six-plane orbit used as a demo angle source."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from ..math4d.angles import RotationAngles
from ..math4d.planes import CANONICAL_PLANE_ORDER, RotationPlane

TAU = 2.0 * math.pi
GOLDEN_RATIO = (1.0 + math.sqrt(5.0)) / 2.0


@dataclass(frozen=True, slots=True)
class OrbitPlane:
    plane: RotationPlane
    ratio: float
    amplitude: float = 1.0
    phase: float = 0.0


def _default_planes() -> tuple[OrbitPlane, ...]:
    return (
        OrbitPlane(RotationPlane.XY, 1.0, 1.0),
        OrbitPlane(RotationPlane.XZ, GOLDEN_RATIO, 0.86, math.pi / 5.0),
        OrbitPlane(RotationPlane.YZ, 5.0 / 3.0, 0.92, math.pi / 2.0),
        OrbitPlane(RotationPlane.XW, 2.0, 0.74, math.pi / 7.0),
        OrbitPlane(RotationPlane.YW, 2.0 * GOLDEN_RATIO, 0.68, math.pi / 3.0),
        OrbitPlane(RotationPlane.ZW, 3.0, 0.62, math.pi * 0.77),
    )


@dataclass(frozen=True, slots=True)
class OrbitSpec:
    base_frequency: float = 0.12
    amplitude: float = math.pi / 3.5
    coupling: float = 0.28
    hyper_coupling: float = 0.14
    planes: tuple[OrbitPlane, ...] = field(default_factory=_default_planes)


def _clamp_angle(angle: float, limit: float = math.pi) -> float:
    return max(-limit, min(limit, angle))


class HarmonicOrbit:
    """Incommensurate sinusoids per plane with spatial->hyperspatial coupling."""

    def __init__(self, spec: OrbitSpec | None = None):
        self.spec = spec or OrbitSpec()
        self._planes = self.spec.planes or _default_planes()

    def angles_at(self, t: float) -> RotationAngles:
        spec = self.spec
        values = {plane: 0.0 for plane in CANONICAL_PLANE_ORDER}
        for p in self._planes:
            omega = TAU * spec.base_frequency * p.ratio
            values[p.plane] = _clamp_angle(
                spec.amplitude * p.amplitude * math.sin(omega * t + p.phase)
            )

        xy, xz, yz = values[RotationPlane.XY], values[RotationPlane.XZ], values[RotationPlane.YZ]
        if spec.coupling != 0.0:
            spatial_mean = (xy + xz + yz) / 3.0
            hyper_mean = (
                values[RotationPlane.XW] + values[RotationPlane.YW] + values[RotationPlane.ZW]
            ) / 3.0
            bias = (spatial_mean - hyper_mean) * spec.coupling
            values[RotationPlane.XW] = _clamp_angle(values[RotationPlane.XW] + bias * 0.8)
            values[RotationPlane.YW] = _clamp_angle(values[RotationPlane.YW] - bias * 0.5)
            values[RotationPlane.ZW] = _clamp_angle(values[RotationPlane.ZW] + bias * 0.3)

        if spec.hyper_coupling != 0.0:
            cross = (xy - yz) * spec.hyper_coupling
            values[RotationPlane.XW] = _clamp_angle(values[RotationPlane.XW] + cross * 0.6)
            values[RotationPlane.YW] = _clamp_angle(values[RotationPlane.YW] + cross * 0.4)
            values[RotationPlane.ZW] = _clamp_angle(values[RotationPlane.ZW] - cross * 0.2)

        return RotationAngles(*(values[p] for p in CANONICAL_PLANE_ORDER))
