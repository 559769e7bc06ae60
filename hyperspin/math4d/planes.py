"""The six coordinate planes of 4-space and their canonical order.

4D rotations do not commute, so every composer walks ``CANONICAL_PLANE_ORDER``:
the three spatial planes (xy, xz, yz) first, then the three hyperspatial
planes (xw, yw, zw) that involve the fourth axis.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping, Optional


class RotationPlane(str, Enum):
    XY = "xy"
    XZ = "xz"
    YZ = "yz"
    XW = "xw"
    YW = "yw"
    ZW = "zw"

    @property
    def axes(self) -> tuple[int, int]:
        """Vector indices (i, j) rotated by this plane, x=0 y=1 z=2 w=3."""
        return _PLANE_AXES[self]

    @property
    def is_hyperspatial(self) -> bool:
        return self.axes[1] == 3

    @property
    def label(self) -> str:
        return _PLANE_LABELS[self]


_PLANE_AXES = {
    RotationPlane.XY: (0, 1),
    RotationPlane.XZ: (0, 2),
    RotationPlane.YZ: (1, 2),
    RotationPlane.XW: (0, 3),
    RotationPlane.YW: (1, 3),
    RotationPlane.ZW: (2, 3),
}

_PLANE_LABELS = {
    RotationPlane.XY: "XY spatial spin",
    RotationPlane.XZ: "XZ pitch fold",
    RotationPlane.YZ: "YZ lateral sweep",
    RotationPlane.XW: "XW hyper reveal",
    RotationPlane.YW: "YW vertical weave",
    RotationPlane.ZW: "ZW depth breathe",
}

SPATIAL_PLANES: tuple[RotationPlane, ...] = (
    RotationPlane.XY,
    RotationPlane.XZ,
    RotationPlane.YZ,
)
HYPERSPATIAL_PLANES: tuple[RotationPlane, ...] = (
    RotationPlane.XW,
    RotationPlane.YW,
    RotationPlane.ZW,
)
CANONICAL_PLANE_ORDER: tuple[RotationPlane, ...] = SPATIAL_PLANES + HYPERSPATIAL_PLANES


def parse_plane(value: Any) -> RotationPlane:
    if isinstance(value, RotationPlane):
        return value
    try:
        return RotationPlane(str(value).strip().lower())
    except ValueError as exc:
        raise ValueError(f"unknown rotation plane: {value!r}") from exc


def _sanitize_weight(value: Any) -> float:
    try:
        w = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(w) or w <= 0.0:
        return 0.0
    if w >= 1.0:
        return 1.0
    return w


@dataclass(frozen=True, slots=True)
class PlaneWeights:
    """Per-plane gains in [0, 1] applied to incoming angles."""

    xy: float = 1.0
    xz: float = 1.0
    yz: float = 1.0
    xw: float = 1.0
    yw: float = 1.0
    zw: float = 1.0

    def weight(self, plane: RotationPlane) -> float:
        return getattr(self, plane.value)


UNIT_PLANE_WEIGHTS = PlaneWeights()


def create_plane_weights(initial: Optional[Mapping[Any, Any]] = None) -> PlaneWeights:
    weights, _ = merge_plane_weights(UNIT_PLANE_WEIGHTS, initial)
    return weights


def merge_plane_weights(
    weights: PlaneWeights,
    updates: Optional[Mapping[Any, Any]],
) -> tuple[PlaneWeights, bool]:
    """Return (new weights, changed). Missing planes keep their value."""
    if not updates:
        return weights, False
    changes: dict[str, float] = {}
    for raw_plane, raw_value in updates.items():
        plane = parse_plane(raw_plane)
        sanitized = _sanitize_weight(raw_value)
        if weights.weight(plane) != sanitized:
            changes[plane.value] = sanitized
    if not changes:
        return weights, False
    return replace(weights, **changes), True
