"""4D -> 3D projection of rotated points."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np


class ProjectionMode(str, Enum):
    PERSPECTIVE = "perspective"
    STEREOGRAPHIC = "stereographic"
    ORTHOGRAPHIC = "orthographic"

    @property
    def index(self) -> int:
        return _MODE_INDEX[self]


_MODE_INDEX = {
    ProjectionMode.PERSPECTIVE: 0,
    ProjectionMode.STEREOGRAPHIC: 1,
    ProjectionMode.ORTHOGRAPHIC: 2,
}


@dataclass(frozen=True, slots=True)
class ProjectionParameters:
    """depth: camera distance along w (perspective/stereographic).
    epsilon: smallest allowed denominator.
    """

    depth: float = 3.0
    epsilon: float = 0.2
    stereographic_scale: float = 1.0
    orthographic_scale: float = 0.8

    def sanitized(self) -> "ProjectionParameters":
        depth = max(float(self.depth), float(self.epsilon))
        epsilon = min(max(float(self.epsilon), 1e-4), depth)
        return ProjectionParameters(
            depth=depth,
            epsilon=epsilon,
            stereographic_scale=max(float(self.stereographic_scale), 0.01),
            orthographic_scale=max(float(self.orthographic_scale), 0.01),
        )


DEFAULT_PROJECTION_PARAMETERS = ProjectionParameters()


def build_projection_uniforms(
    mode: ProjectionMode,
    params: ProjectionParameters = DEFAULT_PROJECTION_PARAMETERS,
) -> tuple[int, np.ndarray]:
    """(mode index, float32[depth, epsilon, stereo scale, ortho scale])."""
    p = params.sanitized()
    data = np.array(
        [p.depth, p.epsilon, p.stereographic_scale, p.orthographic_scale],
        dtype=np.float32,
    )
    return ProjectionMode(mode).index, data


def project_points(
    points: np.ndarray,
    mode: ProjectionMode = ProjectionMode.PERSPECTIVE,
    params: ProjectionParameters = DEFAULT_PROJECTION_PARAMETERS,
) -> np.ndarray:
    """Project (N, 4) points to (N, 3)."""
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 4:
        raise ValueError(f"Expected (N, 4) points, got shape {pts.shape}")
    p = params.sanitized()
    xyz = pts[:, :3]
    w = pts[:, 3]

    mode = ProjectionMode(mode)
    if mode is ProjectionMode.PERSPECTIVE:
        denom = np.maximum(p.depth - w, p.epsilon)
        return xyz * (p.depth / denom)[:, None]
    if mode is ProjectionMode.STEREOGRAPHIC:
        denom = np.maximum(1.0 - w / p.depth, p.epsilon)
        return xyz * (p.stereographic_scale / denom)[:, None]
    return xyz * p.orthographic_scale
