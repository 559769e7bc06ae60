"""Six-plane SO(4) rotations: sequential application and matrix composition.

Column-vector convention: v' = M @ v, with
M = R_zw @ R_yw @ R_xw @ R_yz @ R_xz @ R_xy, so that the matrix reproduces
``rotate_vector`` applying xy first and zw last.
"""

from __future__ import annotations

import math

import numpy as np

from .angles import RotationAngles
from .planes import CANONICAL_PLANE_ORDER, RotationPlane


def as_vec4(vector: np.ndarray) -> np.ndarray:
    v = np.array(vector, dtype=np.float64).reshape(-1)
    if v.shape != (4,):
        raise ValueError(f"Expected 4-vector, got shape {np.shape(vector)}")
    return v


def _cos_sin(theta: float) -> tuple[float, float]:
    # math.cos raises on inf; non-finite angles propagate as NaN instead.
    if not math.isfinite(theta):
        return math.nan, math.nan
    return math.cos(theta), math.sin(theta)


def rotate_vector(vector: np.ndarray, angles: RotationAngles) -> np.ndarray:
    """Apply the six elementary plane rotations to a 4-vector, xy first.

    This is the reference representation the matrix and quaternion-pair
    paths are validated against. Zero angles are skipped, so the zero rotation
    returns an exact copy of the input.
    """
    v = as_vec4(vector)
    angles = angles.wrapped()
    for plane in CANONICAL_PLANE_ORDER:
        theta = angles.angle(plane)
        if theta == 0.0:
            continue
        i, j = plane.axes
        c, s = _cos_sin(theta)
        a = v[i]
        b = v[j]
        v[i] = a * c - b * s
        v[j] = a * s + b * c
    return v


def plane_matrix(plane: RotationPlane, theta: float) -> np.ndarray:
    """Identity except the 2x2 block of ``plane``."""
    m = np.eye(4, dtype=np.float64)
    i, j = plane.axes
    c, s = _cos_sin(theta)
    m[i, i] = c
    m[j, i] = s
    m[i, j] = -s
    m[j, j] = c
    return m


def build_matrix(angles: RotationAngles) -> np.ndarray:
    """Compose the six plane rotations into one 4x4 matrix (column vectors)."""
    m = np.eye(4, dtype=np.float64)
    angles = angles.wrapped()
    for plane in CANONICAL_PLANE_ORDER:
        theta = angles.angle(plane)
        if theta == 0.0:
            continue
        m = plane_matrix(plane, theta) @ m
    return m


def transform_points(points: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Rotate row-stacked (N, 4) points by a column-vector matrix."""
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 4:
        raise ValueError(f"Expected (N, 4) points, got shape {pts.shape}")
    return pts @ np.asarray(matrix, dtype=np.float64).T


def orthonormality_error(matrix: np.ndarray) -> float:
    """max |M @ M.T - I| over all components."""
    m = np.asarray(matrix, dtype=np.float64)
    return float(np.max(np.abs(m @ m.T - np.eye(m.shape[0], dtype=np.float64))))


def is_proper_rotation(matrix: np.ndarray, tol: float = 1e-5) -> bool:
    m = np.asarray(matrix, dtype=np.float64)
    if m.shape != (4, 4) or not np.isfinite(m).all():
        return False
    return orthonormality_error(m) <= tol and abs(float(np.linalg.det(m)) - 1.0) <= tol
