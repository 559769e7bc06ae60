"""Quaternion utilities, scalar-first [w, x, y, z].

4-vectors (x, y, z, w) map onto quaternions with the 4D w coordinate as the
scalar part, so a unit quaternion pair can act on 4-space directly.
"""

from __future__ import annotations

import math

import numpy as np

IDENTITY_Q = np.array([1.0, 0.0, 0.0, 0.0], dtype=np.float64)


def q_identity() -> np.ndarray:
    return IDENTITY_Q.copy()


def q_normalize(q: np.ndarray) -> np.ndarray:
    q = np.asarray(q, dtype=np.float64)
    n = float(np.linalg.norm(q))
    if n < 1e-12:
        return q_identity()
    return q / n


def q_conj(q: np.ndarray) -> np.ndarray:
    return np.array([q[0], -q[1], -q[2], -q[3]], dtype=np.float64)


def q_mul(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    aw, ax, ay, az = a
    bw, bx, by, bz = b
    return np.array(
        [
            aw * bw - ax * bx - ay * by - az * bz,
            aw * bx + ax * bw + ay * bz - az * by,
            aw * by - ax * bz + ay * bw + az * bx,
            aw * bz + ax * by - ay * bx + az * bw,
        ],
        dtype=np.float64,
    )


def q_dot(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.dot(np.asarray(a, dtype=np.float64), np.asarray(b, dtype=np.float64)))


def q_canonical(q: np.ndarray) -> np.ndarray:
    """Resolve the double cover: q and -q are the same rotation, keep w >= 0."""
    q = np.asarray(q, dtype=np.float64)
    if q[0] < 0.0:
        return -q
    return q


def vec4_to_q(v: np.ndarray) -> np.ndarray:
    """(x, y, z, w) -> [w, x, y, z]."""
    return np.array([float(v[3]), float(v[0]), float(v[1]), float(v[2])], dtype=np.float64)


def q_to_vec4(q: np.ndarray) -> np.ndarray:
    """[w, x, y, z] -> (x, y, z, w)."""
    return np.array([q[1], q[2], q[3], q[0]], dtype=np.float64)


def q_to_rotmat(q: np.ndarray) -> np.ndarray:
    """Unit quaternion -> 3x3 rotation matrix of v' = q*(0,v)*q^{-1}."""
    w, x, y, z = q_normalize(q)
    return np.array(
        [
            [1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - w * z), 2.0 * (x * z + w * y)],
            [2.0 * (x * y + w * z), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - w * x)],
            [2.0 * (x * z - w * y), 2.0 * (y * z + w * x), 1.0 - 2.0 * (x * x + y * y)],
        ],
        dtype=np.float64,
    )


def rotmat_to_q(R: np.ndarray) -> np.ndarray:
    """Convert 3x3 rotation matrix to unit quaternion [w, x, y, z].

    Branch on the largest of (trace, R00, R11, R22) so the divisor ``s`` stays
    >= 2 for any orthonormal input. A slightly non-orthonormal R gives the
    closest unit quaternion after the final normalization.
    """
    R = np.asarray(R, dtype=np.float64)
    if R.shape != (3, 3):
        raise ValueError(f"Expected 3x3 rotation matrix, got {R.shape}")

    trace = float(R[0, 0] + R[1, 1] + R[2, 2])
    branch = int(np.argmax([trace, R[0, 0], R[1, 1], R[2, 2]]))
    if branch == 0:
        s = math.sqrt(max(trace + 1.0, 0.0)) * 2.0
        if s < 1e-12:
            return q_identity()
        qw = 0.25 * s
        qx = (R[2, 1] - R[1, 2]) / s
        qy = (R[0, 2] - R[2, 0]) / s
        qz = (R[1, 0] - R[0, 1]) / s
    elif branch == 1:
        s = math.sqrt(max(1.0 + R[0, 0] - R[1, 1] - R[2, 2], 0.0)) * 2.0
        if s < 1e-12:
            return q_identity()
        qw = (R[2, 1] - R[1, 2]) / s
        qx = 0.25 * s
        qy = (R[0, 1] + R[1, 0]) / s
        qz = (R[0, 2] + R[2, 0]) / s
    elif branch == 2:
        s = math.sqrt(max(1.0 + R[1, 1] - R[0, 0] - R[2, 2], 0.0)) * 2.0
        if s < 1e-12:
            return q_identity()
        qw = (R[0, 2] - R[2, 0]) / s
        qx = (R[0, 1] + R[1, 0]) / s
        qy = 0.25 * s
        qz = (R[1, 2] + R[2, 1]) / s
    else:
        s = math.sqrt(max(1.0 + R[2, 2] - R[0, 0] - R[1, 1], 0.0)) * 2.0
        if s < 1e-12:
            return q_identity()
        qw = (R[1, 0] - R[0, 1]) / s
        qx = (R[0, 2] + R[2, 0]) / s
        qy = (R[1, 2] + R[2, 1]) / s
        qz = 0.25 * s

    return q_normalize(np.array([qw, qx, qy, qz], dtype=np.float64))
