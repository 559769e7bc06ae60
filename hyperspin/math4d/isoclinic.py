"""Left/right unit quaternion pairs for general SO(4) rotations.

Every proper 4D rotation can be written as p -> L * p * conj(R) for unit
quaternions L (left isoclinic half) and R (right isoclinic half), with 4-vectors
mapped onto quaternions by ``vec4_to_q``. The pair is recovered from the
rotation matrix M:

1. a = image of the w axis (the quaternion 1) = L * conj(R).
2. image(e) * conj(a) = L * e * conj(L) for e in {i, j, k}; the vector parts
   of those three products are the columns of the 3x3 rotation of L.
3. L = rotmat_to_q(that 3x3), sign fixed so w >= 0.
4. R = conj(conj(L) * a).

Conditioning: for an orthonormal M the branch-selected trace formula keeps its
divisor >= 2, so errors in L and R are of the order of the errors in M. The
closed form leans on the w-axis image alone for R, so a matrix that has
drifted from orthonormality (float32 round trips, accumulated products) pushes
all of its error onto one column. When the reconstruction residual exceeds
``refine_threshold`` an alternating least-squares pass re-estimates R from all
four basis images with L fixed, then L with R fixed, keeping the best pair.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .angles import RotationAngles
from .quaternion import (
    q_canonical,
    q_conj,
    q_identity,
    q_mul,
    q_normalize,
    q_to_vec4,
    rotmat_to_q,
    vec4_to_q,
)
from .so4 import as_vec4, build_matrix

logger = logging.getLogger(__name__)

_SINGULAR_EPS = 1e-9

# Quaternion basis 1, i, j, k and the vector axes they map from (w, x, y, z).
_Q_BASIS = tuple(np.eye(4, dtype=np.float64))
_Q_BASIS_AXES = (3, 0, 1, 2)


@dataclass(frozen=True, slots=True, eq=False)
class DualQuaternionPair:
    """(left, right) unit quaternions, [w, x, y, z] each."""

    left: np.ndarray
    right: np.ndarray

    @classmethod
    def identity(cls) -> "DualQuaternionPair":
        return cls(left=q_identity(), right=q_identity())

    def as_array(self) -> np.ndarray:
        return np.concatenate([self.left, self.right]).astype(np.float64)


def apply_dual(vector: np.ndarray, pair: DualQuaternionPair) -> np.ndarray:
    """Rotate a 4-vector by left * v * conj(right)."""
    p = vec4_to_q(as_vec4(vector))
    return q_to_vec4(q_mul(q_mul(pair.left, p), q_conj(pair.right)))


def pair_to_matrix(pair: DualQuaternionPair) -> np.ndarray:
    """4x4 column-vector matrix of the rotation a pair represents."""
    m = np.empty((4, 4), dtype=np.float64)
    for axis in range(4):
        e = np.zeros(4, dtype=np.float64)
        e[axis] = 1.0
        m[:, axis] = apply_dual(e, pair)
    return m


def _basis_images(matrix: np.ndarray) -> list[np.ndarray]:
    return [vec4_to_q(matrix[:, axis]) for axis in _Q_BASIS_AXES]


def _canonical_pair(left: np.ndarray, right: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    # Flip both halves together; flipping one alone negates the rotation.
    if left[0] < 0.0:
        return -left, -right
    return left, right


def _closed_form(images: list[np.ndarray]) -> tuple[np.ndarray, np.ndarray]:
    anchor = q_normalize(images[0])
    anchor_conj = q_conj(anchor)
    S = np.empty((3, 3), dtype=np.float64)
    for col in range(3):
        S[:, col] = q_mul(images[col + 1], anchor_conj)[1:]
    left = q_canonical(rotmat_to_q(S))
    right = q_normalize(q_conj(q_mul(q_conj(left), anchor)))
    return left, right


def _refine_right(left: np.ndarray, images: list[np.ndarray]) -> np.ndarray:
    # image(e) = L * e * conj(R)  =>  conj(R) = conj(e) * conj(L) * image(e)
    left_conj = q_conj(left)
    acc = np.zeros(4, dtype=np.float64)
    for e, image in zip(_Q_BASIS, images):
        acc += q_mul(q_conj(e), q_mul(left_conj, image))
    return q_normalize(q_conj(acc))


def _refine_left(right: np.ndarray, images: list[np.ndarray]) -> np.ndarray:
    # image(e) = L * e * conj(R)  =>  L = image(e) * R * conj(e)
    acc = np.zeros(4, dtype=np.float64)
    for e, image in zip(_Q_BASIS, images):
        acc += q_mul(q_mul(image, right), q_conj(e))
    return q_normalize(acc)


def _residual(left: np.ndarray, right: np.ndarray, matrix: np.ndarray) -> float:
    return float(np.max(np.abs(pair_to_matrix(DualQuaternionPair(left, right)) - matrix)))


class DualQuaternionComposer:
    """Derives the (left, right) pair reproducing a six-plane rotation.

    Holds configuration only; every call allocates its own temporaries, so one
    instance can be shared between threads.
    """

    def __init__(self, refine_passes: int = 2, refine_threshold: float = 1e-9):
        self.refine_passes = max(0, int(refine_passes))
        self.refine_threshold = float(refine_threshold)

    def compose(self, angles: RotationAngles) -> DualQuaternionPair:
        if angles.wrapped().is_zero():
            return DualQuaternionPair.identity()
        return self.compose_matrix(build_matrix(angles))

    def compose_matrix(self, matrix: np.ndarray) -> DualQuaternionPair:
        pair, _ = self.solve(matrix)
        return pair

    def solve(self, matrix: np.ndarray) -> tuple[DualQuaternionPair, float]:
        """Return (pair, residual) where residual = max |pair_to_matrix - M|."""
        m = np.asarray(matrix, dtype=np.float64)
        if m.shape != (4, 4):
            raise ValueError(f"Expected 4x4 rotation matrix, got {m.shape}")

        with np.errstate(invalid="ignore", over="ignore"):
            return self._solve(m)

    def _solve(self, m: np.ndarray) -> tuple[DualQuaternionPair, float]:
        det = float(np.linalg.det(m))
        if abs(det) < _SINGULAR_EPS:
            logger.warning("[SO4] singular rotation matrix (det=%.3e), using identity pair", det)
            return DualQuaternionPair.identity(), _residual(q_identity(), q_identity(), m)

        images = _basis_images(m)
        if float(np.linalg.norm(images[0])) < _SINGULAR_EPS:
            logger.warning("[SO4] degenerate w-axis image, using identity pair")
            return DualQuaternionPair.identity(), _residual(q_identity(), q_identity(), m)

        left, right = _closed_form(images)
        best_left, best_right = left, right
        best_residual = _residual(left, right, m)

        if best_residual > self.refine_threshold:
            for n in range(self.refine_passes):
                right = _refine_right(left, images)
                left = _refine_left(right, images)
                left, right = _canonical_pair(left, right)
                residual = _residual(left, right, m)
                logger.debug("[SO4] refine pass %d residual=%.3e", n + 1, residual)
                if not residual < best_residual:
                    break
                best_left, best_right, best_residual = left, right, residual

        return DualQuaternionPair(left=best_left, right=best_right), best_residual


_DEFAULT_COMPOSER = DualQuaternionComposer()


def compose_dual(angles: RotationAngles) -> DualQuaternionPair:
    return _DEFAULT_COMPOSER.compose(angles)
