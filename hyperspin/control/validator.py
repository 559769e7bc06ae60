"""Cross-checks the sequential, matrix and quaternion-pair representations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..math4d.isoclinic import DualQuaternionComposer, DualQuaternionPair, apply_dual
from ..math4d.so4 import build_matrix, rotate_vector
from .snapshot import RotationSnapshot

DEFAULT_TOLERANCE = 1e-4

TEST_VECTORS: tuple[np.ndarray, ...] = (
    np.array([1.0, 0.0, 0.0, 0.0], dtype=np.float64),
    np.array([0.0, 1.0, 0.0, 0.0], dtype=np.float64),
    np.array([0.0, 0.0, 1.0, 0.0], dtype=np.float64),
    np.array([0.0, 0.0, 0.0, 1.0], dtype=np.float64),
    np.array([0.5, -0.5, 0.75, -0.25], dtype=np.float64),
    np.array([-0.33, 0.62, -0.48, 0.91], dtype=np.float64),
)


@dataclass(frozen=True, slots=True)
class RotationValidationResult:
    ok: bool
    matrix_deviation: float
    dual_deviation: float
    tolerance: float
    sample_count: int


def _max_component_delta(a: np.ndarray, b: np.ndarray) -> float:
    # np.max keeps NaN so a non-finite result can never pass.
    return float(np.max(np.abs(a - b)))


def validate_rotation(
    snapshot: RotationSnapshot,
    tolerance: float = DEFAULT_TOLERANCE,
    composer: Optional[DualQuaternionComposer] = None,
    matrix: Optional[np.ndarray] = None,
    pair: Optional[DualQuaternionPair] = None,
) -> RotationValidationResult:
    """Max per-component disagreement over ``TEST_VECTORS``.

    matrix_deviation: sequential vs matrix.
    dual_deviation: max of sequential vs pair and matrix vs pair.
    Read-only; never raises on non-finite angles (deviations become NaN and
    ``ok`` is False). A precomputed ``matrix``/``pair`` for the same angles is
    checked as-is instead of being recomposed.
    """
    angles = snapshot.angles
    with np.errstate(invalid="ignore", over="ignore"):
        if matrix is None:
            matrix = build_matrix(angles)
        else:
            matrix = np.asarray(matrix, dtype=np.float64)
        if pair is None:
            pair = (composer or DualQuaternionComposer()).compose(angles)

        matrix_deltas = []
        dual_deltas = []
        for v in TEST_VECTORS:
            sequential = rotate_vector(v, angles)
            matrix_result = matrix @ v
            dual_result = apply_dual(v, pair)
            matrix_deltas.append(_max_component_delta(sequential, matrix_result))
            dual_deltas.append(_max_component_delta(sequential, dual_result))
            dual_deltas.append(_max_component_delta(matrix_result, dual_result))

    matrix_deviation = float(np.max(matrix_deltas))
    dual_deviation = float(np.max(dual_deltas))
    ok = bool(matrix_deviation <= tolerance and dual_deviation <= tolerance)
    return RotationValidationResult(
        ok=ok,
        matrix_deviation=matrix_deviation,
        dual_deviation=dual_deviation,
        tolerance=float(tolerance),
        sample_count=len(TEST_VECTORS),
    )
