"""SO(4) rotation core: six-plane angles, matrices and left/right quaternion pairs."""

from .angles import ZERO_ROTATION, RotationAngles, wrap_angle
from .isoclinic import (
    DualQuaternionComposer,
    DualQuaternionPair,
    apply_dual,
    compose_dual,
    pair_to_matrix,
)
from .planes import CANONICAL_PLANE_ORDER, RotationPlane
from .so4 import build_matrix, rotate_vector

__all__ = [
    "CANONICAL_PLANE_ORDER",
    "DualQuaternionComposer",
    "DualQuaternionPair",
    "RotationAngles",
    "RotationPlane",
    "ZERO_ROTATION",
    "apply_dual",
    "build_matrix",
    "compose_dual",
    "pair_to_matrix",
    "rotate_vector",
    "wrap_angle",
]
