"""Control plane for mapping rotation snapshots -> packed render state."""

from __future__ import annotations

import logging
import math
import time
from typing import Callable, Optional

import numpy as np

from ..math4d.angles import ZERO_ROTATION
from ..math4d.isoclinic import DualQuaternionComposer
from ..math4d.kinetics import DEFAULT_MAX_ANGULAR_VELOCITY, compute_angular_velocity
from ..math4d.polytopes import Polytope, tesseract
from ..math4d.projection import (
    DEFAULT_PROJECTION_PARAMETERS,
    ProjectionMode,
    ProjectionParameters,
    project_points,
)
from ..math4d.so4 import build_matrix, transform_points
from .display_provider import DisplayFrame, DisplayProvider
from .dynamics import AngleDynamicsDeriver, DynamicsDeriver
from .snapshot import RotationSnapshot
from .snapshot_provider import SnapshotProvider
from .uniforms import (
    ROTATION_UNIFORM_FLOATS,
    STYLE_UNIFORM_FLOATS,
    pack_rotation_uniforms,
    pack_style_uniforms,
)
from .validator import DEFAULT_TOLERANCE, validate_rotation

logger = logging.getLogger(__name__)


def _finite_or_inf(value: float) -> float:
    return value if math.isfinite(value) else math.inf


class RotationController:
    """One instance per render context.

    The packed buffers are scratch owned by this controller and rewritten
    every tick; concurrent render contexts must use separate controllers.
    """

    def __init__(
        self,
        snapshot_provider: SnapshotProvider,
        display_provider: DisplayProvider,
        composer: Optional[DualQuaternionComposer] = None,
        dynamics_deriver: Optional[DynamicsDeriver] = None,
        tolerance: float = DEFAULT_TOLERANCE,
        projection_mode: ProjectionMode = ProjectionMode.PERSPECTIVE,
        projection_params: ProjectionParameters = DEFAULT_PROJECTION_PARAMETERS,
        max_angular_velocity: float = DEFAULT_MAX_ANGULAR_VELOCITY,
        display_hz: float = 5.0,
        polytope: Optional[Polytope] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.snapshot_provider = snapshot_provider
        self.display_provider = display_provider
        self.composer = composer or DualQuaternionComposer()
        self.dynamics_deriver = dynamics_deriver or AngleDynamicsDeriver()
        self.tolerance = float(tolerance)
        self.projection_mode = ProjectionMode(projection_mode)
        self.projection_params = projection_params
        self.max_angular_velocity = float(max_angular_velocity)
        self.clock = clock

        self.rotation_buffer = np.zeros(ROTATION_UNIFORM_FLOATS, dtype=np.float32)
        self.style_buffer = np.zeros(STYLE_UNIFORM_FLOATS, dtype=np.float32)
        self.polytope = polytope or tesseract()
        self.vertices = self.polytope.vertices

        self.prev_snapshot: RotationSnapshot | None = None
        self.frames = 0
        self.failures = 0
        self.worst_matrix_deviation = 0.0
        self.worst_dual_deviation = 0.0
        self.display_interval = (1.0 / display_hz) if display_hz > 0.0 else 0.0
        self.last_display_t: float | None = None

    def tick(self) -> DisplayFrame:
        snapshot = self.snapshot_provider.get_snapshot()
        angles = snapshot.angles

        matrix = build_matrix(angles)
        pair = self.composer.compose(angles)
        dynamics = self.dynamics_deriver.derive(angles, pair)

        validation = validate_rotation(
            snapshot, self.tolerance, composer=self.composer, matrix=matrix, pair=pair
        )
        if not validation.ok:
            self.failures += 1
            logger.warning(
                "[VALIDATE] frame=%d representations disagree: matrix=%.3e dual=%.3e tol=%.1e",
                self.frames,
                validation.matrix_deviation,
                validation.dual_deviation,
                validation.tolerance,
            )
        self.worst_matrix_deviation = max(
            self.worst_matrix_deviation, _finite_or_inf(validation.matrix_deviation)
        )
        self.worst_dual_deviation = max(
            self.worst_dual_deviation, _finite_or_inf(validation.dual_deviation)
        )

        if self.prev_snapshot is None:
            velocity = ZERO_ROTATION
        else:
            velocity = compute_angular_velocity(
                self.prev_snapshot, snapshot, max_magnitude=self.max_angular_velocity
            )
        self.prev_snapshot = snapshot

        pack_rotation_uniforms(snapshot, out=self.rotation_buffer, matrix=matrix, pair=pair)
        pack_style_uniforms(dynamics, out=self.style_buffer)

        projected = project_points(
            transform_points(self.vertices, matrix),
            self.projection_mode,
            self.projection_params,
        )
        frame = DisplayFrame(
            frame_index=self.frames,
            snapshot=snapshot,
            pair=pair,
            dynamics=dynamics,
            validation=validation,
            angular_velocity=velocity,
            polytope=self.polytope.kind.value,
            projected_extent=np.max(np.abs(projected), axis=0),
            failures=self.failures,
        )
        self.frames += 1

        now = self.clock()
        if self.display_interval > 0.0 and (
            self.last_display_t is None or (now - self.last_display_t) >= self.display_interval
        ):
            self.display_provider.update(frame)
            self.last_display_t = now
        return frame
