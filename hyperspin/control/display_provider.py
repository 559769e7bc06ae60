"""Display providers for rendering runtime rotation state."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass

import numpy as np

from ..math4d.angles import RotationAngles
from ..math4d.isoclinic import DualQuaternionPair
from ..math4d.planes import CANONICAL_PLANE_ORDER, RotationPlane
from .dynamics import RotationDynamics
from .snapshot import RotationSnapshot
from .validator import RotationValidationResult

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DisplayFrame:
    """Runtime frame data shared by all display providers."""

    frame_index: int
    snapshot: RotationSnapshot
    pair: DualQuaternionPair
    dynamics: RotationDynamics
    validation: RotationValidationResult
    angular_velocity: RotationAngles
    polytope: str
    # Half-width of the projected polytope's 3D bounding box.
    projected_extent: np.ndarray
    failures: int


class DisplayProvider:
    """Base display provider interface."""

    def update(self, frame: DisplayFrame) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass


class NullDisplayProvider(DisplayProvider):
    def update(self, frame: DisplayFrame) -> None:  # noqa: ARG002
        pass


def _fmt_planes(a: RotationAngles) -> str:
    return (
        f"xy={a.xy: .3f} xz={a.xz: .3f} yz={a.yz: .3f} "
        f"xw={a.xw: .3f} yw={a.yw: .3f} zw={a.zw: .3f}"
    )


def _dominant_plane(a: RotationAngles) -> RotationPlane:
    """Plane with the largest wrapped magnitude (first in canonical order on ties)."""
    wrapped = a.wrapped()
    return max(CANONICAL_PLANE_ORDER, key=lambda p: abs(wrapped.angle(p)))


def _status_lines(frame: DisplayFrame) -> list[str]:
    lq = frame.pair.left
    rq = frame.pair.right
    d = frame.dynamics
    v = frame.validation
    e = frame.projected_extent
    return [
        f"frame           = {frame.frame_index}  t={frame.snapshot.timestamp:.3f}s",
        f"angles (rad)    = {_fmt_planes(frame.snapshot.angles)}",
        f"velocity (rad/s)= {_fmt_planes(frame.angular_velocity)}",
        f"dominant plane  = {_dominant_plane(frame.snapshot.angles).label}",
        f"left [w,x,y,z]  = [{lq[0]: .4f}, {lq[1]: .4f}, {lq[2]: .4f}, {lq[3]: .4f}]",
        f"right [w,x,y,z] = [{rq[0]: .4f}, {rq[1]: .4f}, {rq[2]: .4f}, {rq[3]: .4f}]",
        (
            f"dynamics        = energy={d.energy:.3f} harmonic={d.harmonic:.3f} "
            f"thickness={d.thickness:.3f} chaos={d.chaos:.3f}"
        ),
        f"polytope        = {frame.polytope}",
        f"extent xyz      = [{e[0]: .3f}, {e[1]: .3f}, {e[2]: .3f}]",
        (
            f"validation      = ok={v.ok} matrix={v.matrix_deviation:.2e} "
            f"dual={v.dual_deviation:.2e} failures={frame.failures}"
        ),
    ]


class _CliStatsSink:
    def __init__(self, mode: str):
        self.mode = "live" if mode == "live" else "scroll"
        self._is_tty = bool(getattr(sys.stderr, "isatty", lambda: False)())
        self._live_enabled = self.mode == "live" and self._is_tty
        self._line_count = 0

    def emit(self, lines: list[str], scroll_line: str) -> None:
        if not self._live_enabled:
            logger.info(scroll_line)
            return

        out = sys.stderr
        if self._line_count > 0:
            out.write(f"\x1b[{self._line_count}F")

        max_lines = max(self._line_count, len(lines))
        for i in range(max_lines):
            line = lines[i] if i < len(lines) else ""
            out.write("\x1b[2K")
            out.write(line)
            out.write("\n")
        out.flush()
        self._line_count = len(lines)


class TuiDisplayProvider(DisplayProvider):
    """Terminal panel (live on a TTY, scrolling log lines otherwise)."""

    def __init__(self, cli_output: str = "live"):
        self.cli_sink = _CliStatsSink(cli_output)

    def update(self, frame: DisplayFrame) -> None:
        v = frame.validation
        d = frame.dynamics
        self.cli_sink.emit(
            lines=["hyperspin SO(4) core"] + _status_lines(frame),
            scroll_line=(
                "[FRAME] idx=%d %s energy=%.3f ok=%s matrix_dev=%.2e dual_dev=%.2e"
                % (
                    frame.frame_index,
                    _fmt_planes(frame.snapshot.angles),
                    d.energy,
                    v.ok,
                    v.matrix_deviation,
                    v.dual_deviation,
                )
            ),
        )
