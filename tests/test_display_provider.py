import logging

from hyperspin.control.controller import RotationController
from hyperspin.control.display_provider import (
    NullDisplayProvider,
    TuiDisplayProvider,
    _dominant_plane,
    _status_lines,
)
from hyperspin.control.snapshot_provider import StaticSnapshotProvider
from hyperspin.math4d.angles import RotationAngles
from hyperspin.math4d.planes import RotationPlane


def _clock() -> float:
    return 1.0


def _frame():
    clock = _clock
    controller = RotationController(
        StaticSnapshotProvider(RotationAngles(xy=0.2, yw=-0.4), clock=clock),
        NullDisplayProvider(),
        clock=clock,
    )
    return controller.tick()


def test_status_lines_cover_pair_and_validation():
    lines = _status_lines(_frame())
    assert any(line.startswith("left [w,x,y,z]") for line in lines)
    assert any(line.startswith("right [w,x,y,z]") for line in lines)
    assert any("ok=True" in line for line in lines)


def test_tui_scroll_mode_logs_frame_line(caplog):
    provider = TuiDisplayProvider(cli_output="scroll")
    with caplog.at_level(logging.INFO, logger="hyperspin.control.display_provider"):
        provider.update(_frame())
    assert any("[FRAME] idx=0" in r.getMessage() for r in caplog.records)


def test_status_lines_name_dominant_plane_and_polytope():
    lines = _status_lines(_frame())
    assert "dominant plane  = YW vertical weave" in lines
    assert "polytope        = tesseract" in lines


def test_dominant_plane_uses_wrapped_magnitude():
    # 6.0 wraps to about -0.28, so xz (1.0) dominates.
    assert _dominant_plane(RotationAngles(xy=6.0, xz=1.0)) is RotationPlane.XZ
