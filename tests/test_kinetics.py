import math

from hyperspin.control.snapshot import make_snapshot
from hyperspin.math4d.angles import ZERO_ROTATION, RotationAngles
from hyperspin.math4d.kinetics import compute_angular_velocity


def test_finite_difference_per_plane():
    prev = make_snapshot(RotationAngles(xy=0.1, zw=-0.2), timestamp=1.0)
    cur = make_snapshot(RotationAngles(xy=0.3, zw=-0.1), timestamp=1.5)
    v = compute_angular_velocity(prev, cur)
    assert math.isclose(v.xy, 0.4)
    assert math.isclose(v.zw, 0.2)
    assert v.xz == 0.0


def test_small_or_negative_dt_returns_zero():
    prev = make_snapshot(RotationAngles(xy=0.1), timestamp=1.0)
    assert compute_angular_velocity(prev, make_snapshot(RotationAngles(xy=0.5), timestamp=1.0)) == ZERO_ROTATION
    assert compute_angular_velocity(prev, make_snapshot(RotationAngles(xy=0.5), timestamp=0.5)) == ZERO_ROTATION
    assert (
        compute_angular_velocity(prev, make_snapshot(RotationAngles(xy=0.5), timestamp=1.0 + 1e-4))
        == ZERO_ROTATION
    )


def test_velocity_is_clamped():
    prev = make_snapshot(ZERO_ROTATION, timestamp=0.0)
    cur = make_snapshot(RotationAngles(xw=3.0, yw=-3.0), timestamp=0.01)
    v = compute_angular_velocity(prev, cur, max_magnitude=10.0)
    assert v.xw == 10.0
    assert v.yw == -10.0


def test_non_finite_delta_becomes_zero():
    prev = make_snapshot(ZERO_ROTATION, timestamp=0.0)
    cur = make_snapshot(RotationAngles(xz=math.nan), timestamp=1.0)
    assert compute_angular_velocity(prev, cur).xz == 0.0
