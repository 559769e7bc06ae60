import math

import numpy as np

from hyperspin.control.snapshot import ZERO_SNAPSHOT, make_snapshot
from hyperspin.control.validator import TEST_VECTORS, validate_rotation
from hyperspin.math4d.angles import RotationAngles
from hyperspin.math4d.isoclinic import compose_dual
from hyperspin.math4d.so4 import build_matrix


def test_zero_snapshot_validates_exactly():
    result = validate_rotation(ZERO_SNAPSHOT)
    assert result.ok
    assert result.matrix_deviation == 0.0
    assert result.dual_deviation == 0.0
    assert result.sample_count == len(TEST_VECTORS)


def test_representative_rotations_pass():
    rng = np.random.default_rng(21)
    samples = [RotationAngles(xy=0.5, xz=-0.3, yz=0.8, xw=-0.2, yw=1.1, zw=0.4)]
    samples += [
        RotationAngles.from_sequence(rng.uniform(-math.pi, math.pi, size=6)) for _ in range(32)
    ]
    for angles in samples:
        result = validate_rotation(make_snapshot(angles, timestamp=1.0))
        assert result.ok, angles
        assert result.matrix_deviation < 1e-9
        assert result.dual_deviation < 1e-9


def test_non_finite_angles_fail_without_raising():
    result = validate_rotation(make_snapshot(RotationAngles(xw=math.nan), timestamp=0.0))
    assert not result.ok

    result = validate_rotation(make_snapshot(RotationAngles(yz=math.inf), timestamp=0.0))
    assert not result.ok


def test_tolerance_is_reported():
    result = validate_rotation(ZERO_SNAPSHOT, tolerance=1e-6)
    assert result.tolerance == 1e-6


def test_precomputed_matrix_and_pair_are_checked_as_given():
    angles = RotationAngles(xy=0.5, xz=-0.3, yz=0.8, xw=-0.2, yw=1.1, zw=0.4)
    snapshot = make_snapshot(angles, timestamp=0.0)
    pair = compose_dual(angles)
    assert validate_rotation(snapshot, matrix=build_matrix(angles), pair=pair).ok

    wrong_pair = compose_dual(RotationAngles(xy=0.5))
    result = validate_rotation(snapshot, pair=wrong_pair)
    assert not result.ok
    assert result.matrix_deviation < 1e-9
    assert result.dual_deviation > 1e-2

    result = validate_rotation(snapshot, matrix=np.eye(4), pair=pair)
    assert not result.ok
    assert result.matrix_deviation > 1e-2
