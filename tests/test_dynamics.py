import math

import numpy as np
import pytest

from hyperspin.control.dynamics import (
    THICKNESS_RANGE,
    ZERO_DYNAMICS,
    AngleDynamicsDeriver,
    IsoclinicDynamicsDeriver,
    derive_isoclinic_dynamics,
    derive_rotation_dynamics,
)
from hyperspin.math4d.angles import ZERO_ROTATION, RotationAngles
from hyperspin.math4d.isoclinic import compose_dual

_UNIT_FIELDS = ("energy", "spatial", "hyperspatial", "harmonic", "saturation", "brightness", "chaos")


def _assert_bounded(d):
    for name in _UNIT_FIELDS:
        value = getattr(d, name)
        assert math.isfinite(value), name
        assert 0.0 <= value <= 1.0, name
    lo, hi = THICKNESS_RANGE
    assert lo <= d.thickness <= hi


def test_random_angles_give_bounded_dynamics():
    rng = np.random.default_rng(5)
    for _ in range(64):
        angles = RotationAngles.from_sequence(rng.uniform(-10.0, 10.0, size=6))
        _assert_bounded(derive_rotation_dynamics(angles))
        _assert_bounded(derive_isoclinic_dynamics(angles, compose_dual(angles)))


def test_zero_rotation_dynamics_are_finite():
    d = derive_rotation_dynamics(ZERO_ROTATION)
    _assert_bounded(d)
    assert d.energy == 0.0
    assert d.spatial == 0.0
    assert d.hyperspatial == 0.0
    assert d.harmonic == 0.5
    np.testing.assert_array_equal(ZERO_DYNAMICS.as_array(), d.as_array())


def test_spatial_vs_hyperspatial_split():
    spatial_only = derive_rotation_dynamics(RotationAngles(xy=1.0, yz=-0.5))
    assert spatial_only.spatial > 0.0
    assert spatial_only.hyperspatial == 0.0

    hyper_only = derive_rotation_dynamics(RotationAngles(zw=1.0))
    assert hyper_only.spatial == 0.0
    assert hyper_only.hyperspatial > 0.0


def test_dynamics_use_wrapped_angles():
    a = derive_rotation_dynamics(RotationAngles(xz=0.4))
    b = derive_rotation_dynamics(RotationAngles(xz=0.4 + 2.0 * math.pi))
    np.testing.assert_allclose(a.as_array(), b.as_array(), atol=1e-12)


def test_isoclinic_deriver_boosts_energy_for_hyperspatial_rotation():
    angles = RotationAngles(xw=1.2)
    base = AngleDynamicsDeriver().derive(angles)
    boosted = IsoclinicDynamicsDeriver().derive(angles)
    assert boosted.energy > base.energy


def test_isoclinic_deriver_matches_angles_for_spatial_energy():
    # Purely spatial rotations fix the w axis, so left == right and no boost applies.
    angles = RotationAngles(xy=0.7, xz=0.2)
    base = AngleDynamicsDeriver().derive(angles)
    iso = IsoclinicDynamicsDeriver().derive(angles, compose_dual(angles))
    assert iso.energy == pytest.approx(base.energy, abs=1e-12)
