import math

import numpy as np
import pytest

from hyperspin.math4d.angles import (
    ZERO_ROTATION,
    RotationAngles,
    apply_plane_weights,
    wrap_angle,
)
from hyperspin.math4d.planes import RotationPlane, create_plane_weights


def test_wrap_angle_range():
    assert wrap_angle(0.0) == 0.0
    assert wrap_angle(math.pi) == pytest.approx(math.pi)
    assert wrap_angle(-math.pi) == pytest.approx(math.pi)
    assert wrap_angle(2.0 * math.pi + 0.25) == pytest.approx(0.25)
    assert wrap_angle(-2.0 * math.pi - 0.25) == pytest.approx(-0.25)


def test_wrap_angle_passes_non_finite_through():
    assert math.isnan(wrap_angle(math.nan))
    assert wrap_angle(math.inf) == math.inf


def test_from_sequence_requires_six_values():
    a = RotationAngles.from_sequence([0.1, 0.2, 0.3, 0.4, 0.5, 0.6])
    assert a.angle(RotationPlane.YW) == 0.5
    np.testing.assert_allclose(a.spatial(), [0.1, 0.2, 0.3])
    np.testing.assert_allclose(a.hyperspatial(), [0.4, 0.5, 0.6])
    with pytest.raises(ValueError, match="6 plane angles"):
        RotationAngles.from_sequence([0.1, 0.2])


def test_zero_and_finite_checks():
    assert ZERO_ROTATION.is_zero()
    assert not RotationAngles(zw=1e-9).is_zero()
    assert not RotationAngles(xy=math.nan).is_finite()


def test_apply_plane_weights_scales_each_plane():
    weights = create_plane_weights({"xy": 0.5, "zw": 0.0})
    out = apply_plane_weights(RotationAngles(xy=1.0, xz=1.0, zw=1.0), weights)
    assert out.xy == 0.5
    assert out.xz == 1.0
    assert out.zw == 0.0
