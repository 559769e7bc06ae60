import math

from hyperspin.control.snapshot import ZERO_SNAPSHOT, make_snapshot
from hyperspin.math4d.angles import RotationAngles


def test_make_snapshot_clamps_confidence():
    assert make_snapshot(RotationAngles(), 0.0, confidence=1.5).confidence == 1.0
    assert make_snapshot(RotationAngles(), 0.0, confidence=-0.2).confidence == 0.0
    assert make_snapshot(RotationAngles(), 0.0, confidence=math.nan).confidence == 0.0


def test_zero_snapshot():
    assert ZERO_SNAPSHOT.angles.is_zero()
    assert ZERO_SNAPSHOT.confidence == 1.0
    assert ZERO_SNAPSHOT.timestamp == 0.0
