import math

import numpy as np

from hyperspin.control.controller import RotationController
from hyperspin.control.display_provider import DisplayProvider
from hyperspin.control.dynamics import IsoclinicDynamicsDeriver
from hyperspin.control.orbit import HarmonicOrbit
from hyperspin.control.snapshot import make_snapshot
from hyperspin.control.snapshot_provider import (
    OrbitSnapshotProvider,
    SnapshotProvider,
    StaticSnapshotProvider,
)
from hyperspin.control.uniforms import OFFSET_LEFT, OFFSET_MATRIX, OFFSET_TIMESTAMP
from hyperspin.math4d.angles import RotationAngles
from hyperspin.math4d.isoclinic import DualQuaternionComposer
from hyperspin.math4d.polytopes import six_hundred_cell
from hyperspin.math4d.so4 import build_matrix


class FakeClock:
    def __init__(self, t: float = 0.0):
        self.t = t

    def __call__(self) -> float:
        return self.t


class RecordingDisplayProvider(DisplayProvider):
    def __init__(self):
        self.frames = []

    def update(self, frame) -> None:
        self.frames.append(frame)


class NanSnapshotProvider(SnapshotProvider):
    def get_snapshot(self):
        return make_snapshot(RotationAngles(xw=math.nan), timestamp=0.0)


def test_tick_packs_buffers_and_validates():
    clock = FakeClock(2.0)
    angles = RotationAngles(xy=0.5, xz=-0.3, yz=0.8, xw=-0.2, yw=1.1, zw=0.4)
    display = RecordingDisplayProvider()
    controller = RotationController(
        StaticSnapshotProvider(angles, clock=clock),
        display,
        dynamics_deriver=IsoclinicDynamicsDeriver(),
        clock=clock,
    )
    frame = controller.tick()

    assert frame.validation.ok
    assert controller.failures == 0
    assert controller.frames == 1
    assert len(display.frames) == 1
    assert controller.rotation_buffer[OFFSET_TIMESTAMP] == 2.0
    np.testing.assert_allclose(
        controller.rotation_buffer[OFFSET_MATRIX:OFFSET_MATRIX + 16],
        build_matrix(angles).reshape(-1, order="F"),
        atol=1e-6,
    )
    np.testing.assert_allclose(controller.style_buffer, frame.dynamics.as_array(), rtol=1e-6)
    assert frame.projected_extent.shape == (3,)
    assert np.all(frame.projected_extent > 0.0)


def test_display_updates_are_rate_limited():
    clock = FakeClock()
    display = RecordingDisplayProvider()
    controller = RotationController(
        StaticSnapshotProvider(RotationAngles(xy=0.1), clock=clock),
        display,
        display_hz=2.0,
        clock=clock,
    )
    for _ in range(5):
        controller.tick()
        clock.t += 0.25
    assert controller.frames == 5
    assert [f.frame_index for f in display.frames] == [0, 2, 4]


def test_zero_display_hz_disables_updates():
    clock = FakeClock()
    display = RecordingDisplayProvider()
    controller = RotationController(
        StaticSnapshotProvider(RotationAngles(), clock=clock), display, display_hz=0.0, clock=clock
    )
    controller.tick()
    assert display.frames == []


def test_angular_velocity_follows_orbit():
    clock = FakeClock(10.0)
    orbit = HarmonicOrbit()
    controller = RotationController(
        OrbitSnapshotProvider(orbit, clock=clock), RecordingDisplayProvider(), clock=clock
    )
    first = controller.tick()
    assert first.angular_velocity.is_zero()

    clock.t = 10.1
    second = controller.tick()
    expected = (orbit.angles_at(0.1).as_array() - orbit.angles_at(0.0).as_array()) / 0.1
    np.testing.assert_allclose(second.angular_velocity.as_array(), expected, atol=1e-6)


def test_non_finite_angles_count_as_failures():
    clock = FakeClock()
    controller = RotationController(NanSnapshotProvider(clock=clock), RecordingDisplayProvider(), clock=clock)
    frame = controller.tick()
    assert not frame.validation.ok
    assert controller.failures == 1
    assert controller.worst_matrix_deviation == math.inf


def test_run_drives_controller_for_requested_frames():
    clock = FakeClock()
    provider = StaticSnapshotProvider(RotationAngles(yw=0.3), clock=clock, sleep=lambda _: None)
    controller = RotationController(provider, RecordingDisplayProvider(), clock=clock)
    provider.run(controller.tick, frames=7, frame_hz=0.0)
    assert controller.frames == 7
    assert controller.failures == 0
    assert controller.worst_dual_deviation < 1e-9


class CountingComposer(DualQuaternionComposer):
    def __init__(self):
        super().__init__()
        self.calls = 0

    def solve(self, matrix):
        self.calls += 1
        return super().solve(matrix)


def test_tick_solves_pair_once_and_validates_packed_pair():
    clock = FakeClock()
    composer = CountingComposer()
    controller = RotationController(
        StaticSnapshotProvider(RotationAngles(xz=0.6, yw=-1.4), clock=clock),
        RecordingDisplayProvider(),
        composer=composer,
        clock=clock,
    )
    frame = controller.tick()
    assert composer.calls == 1
    assert frame.validation.ok
    np.testing.assert_allclose(
        controller.rotation_buffer[OFFSET_LEFT:OFFSET_LEFT + 4], frame.pair.left, atol=1e-6
    )


def test_controller_projects_selected_polytope():
    clock = FakeClock()
    controller = RotationController(
        StaticSnapshotProvider(RotationAngles(xw=0.3), clock=clock),
        RecordingDisplayProvider(),
        polytope=six_hundred_cell(),
        clock=clock,
    )
    frame = controller.tick()
    assert controller.vertices.shape == (120, 4)
    assert frame.polytope == "600-cell"
