from dataclasses import replace

import pytest

from hyperspin.app import build_display_provider, build_dynamics_deriver, build_snapshot_provider, main
from hyperspin.config import AppConfig
from hyperspin.control.display_provider import NullDisplayProvider
from hyperspin.control.snapshot_provider import StaticSnapshotProvider
from hyperspin.math4d.isoclinic import DualQuaternionComposer


def test_main_runs_static_rotation():
    rc = main(
        [
            "--frames",
            "3",
            "--frame-hz",
            "0",
            "--display-provider",
            "none",
            "--angle-source",
            "static",
            "--angle-xy",
            "0.4",
            "--angle-zw",
            "-1.2",
            "--dynamics",
            "isoclinic",
            "--fail-on-mismatch",
        ]
    )
    assert rc == 0


def test_main_runs_orbit_with_scrolling_tui():
    rc = main(["--frames", "2", "--frame-hz", "0", "--cli-output", "scroll", "--display-hz", "0"])
    assert rc == 0


def test_builders_reject_unsupported_names():
    cfg = AppConfig()
    with pytest.raises(RuntimeError, match="angle source"):
        build_snapshot_provider(replace(cfg, angle_source="imu"))
    with pytest.raises(RuntimeError, match="dynamics"):
        build_dynamics_deriver(replace(cfg, dynamics="bad"), DualQuaternionComposer())
    with pytest.raises(RuntimeError, match="display provider"):
        build_display_provider(replace(cfg, display_provider="3d"))


def test_builders_map_config_names():
    cfg = replace(AppConfig(), angle_source="static", angle_yz=0.3, display_provider="none")
    provider = build_snapshot_provider(cfg)
    assert isinstance(provider, StaticSnapshotProvider)
    assert provider.angles.yz == 0.3
    assert isinstance(build_display_provider(cfg), NullDisplayProvider)


def test_main_runs_each_polytope():
    for name in ("24-cell", "600-cell"):
        rc = main(["--frames", "2", "--frame-hz", "0", "--display-provider", "none", "--polytope", name])
        assert rc == 0
