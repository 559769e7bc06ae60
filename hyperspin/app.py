"""
4D rotation core demo:
- Six plane angles from a snapshot provider (harmonic orbit / static)
- Sequential plane-rotation matrix (authoritative) + isoclinic quaternion pair
- Dynamics scalars derived from the angles (optionally the pair)
- Per-frame cross-check of both representations within tolerance
- Packed float32 uniform buffers for a renderer
- Polytope (tesseract / 24-cell / 600-cell) projected 4D->3D for the status panel
- Display provider (tui/none) renders the same runtime frame data

Deps:
  uv add numpy pyyaml
"""

from __future__ import annotations

import logging

from .config import AppConfig, parse_args
from .control.controller import RotationController
from .control.display_provider import NullDisplayProvider, TuiDisplayProvider
from .control.dynamics import AngleDynamicsDeriver, IsoclinicDynamicsDeriver
from .control.orbit import HarmonicOrbit, OrbitSpec
from .control.snapshot_provider import OrbitSnapshotProvider, StaticSnapshotProvider
from .math4d.angles import RotationAngles
from .math4d.isoclinic import DualQuaternionComposer
from .math4d.planes import create_plane_weights
from .math4d.polytopes import build_polytope
from .math4d.projection import ProjectionMode, ProjectionParameters

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_snapshot_provider(cfg: AppConfig):
    weights = create_plane_weights(cfg.plane_weights())
    if cfg.angle_source == "orbit":
        provider = OrbitSnapshotProvider(
            HarmonicOrbit(
                OrbitSpec(
                    base_frequency=cfg.orbit_base_frequency,
                    amplitude=cfg.orbit_amplitude,
                    coupling=cfg.orbit_coupling,
                    hyper_coupling=cfg.orbit_hyper_coupling,
                )
            ),
            weights=weights,
        )
    elif cfg.angle_source == "static":
        angles = RotationAngles(**cfg.plane_angles())
        provider = StaticSnapshotProvider(angles, weights=weights)
    else:
        raise RuntimeError(f"Unsupported angle source: {cfg.angle_source}")

    logger.info(
        "[SCENE] angle source=%s weights=%s",
        cfg.angle_source,
        " ".join(f"{k}={v:.2f}" for k, v in cfg.plane_weights().items()),
    )
    return provider


def build_dynamics_deriver(cfg: AppConfig, composer: DualQuaternionComposer):
    if cfg.dynamics == "angles":
        return AngleDynamicsDeriver()
    if cfg.dynamics == "isoclinic":
        return IsoclinicDynamicsDeriver(composer)
    raise RuntimeError(f"Unsupported dynamics deriver: {cfg.dynamics}")


def build_display_provider(cfg: AppConfig):
    if cfg.display_provider == "tui":
        return TuiDisplayProvider(cli_output=cfg.cli_output)
    if cfg.display_provider == "none":
        return NullDisplayProvider()
    raise RuntimeError(f"Unsupported display provider: {cfg.display_provider}")


def main(argv=None) -> int:
    cfg = parse_args(argv)
    configure_logging(cfg.log_level)

    composer = DualQuaternionComposer(refine_passes=cfg.refine_passes)
    snapshot_provider = build_snapshot_provider(cfg)
    display_provider = build_display_provider(cfg)
    controller = RotationController(
        snapshot_provider=snapshot_provider,
        display_provider=display_provider,
        composer=composer,
        dynamics_deriver=build_dynamics_deriver(cfg, composer),
        tolerance=cfg.tolerance,
        projection_mode=ProjectionMode(cfg.projection),
        projection_params=ProjectionParameters(depth=cfg.projection_depth),
        max_angular_velocity=cfg.max_angular_velocity,
        display_hz=cfg.display_hz,
        polytope=build_polytope(cfg.polytope),
    )
    logger.info(
        "[SCENE] frames=%d frame_hz=%.1f dynamics=%s polytope=%s projection=%s tolerance=%.1e",
        cfg.frames,
        cfg.frame_hz,
        cfg.dynamics,
        cfg.polytope,
        cfg.projection,
        cfg.tolerance,
    )

    try:
        snapshot_provider.run(controller.tick, cfg.frames, cfg.frame_hz)
    finally:
        display_provider.close()
        snapshot_provider.close()

    logger.info(
        "[SUMMARY] frames=%d failures=%d worst_matrix_dev=%.3e worst_dual_dev=%.3e",
        controller.frames,
        controller.failures,
        controller.worst_matrix_deviation,
        controller.worst_dual_deviation,
    )
    if cfg.fail_on_mismatch and controller.failures > 0:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
