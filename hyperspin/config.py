"""CLI config and defaults."""

from __future__ import annotations

import argparse
import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from .math4d.planes import CANONICAL_PLANE_ORDER

ANGLE_SOURCES = ("orbit", "static")
DYNAMICS_DERIVERS = ("angles", "isoclinic")
PROJECTIONS = ("perspective", "stereographic", "orthographic")
POLYTOPES = ("tesseract", "24-cell", "600-cell")
DISPLAY_PROVIDERS = ("tui", "none")
CLI_OUTPUTS = ("live", "scroll")
LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass(frozen=True)
class AppConfig:
    frames: int = 600
    frame_hz: float = 60.0
    tolerance: float = 1e-4
    refine_passes: int = 2
    fail_on_mismatch: bool = False
    angle_source: str = "orbit"
    angle_xy: float = 0.0
    angle_xz: float = 0.0
    angle_yz: float = 0.0
    angle_xw: float = 0.0
    angle_yw: float = 0.0
    angle_zw: float = 0.0
    orbit_base_frequency: float = 0.12
    orbit_amplitude: float = math.pi / 3.5
    orbit_coupling: float = 0.28
    orbit_hyper_coupling: float = 0.14
    weight_xy: float = 1.0
    weight_xz: float = 1.0
    weight_yz: float = 1.0
    weight_xw: float = 1.0
    weight_yw: float = 1.0
    weight_zw: float = 1.0
    dynamics: str = "angles"
    projection: str = "perspective"
    polytope: str = "tesseract"
    projection_depth: float = 3.0
    max_angular_velocity: float = math.pi * 12.0
    display_provider: str = "tui"
    display_hz: float = 5.0
    cli_output: str = "live"
    log_level: str = "info"

    def plane_angles(self) -> dict[str, float]:
        return {p.value: getattr(self, f"angle_{p.value}") for p in CANONICAL_PLANE_ORDER}

    def plane_weights(self) -> dict[str, float]:
        return {p.value: getattr(self, f"weight_{p.value}") for p in CANONICAL_PLANE_ORDER}


_APP_CONFIG_FIELDS = {f.name for f in fields(AppConfig)}
_BOOL_FIELDS = {"fail_on_mismatch"}
_INT_FIELDS = {"frames", "refine_passes"}
_STRING_FIELDS = {
    "angle_source",
    "dynamics",
    "projection",
    "polytope",
    "display_provider",
    "cli_output",
    "log_level",
}
_FLOAT_FIELDS = _APP_CONFIG_FIELDS - _BOOL_FIELDS - _INT_FIELDS - _STRING_FIELDS


def _parse_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        s = value.strip().lower()
        if s in {"1", "true", "yes", "on"}:
            return True
        if s in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"config key '{key}' expects a bool, got {value!r}")


def _coerce_config_value(key: str, value: Any) -> Any:
    try:
        if key in _BOOL_FIELDS:
            return _parse_bool(value, key)
        if key in _INT_FIELDS:
            return int(value)
        if key in _FLOAT_FIELDS:
            return float(value)
        if key in _STRING_FIELDS:
            return "" if value is None else str(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid value for config key '{key}': {value!r}") from exc
    raise ValueError(f"unsupported config key '{key}'")


def _normalize_config_key(raw_key: Any) -> str:
    if not isinstance(raw_key, str):
        raise ValueError(f"config key must be string, got {type(raw_key).__name__}")
    key = raw_key.strip().replace("-", "_")
    if not key:
        raise ValueError("config key cannot be empty")
    return key


def _load_yaml_config(path: str) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise ValueError(f"--config file not found: {p}")
    if not p.is_file():
        raise ValueError(f"--config must point to a file: {p}")

    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"failed to read --config file {p}: {exc}") from exc
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"failed to parse YAML config {p}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"--config root must be a mapping/object, got {type(loaded).__name__}")

    normalized: dict[str, Any] = {}
    for raw_key, raw_value in loaded.items():
        key = _normalize_config_key(raw_key)
        if key not in _APP_CONFIG_FIELDS:
            raise ValueError(f"unknown config key in {p}: {raw_key!r}")
        normalized[key] = _coerce_config_value(key, raw_value)
    return normalized


def build_arg_parser() -> argparse.ArgumentParser:
    defaults = AppConfig()
    ap = argparse.ArgumentParser(prog="hyperspin")
    ap.add_argument(
        "--config",
        type=str,
        default="",
        help="YAML config file path. CLI args override YAML values.",
    )
    ap.add_argument(
        "--frames",
        type=int,
        default=defaults.frames,
        help="Number of frames to run.",
    )
    ap.add_argument(
        "--frame-hz",
        type=float,
        default=defaults.frame_hz,
        help="Frame pacing in Hz (0 runs as fast as possible).",
    )
    ap.add_argument(
        "--tolerance",
        type=float,
        default=defaults.tolerance,
        help="Max per-component deviation allowed between representations.",
    )
    ap.add_argument(
        "--refine-passes",
        type=int,
        default=defaults.refine_passes,
        help="Alternating least-squares passes for ill-conditioned quaternion solves.",
    )
    ap.add_argument(
        "--fail-on-mismatch",
        action="store_true",
        help="Exit with status 1 if any frame fails validation.",
    )
    ap.add_argument(
        "--angle-source",
        choices=list(ANGLE_SOURCES),
        default=defaults.angle_source,
        help="Angle source: harmonic orbit or fixed --angle-* values.",
    )
    for plane in CANONICAL_PLANE_ORDER:
        ap.add_argument(
            f"--angle-{plane.value}",
            type=float,
            default=0.0,
            help=f"Fixed {plane.value} angle in radians for --angle-source static.",
        )
    ap.add_argument(
        "--orbit-base-frequency",
        type=float,
        default=defaults.orbit_base_frequency,
        help="Orbit base frequency in Hz.",
    )
    ap.add_argument(
        "--orbit-amplitude",
        type=float,
        default=defaults.orbit_amplitude,
        help="Orbit amplitude in radians.",
    )
    ap.add_argument(
        "--orbit-coupling",
        type=float,
        default=defaults.orbit_coupling,
        help="Spatial->hyperspatial mean coupling.",
    )
    ap.add_argument(
        "--orbit-hyper-coupling",
        type=float,
        default=defaults.orbit_hyper_coupling,
        help="xy-yz cross coupling into the hyperspatial planes.",
    )
    for plane in CANONICAL_PLANE_ORDER:
        ap.add_argument(
            f"--weight-{plane.value}",
            type=float,
            default=1.0,
            help=f"Gain in [0,1] applied to the {plane.value} angle.",
        )
    ap.add_argument(
        "--dynamics",
        choices=list(DYNAMICS_DERIVERS),
        default=defaults.dynamics,
        help="Dynamics deriver: angles only, or angles plus left/right quaternions.",
    )
    ap.add_argument(
        "--projection",
        choices=list(PROJECTIONS),
        default=defaults.projection,
        help="4D->3D projection for the polytope preview.",
    )
    ap.add_argument(
        "--polytope",
        choices=list(POLYTOPES),
        default=defaults.polytope,
        help="Wireframe polytope rotated and projected each frame.",
    )
    ap.add_argument(
        "--projection-depth",
        type=float,
        default=defaults.projection_depth,
        help="Camera distance along w for perspective/stereographic projection.",
    )
    ap.add_argument(
        "--max-angular-velocity",
        type=float,
        default=defaults.max_angular_velocity,
        help="Per-plane angular velocity clamp in rad/s.",
    )
    ap.add_argument(
        "--display-provider",
        choices=list(DISPLAY_PROVIDERS),
        default=defaults.display_provider,
        help="Display provider: terminal TUI or none.",
    )
    ap.add_argument(
        "--display-hz",
        type=float,
        default=defaults.display_hz,
        help="Display refresh rate in Hz (0 disables display updates).",
    )
    ap.add_argument(
        "--cli-output",
        choices=list(CLI_OUTPUTS),
        default=defaults.cli_output,
        help="TUI output mode: in-place live panel or scrolling logs.",
    )
    ap.add_argument(
        "--log-level",
        choices=list(LOG_LEVELS),
        default=defaults.log_level,
        help="Global log level.",
    )
    return ap


def _require_choice(value: str, choices: tuple[str, ...], flag: str) -> None:
    if value not in choices:
        raise ValueError(f"{flag} must be one of {'|'.join(choices)}, got {value}")


def validate_config(cfg: AppConfig) -> None:
    if cfg.frames < 0:
        raise ValueError(f"--frames must be >= 0, got {cfg.frames}")
    if not math.isfinite(cfg.frame_hz) or cfg.frame_hz < 0.0:
        raise ValueError(f"--frame-hz must be >= 0, got {cfg.frame_hz}")
    if not math.isfinite(cfg.tolerance) or cfg.tolerance <= 0.0:
        raise ValueError(f"--tolerance must be > 0, got {cfg.tolerance}")
    if not (0 <= cfg.refine_passes <= 10):
        raise ValueError(f"--refine-passes must be in [0,10], got {cfg.refine_passes}")
    _require_choice(cfg.angle_source, ANGLE_SOURCES, "--angle-source")
    for plane, value in cfg.plane_angles().items():
        if not math.isfinite(value):
            raise ValueError(f"--angle-{plane} must be a finite number, got {value}")
    if not math.isfinite(cfg.orbit_base_frequency) or cfg.orbit_base_frequency < 0.0:
        raise ValueError(
            f"--orbit-base-frequency must be >= 0, got {cfg.orbit_base_frequency}"
        )
    if not math.isfinite(cfg.orbit_amplitude) or cfg.orbit_amplitude < 0.0:
        raise ValueError(f"--orbit-amplitude must be >= 0, got {cfg.orbit_amplitude}")
    if not math.isfinite(cfg.orbit_coupling) or not math.isfinite(cfg.orbit_hyper_coupling):
        raise ValueError("--orbit-coupling/--orbit-hyper-coupling must be finite numbers")
    for plane, value in cfg.plane_weights().items():
        if not (0.0 <= value <= 1.0):
            raise ValueError(f"--weight-{plane} must be in [0,1], got {value}")
    _require_choice(cfg.dynamics, DYNAMICS_DERIVERS, "--dynamics")
    _require_choice(cfg.projection, PROJECTIONS, "--projection")
    _require_choice(cfg.polytope, POLYTOPES, "--polytope")
    if not math.isfinite(cfg.projection_depth) or cfg.projection_depth <= 0.0:
        raise ValueError(f"--projection-depth must be > 0, got {cfg.projection_depth}")
    if not (cfg.max_angular_velocity > 0.0):
        raise ValueError(
            f"--max-angular-velocity must be > 0, got {cfg.max_angular_velocity}"
        )
    _require_choice(cfg.display_provider, DISPLAY_PROVIDERS, "--display-provider")
    if not math.isfinite(cfg.display_hz) or cfg.display_hz < 0.0:
        raise ValueError(f"--display-hz must be >= 0, got {cfg.display_hz}")
    _require_choice(cfg.cli_output, CLI_OUTPUTS, "--cli-output")
    _require_choice(cfg.log_level, LOG_LEVELS, "--log-level")


def parse_args(argv=None) -> AppConfig:
    bootstrap = argparse.ArgumentParser(add_help=False)
    bootstrap.add_argument("--config", type=str, default="")
    bootstrap_ns, _ = bootstrap.parse_known_args(argv)

    yaml_cfg: dict[str, Any] = {}
    yaml_error: Optional[str] = None
    if bootstrap_ns.config:
        try:
            yaml_cfg = _load_yaml_config(bootstrap_ns.config)
        except ValueError as exc:
            yaml_error = str(exc)

    ap = build_arg_parser()
    if yaml_error is not None:
        ap.error(yaml_error)
    if yaml_cfg:
        ap.set_defaults(**yaml_cfg)
    args = ap.parse_args(argv)

    cfg = AppConfig(**{name: getattr(args, name) for name in _APP_CONFIG_FIELDS})
    try:
        validate_config(cfg)
    except ValueError as exc:
        ap.error(str(exc))
    return cfg
