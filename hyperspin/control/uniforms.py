"""Packed float32 buffers consumed by the rendering layer.

Rotation block layout (60 floats, float32, std140-friendly vec4 rows):

  0-2    xy, xz, yz raw angles          3   pad
  4-6    xw, yw, zw raw angles          7   pad
  8-10   sin(xy, xz, yz)               11   pad
  12-14  cos(xy, xz, yz)               15   pad
  16-18  sin(xw, yw, zw)               19   pad
  20-22  cos(xw, yw, zw)               23   pad
  24-26  |xy|, |xz|, |yz| / pi         27   pad   (wrapped angles, in [0, 1])
  28-30  |xw|, |yw|, |zw| / pi         31   pad   (wrapped angles, in [0, 1])
  32     confidence
  33     timestamp (seconds)
  34     (|xy| + |xz| + |yz|) / (3 pi)
  35     (|xw| + |yw| + |zw|) / (3 pi)   (34-35 wrapped)
  36-51  rotation matrix, column-major (M[:, 0] first)
  52-55  left quaternion  [w, x, y, z]
  56-59  right quaternion [w, x, y, z]

Style block (8 floats): RotationDynamics in field order.
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from ..math4d.angles import RotationAngles
from ..math4d.isoclinic import DualQuaternionComposer, DualQuaternionPair
from ..math4d.so4 import build_matrix
from .dynamics import RotationDynamics
from .snapshot import RotationSnapshot

ROTATION_UNIFORM_FLOATS = 60
STYLE_UNIFORM_FLOATS = 8

OFFSET_SPATIAL = 0
OFFSET_HYPERSPATIAL = 4
OFFSET_SPATIAL_SIN = 8
OFFSET_SPATIAL_COS = 12
OFFSET_HYPER_SIN = 16
OFFSET_HYPER_COS = 20
OFFSET_SPATIAL_NORM = 24
OFFSET_HYPER_NORM = 28
OFFSET_CONFIDENCE = 32
OFFSET_TIMESTAMP = 33
OFFSET_SPATIAL_AGGREGATE = 34
OFFSET_HYPER_AGGREGATE = 35
OFFSET_MATRIX = 36
OFFSET_LEFT = 52
OFFSET_RIGHT = 56


def _target(out: Optional[np.ndarray], size: int) -> np.ndarray:
    if out is None:
        return np.zeros(size, dtype=np.float32)
    if out.dtype != np.float32 or out.shape != (size,):
        raise ValueError(f"Expected float32 buffer of shape ({size},), got {out.dtype} {out.shape}")
    out.fill(0.0)
    return out


def pack_rotation_uniforms(
    snapshot: RotationSnapshot,
    out: Optional[np.ndarray] = None,
    composer: Optional[DualQuaternionComposer] = None,
    matrix: Optional[np.ndarray] = None,
    pair: Optional[DualQuaternionPair] = None,
) -> np.ndarray:
    """Write one frame's rotation block.

    ``out`` is caller-owned scratch reused across frames by a single caller;
    when omitted a fresh buffer is allocated. A precomputed ``matrix``/``pair``
    for the same angles skips recomposition.
    """
    data = _target(out, ROTATION_UNIFORM_FLOATS)
    angles = snapshot.angles
    spatial = angles.spatial()
    hyper = angles.hyperspatial()
    # Magnitudes use wrapped angles so the normalized slots stay in [0, 1].
    wrapped = angles.wrapped()
    spatial_mag = np.abs(wrapped.spatial())
    hyper_mag = np.abs(wrapped.hyperspatial())

    if matrix is None:
        matrix = build_matrix(angles)
    if pair is None:
        pair = (composer or DualQuaternionComposer()).compose(angles)

    with np.errstate(invalid="ignore"):
        data[OFFSET_SPATIAL:OFFSET_SPATIAL + 3] = spatial
        data[OFFSET_HYPERSPATIAL:OFFSET_HYPERSPATIAL + 3] = hyper
        data[OFFSET_SPATIAL_SIN:OFFSET_SPATIAL_SIN + 3] = np.sin(spatial)
        data[OFFSET_SPATIAL_COS:OFFSET_SPATIAL_COS + 3] = np.cos(spatial)
        data[OFFSET_HYPER_SIN:OFFSET_HYPER_SIN + 3] = np.sin(hyper)
        data[OFFSET_HYPER_COS:OFFSET_HYPER_COS + 3] = np.cos(hyper)
    data[OFFSET_SPATIAL_NORM:OFFSET_SPATIAL_NORM + 3] = spatial_mag / math.pi
    data[OFFSET_HYPER_NORM:OFFSET_HYPER_NORM + 3] = hyper_mag / math.pi

    data[OFFSET_CONFIDENCE] = snapshot.confidence
    data[OFFSET_TIMESTAMP] = snapshot.timestamp
    data[OFFSET_SPATIAL_AGGREGATE] = float(np.sum(spatial_mag)) / (3.0 * math.pi)
    data[OFFSET_HYPER_AGGREGATE] = float(np.sum(hyper_mag)) / (3.0 * math.pi)

    data[OFFSET_MATRIX:OFFSET_MATRIX + 16] = np.asarray(matrix, dtype=np.float64).reshape(-1, order="F")
    data[OFFSET_LEFT:OFFSET_LEFT + 4] = pair.left
    data[OFFSET_RIGHT:OFFSET_RIGHT + 4] = pair.right
    return data


def unpack_rotation_uniforms(
    data: np.ndarray,
) -> tuple[RotationAngles, np.ndarray, DualQuaternionPair]:
    """Read back (angles, 4x4 matrix, pair) from a packed rotation block."""
    buf = np.asarray(data, dtype=np.float64).reshape(-1)
    if buf.shape != (ROTATION_UNIFORM_FLOATS,):
        raise ValueError(f"Expected {ROTATION_UNIFORM_FLOATS} floats, got {buf.shape}")
    angles = RotationAngles.from_sequence(
        list(buf[OFFSET_SPATIAL:OFFSET_SPATIAL + 3])
        + list(buf[OFFSET_HYPERSPATIAL:OFFSET_HYPERSPATIAL + 3])
    )
    matrix = buf[OFFSET_MATRIX:OFFSET_MATRIX + 16].reshape((4, 4), order="F")
    pair = DualQuaternionPair(
        left=buf[OFFSET_LEFT:OFFSET_LEFT + 4].copy(),
        right=buf[OFFSET_RIGHT:OFFSET_RIGHT + 4].copy(),
    )
    return angles, matrix, pair


def pack_style_uniforms(dynamics: RotationDynamics, out: Optional[np.ndarray] = None) -> np.ndarray:
    data = _target(out, STYLE_UNIFORM_FLOATS)
    data[:] = dynamics.as_array()
    return data
