"""Regular 4D polytopes used as wireframe previews.

All are centred on the origin. Edges join every vertex pair at the shortest
non-zero distance, which for these three is exactly the polytope's edge set.
"""

from __future__ import annotations

import itertools
import math
from dataclasses import dataclass
from enum import Enum

import numpy as np

GOLDEN_RATIO = (1.0 + math.sqrt(5.0)) / 2.0


class PolytopeKind(str, Enum):
    TESSERACT = "tesseract"
    TWENTY_FOUR_CELL = "24-cell"
    SIX_HUNDRED_CELL = "600-cell"


@dataclass(frozen=True, slots=True, eq=False)
class Polytope:
    kind: PolytopeKind
    # (V, 4) float64
    vertices: np.ndarray
    # (E, 2) int64 vertex index pairs, i < j
    edges: np.ndarray

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def edge_count(self) -> int:
        return int(self.edges.shape[0])


def _shortest_edges(vertices: np.ndarray, tol: float = 1e-6) -> np.ndarray:
    diff = vertices[:, None, :] - vertices[None, :, :]
    d2 = np.einsum("ijk,ijk->ij", diff, diff)
    i, j = np.triu_indices(len(vertices), k=1)
    pair_d2 = d2[i, j]
    mask = np.abs(pair_d2 - float(np.min(pair_d2))) < tol
    return np.stack([i[mask], j[mask]], axis=1).astype(np.int64)


def _axis_vertices() -> list[tuple[float, ...]]:
    """(+-1, 0, 0, 0) and permutations: the 16-cell."""
    out = []
    for axis in range(4):
        for sign in (-1.0, 1.0):
            v = [0.0, 0.0, 0.0, 0.0]
            v[axis] = sign
            out.append(tuple(v))
    return out


def _half_vertices() -> list[tuple[float, ...]]:
    """(+-1/2, +-1/2, +-1/2, +-1/2)."""
    return list(itertools.product((-0.5, 0.5), repeat=4))


def _is_even_permutation(perm: tuple[int, ...]) -> bool:
    inversions = sum(1 for a, b in itertools.combinations(perm, 2) if a > b)
    return inversions % 2 == 0


def _golden_vertices() -> list[tuple[float, ...]]:
    """Even permutations of (0, +-1/2, +-phi/2, +-1/(2 phi)): 96 vertices."""
    base = (0.0, 0.5, GOLDEN_RATIO / 2.0, 0.5 / GOLDEN_RATIO)
    out = []
    for perm in itertools.permutations(range(4)):
        if not _is_even_permutation(perm):
            continue
        for signs in itertools.product((-1.0, 1.0), repeat=3):
            v = [0.0, 0.0, 0.0, 0.0]
            for slot, src in enumerate(perm):
                if src > 0:
                    v[slot] = base[src] * signs[src - 1]
            out.append(tuple(v))
    return out


def tesseract() -> Polytope:
    """16 vertices at (+-1, +-1, +-1, +-1), 32 edges."""
    verts = np.array(list(itertools.product((-1.0, 1.0), repeat=4)), dtype=np.float64)
    return Polytope(PolytopeKind.TESSERACT, verts, _shortest_edges(verts))


def twenty_four_cell() -> Polytope:
    """24 vertices (16-cell + half-unit hypercube), 96 unit edges."""
    verts = np.array(_axis_vertices() + _half_vertices(), dtype=np.float64)
    return Polytope(PolytopeKind.TWENTY_FOUR_CELL, verts, _shortest_edges(verts))


def six_hundred_cell() -> Polytope:
    """120 vertices on the unit 3-sphere, 720 edges of length 1/phi."""
    verts = np.array(_half_vertices() + _axis_vertices() + _golden_vertices(), dtype=np.float64)
    return Polytope(PolytopeKind.SIX_HUNDRED_CELL, verts, _shortest_edges(verts))


_BUILDERS = {
    PolytopeKind.TESSERACT: tesseract,
    PolytopeKind.TWENTY_FOUR_CELL: twenty_four_cell,
    PolytopeKind.SIX_HUNDRED_CELL: six_hundred_cell,
}


def build_polytope(kind: PolytopeKind | str) -> Polytope:
    return _BUILDERS[PolytopeKind(kind)]()
