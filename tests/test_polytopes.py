import numpy as np
import pytest

from hyperspin.math4d.polytopes import (
    GOLDEN_RATIO,
    PolytopeKind,
    build_polytope,
    six_hundred_cell,
    tesseract,
    twenty_four_cell,
)


def _degrees(polytope):
    return np.bincount(polytope.edges.reshape(-1), minlength=polytope.vertex_count)


def _edge_lengths(polytope):
    v = polytope.vertices
    return np.linalg.norm(v[polytope.edges[:, 0]] - v[polytope.edges[:, 1]], axis=1)


def test_tesseract_has_16_vertices_and_32_edges():
    p = tesseract()
    assert p.vertices.shape == (16, 4)
    assert p.edge_count == 32
    np.testing.assert_allclose(_edge_lengths(p), 2.0)
    assert np.all(_degrees(p) == 4)


def test_twenty_four_cell_has_24_vertices_and_96_unit_edges():
    p = twenty_four_cell()
    assert p.vertex_count == 24
    assert p.edge_count == 96
    np.testing.assert_allclose(np.linalg.norm(p.vertices, axis=1), 1.0)
    np.testing.assert_allclose(_edge_lengths(p), 1.0)
    assert np.all(_degrees(p) == 8)


def test_six_hundred_cell_has_120_vertices_and_720_edges():
    p = six_hundred_cell()
    assert p.vertex_count == 120
    assert p.edge_count == 720
    assert len({tuple(np.round(v, 6)) for v in p.vertices}) == 120
    np.testing.assert_allclose(np.linalg.norm(p.vertices, axis=1), 1.0)
    np.testing.assert_allclose(_edge_lengths(p), 1.0 / GOLDEN_RATIO)
    assert np.all(_degrees(p) == 12)


def test_edges_are_ordered_index_pairs():
    for kind in PolytopeKind:
        p = build_polytope(kind)
        assert p.kind is kind
        assert np.all(p.edges[:, 0] < p.edges[:, 1])


def test_build_polytope_accepts_config_names():
    assert build_polytope("24-cell").kind is PolytopeKind.TWENTY_FOUR_CELL
    with pytest.raises(ValueError):
        build_polytope("dodecahedron")
