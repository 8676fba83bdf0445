import numpy as np
import pytest

from gwmesh.errors import InvalidDimension, InvalidIndex
from gwmesh.model.adjacency import AdjacencyMode, connected_indices
from conftest import layered_hex_mesh


@pytest.mark.parametrize("dim", [2, 3])
def test_primary_axis_table_is_an_involution(dim):
    for i in range(2 ** dim):
        (j,) = connected_indices(dim, i)
        (k,) = connected_indices(dim, j)
        assert k == i
        assert j != i


@pytest.mark.parametrize("dim", [2, 3])
def test_primary_axis_neighbour_differs_only_in_vertical_bit(dim):
    for i in range(2 ** dim):
        (j,) = connected_indices(dim, i, AdjacencyMode.PRIMARY_AXIS)
        assert i ^ j == 1 << (dim - 1)


def test_full_table_in_2d_is_a_four_cycle():
    previous, current = None, 0
    path = [current]
    for _ in range(4):
        neighbours = connected_indices(2, current, AdjacencyMode.FULL)
        assert len(neighbours) == 2
        step = next(n for n in neighbours if n != previous)
        previous, current = current, step
        path.append(current)
    assert path == [0, 1, 3, 2, 0]


def test_full_table_in_3d_is_the_hexahedron_edge_graph():
    edges = set()
    for i in range(8):
        neighbours = connected_indices(3, i, "full")
        assert len(neighbours) == 3
        for j in neighbours:
            # an edge of the unit cube flips exactly one coordinate bit
            assert bin(i ^ j).count("1") == 1
            assert i in connected_indices(3, j, AdjacencyMode.FULL)
            edges.add(frozenset((i, j)))
    assert len(edges) == 12


def test_numpy_integer_index_accepted():
    assert connected_indices(3, np.int64(5)) == (1,)


@pytest.mark.parametrize("dim, index", [(2, 4), (2, -1), (3, 8), (3, 1.0), (3, True), (2, "0")])
def test_out_of_range_index_raises(dim, index):
    with pytest.raises(InvalidIndex):
        connected_indices(dim, index)


@pytest.mark.parametrize("dim", [0, 1, 4])
def test_unsupported_dimension_raises(dim):
    with pytest.raises(InvalidDimension):
        connected_indices(dim, 0)


def test_invalid_index_is_also_an_index_error():
    with pytest.raises(IndexError):
        connected_indices(2, 9)


def test_table_matches_vertical_geometry():
    mesh = layered_hex_mesh(n=1, n_layers=1)
    cell = mesh.cells[0]
    for i in range(8):
        (j,) = connected_indices(3, i)
        delta = cell.nodes[j].coords - cell.nodes[i].coords
        assert delta[:2] == pytest.approx([0.0, 0.0])
        assert abs(delta[2]) == pytest.approx(1.0)
