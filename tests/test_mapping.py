import numpy as np
import pytest

from gwmesh.errors import TransformationFailed
from gwmesh.fea.analysis.mapping import MappingQ1
from gwmesh.fea.analysis.node import Node
from gwmesh.fea.analysis.finite_elements.quad4 import Quad4


@pytest.mark.parametrize("cell_fixture", ["distorted_quad", "distorted_hex"])
def test_inverse_recovers_reference_coordinates(cell_fixture, request):
    cell = request.getfixturevalue(cell_fixture)
    mapping = MappingQ1()
    rng = np.random.default_rng(5)
    for unit in rng.uniform(0.05, 0.95, size=(10, cell.dim)):
        point = mapping.transform_unit_to_real(cell, unit)
        assert mapping.transform_real_to_unit(cell, point) == pytest.approx(unit, abs=1e-10)


def test_vertex_and_edge_points_map_to_cell_boundary(unit_quad):
    mapping = MappingQ1()
    assert mapping.transform_real_to_unit(unit_quad, [1.0, 1.0]) == pytest.approx([1.0, 1.0])
    assert mapping.transform_real_to_unit(unit_quad, [0.5, 0.0]) == pytest.approx([0.5, 0.0])


def test_point_outside_cell_fails(unit_quad):
    with pytest.raises(TransformationFailed):
        MappingQ1().transform_real_to_unit(unit_quad, [1.5, 0.5])


def test_collapsed_cell_fails():
    nodes = [Node(i, [0.0, 0.0]) for i in range(4)]
    cell = Quad4(index=0, nodes=nodes)
    with pytest.raises(TransformationFailed):
        MappingQ1().transform_real_to_unit(cell, [0.0, 0.0])


def test_non_convergence_reported(distorted_quad):
    mapping = MappingQ1(max_iterations=1)
    with pytest.raises(TransformationFailed):
        mapping.transform_real_to_unit(distorted_quad, distorted_quad.map_to_real([0.1, 0.9]))


def test_point_dimension_checked(unit_quad):
    with pytest.raises(ValueError):
        MappingQ1().transform_real_to_unit(unit_quad, [0.5, 0.5, 0.5])
