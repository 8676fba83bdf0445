from __future__ import annotations

import itertools as it

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from gwmesh.errors import TransformationFailed
from gwmesh.fea.analysis.node import Node
from gwmesh.fea.analysis.finite_elements.quad4 import Quad4
from gwmesh.fea.analysis.finite_elements.hex8 import Hex8
from gwmesh.fea.pre.mesh import Mesh


def layered_quad_mesh(nx: int, n_layers: int, top=lambda x: 1.0) -> Mesh:
    """
    Structured 2D mesh on [0, 1] x [0, top(x)], nodes numbered layer by layer.

    Node (i, k) sits at x = i / nx, y = top(x) * k / n_layers.
    """
    nodes = []
    for k in range(n_layers + 1):
        for i in range(nx + 1):
            x = i / nx
            nodes.append(Node(index=k * (nx + 1) + i, coords=[x, top(x) * k / n_layers]))

    def uid(i: int, k: int) -> int:
        return k * (nx + 1) + i

    cells = []
    for k in range(n_layers):
        for i in range(nx):
            cell_nodes = [nodes[uid(i + di, k + dk)] for dk, di in it.product((0, 1), (0, 1))]
            cells.append(Quad4(index=len(cells), nodes=cell_nodes))
    return Mesh(nodes=nodes, cells=cells)


def layered_hex_mesh(n: int, n_layers: int, top=lambda x, y: 1.0) -> Mesh:
    """Structured 3D mesh on [0, 1]^2 x [0, top(x, y)], lexicographic node numbering."""
    nodes = []
    for k in range(n_layers + 1):
        for j in range(n + 1):
            for i in range(n + 1):
                x, y = i / n, j / n
                index = (k * (n + 1) + j) * (n + 1) + i
                nodes.append(Node(index=index, coords=[x, y, top(x, y) * k / n_layers]))

    def uid(i: int, j: int, k: int) -> int:
        return (k * (n + 1) + j) * (n + 1) + i

    cells = []
    for k in range(n_layers):
        for j in range(n):
            for i in range(n):
                cell_nodes = [
                    nodes[uid(i + di, j + dj, k + dk)]
                    for dk, dj, di in it.product((0, 1), (0, 1), (0, 1))
                ]
                cells.append(Hex8(index=len(cells), nodes=cell_nodes))
    return Mesh(nodes=nodes, cells=cells)


class FailingMapping:
    """Mapping whose inverse fails a fixed number of times, recording every query."""

    def __init__(self, failures: int | None = None, answer=None) -> None:
        self.failures = failures
        self.answer = answer
        self.queries: list[np.ndarray] = []

    def transform_unit_to_real(self, cell, unit_point):
        return cell.map_to_real(unit_point)

    def transform_real_to_unit(self, cell, point):
        self.queries.append(np.array(point, copy=True))
        if self.failures is None or len(self.queries) <= self.failures:
            raise TransformationFailed("stubbed failure")
        return np.asarray(self.answer if self.answer is not None else np.full(cell.dim, 0.5))


@pytest.fixture
def unit_quad() -> Quad4:
    coords = [[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [1.0, 1.0]]
    return Quad4(index=0, nodes=[Node(i, c) for i, c in enumerate(coords)])


@pytest.fixture
def distorted_quad() -> Quad4:
    coords = [[0.0, 0.0], [2.0, 0.2], [0.3, 1.5], [2.4, 2.0]]
    return Quad4(index=1, nodes=[Node(i, c) for i, c in enumerate(coords)])


@pytest.fixture
def unit_hex() -> Hex8:
    coords = [[x, y, z] for z, y, x in it.product((0.0, 1.0), repeat=3)]
    return Hex8(index=0, nodes=[Node(i, c) for i, c in enumerate(coords)])


@pytest.fixture
def distorted_hex() -> Hex8:
    coords = [
        [0.0, 0.0, 0.0], [1.2, 0.1, 0.1], [0.1, 1.0, -0.1], [1.1, 1.2, 0.2],
        [0.0, 0.1, 1.0], [1.0, 0.0, 1.3], [0.2, 1.1, 0.9], [1.3, 1.0, 1.5],
    ]
    return Hex8(index=1, nodes=[Node(i, c) for i, c in enumerate(coords)])
