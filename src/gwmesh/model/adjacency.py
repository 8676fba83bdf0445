"""
Structured node adjacency of the reference quadrilateral and hexahedron.

Vertices are numbered lexicographically: vertex ``i`` sits at the corner whose
coordinate ``d`` equals bit ``d`` of ``i``. The last axis is vertical, so in 2D
vertex 0 lies below vertex 2 and in 3D vertex 0 lies below vertex 4.

Two topologies are available:

- ``AdjacencyMode.PRIMARY_AXIS``: the single vertex directly above/below. This
  table is an involution.
- ``AdjacencyMode.FULL``: every vertex sharing an edge. In 2D this is the
  4-cycle 0-1-3-2-0; in 3D the hexahedron edge graph.
"""
from __future__ import annotations

import numbers
from enum import StrEnum

from gwmesh.errors import InvalidIndex
from gwmesh.model.geometry_kind import GeometryKind


class AdjacencyMode(StrEnum):
    PRIMARY_AXIS = "primary_axis"
    FULL = "full"


PRIMARY_AXIS_NEIGHBOURS: dict[GeometryKind, tuple[tuple[int, ...], ...]] = {
    GeometryKind.QUAD: (
        (2,),
        (3,),
        (0,),
        (1,),
    ),
    GeometryKind.HEX: (
        (4,),
        (5,),
        (6,),
        (7,),
        (0,),
        (1,),
        (2,),
        (3,),
    ),
}

EDGE_NEIGHBOURS: dict[GeometryKind, tuple[tuple[int, ...], ...]] = {
    GeometryKind.QUAD: (
        (1, 2),
        (0, 3),
        (0, 3),
        (1, 2),
    ),
    GeometryKind.HEX: (
        (1, 2, 4),
        (0, 3, 5),
        (0, 3, 6),
        (1, 2, 7),
        (0, 5, 6),
        (1, 4, 7),
        (2, 4, 7),
        (3, 5, 6),
    ),
}

_TABLES = {
    AdjacencyMode.PRIMARY_AXIS: PRIMARY_AXIS_NEIGHBOURS,
    AdjacencyMode.FULL: EDGE_NEIGHBOURS,
}


def connected_indices(
    dim: int,
    index: int,
    mode: AdjacencyMode = AdjacencyMode.PRIMARY_AXIS,
) -> tuple[int, ...]:
    """
    Return the local vertices connected to vertex `index` of the reference cell.

    Only the ids of the vertices as defined by the lexicographic numbering are
    returned. With the default mode only the connection along the vertical
    direction is reported; ``AdjacencyMode.FULL`` returns all edge connections.

    Args:
        dim: Spatial dimension, 2 or 3.
        index: Local vertex index in [0, 2**dim - 1].
        mode: Which topology to look up.

    Raises:
        InvalidDimension: If `dim` is not 2 or 3.
        InvalidIndex: If `index` is not an integer in range.

    Returns:
        Tuple of connected local vertex indices.
    """
    kind = GeometryKind.from_dim(dim, "Node adjacency")
    table = _TABLES[AdjacencyMode(mode)][kind]
    if isinstance(index, bool) or not isinstance(index, numbers.Integral) or not 0 <= index < len(table):
        raise InvalidIndex(index, dim)
    return table[int(index)]
