"""
Recharge Weights
================
A recharge rate (e.g. precipitation) is given per unit of horizontal area. When
it is applied over the top face of an element, the face may be tilted, so the
rate has to be multiplied by the ratio of the face's projection on the XY plane
(the X axis in 2D) to its true area (length in 2D).

The weight lies in [0, 1]: 1 for a horizontal face, 0 for a vertical one.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Protocol

import numpy as np

from gwmesh import config
from gwmesh.errors import DegenerateFace, InvalidDimension
from gwmesh.model.geometry_kind import GeometryKind
from gwmesh.model.geometry_primitives import triangle_area

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

# Weight returned for dimensions other than 2 and 3
FALLBACK_WEIGHT = 1.0


class HasFaces(Protocol):
    """Anything that exposes ordered face vertices, e.g. a Quad4 or Hex8 element."""

    @property
    def dim(self) -> int: ...

    def face_vertices(self, face: int) -> npt.NDArray[np.float64]: ...


def _edge_weight(vertices: npt.NDArray[np.float64]) -> tuple[float, float]:
    """Return (projected length, true length) of a 2D boundary edge."""
    v1, v2 = vertices
    actual_length = float(np.linalg.norm(v2 - v1))
    projected_length = abs(float(v2[0] - v1[0]))
    return projected_length, actual_length


def _quad_face_weight(vertices: npt.NDArray[np.float64]) -> tuple[float, float]:
    """
    Return (projected area, true area) of a 3D quadrilateral face.

    The face is split along the v1-v4 diagonal into (v1, v2, v4) and (v1, v4, v3),
    which matches the lexicographic face vertex ordering of the elements.
    """
    v1, v2, v3, v4 = vertices
    true_area = triangle_area(v1, v2, v4, project=False) + triangle_area(v1, v4, v3, project=False)
    projected_area = triangle_area(v1, v2, v4, project=True) + triangle_area(v1, v4, v3, project=True)
    return projected_area, true_area


_FACE_MEASURES: dict[GeometryKind, Callable[[npt.NDArray[np.float64]], tuple[float, float]]] = {
    GeometryKind.QUAD: _edge_weight,
    GeometryKind.HEX: _quad_face_weight,
}


def recharge_weight(vertices: list | npt.NDArray[np.float64]) -> float:
    """
    Calculate the recharge weight of a face from its ordered vertices.

    Args:
        vertices: (2, 2) array for an edge of a 2D element or (4, 3) array for a
            quadrilateral face of a 3D element, ordered as the element reports them.

    Raises:
        InvalidDimension: If the vertex count does not match the dimension.
        DegenerateFace: If the true length/area of the face is zero.

    Returns:
        The ratio of projected to true face measure. For dimensions other than
        2 and 3 a warning is logged and 1.0 is returned.
    """
    vertices = np.atleast_2d(np.asarray(vertices, dtype=np.float64))
    dim = vertices.shape[1]

    try:
        kind = GeometryKind.from_dim(dim, "Recharge weight")
    except InvalidDimension:
        logger.warning(
            f"Recharge weight requested for dim={dim}; no projection is defined, "
            f"falling back to weight {FALLBACK_WEIGHT}."
        )
        return FALLBACK_WEIGHT

    if vertices.shape[0] != kind.vertices_per_face:
        raise InvalidDimension(
            dim, f"Recharge weight of a face with {vertices.shape[0]} vertices"
        )

    projected, actual = _FACE_MEASURES[kind](vertices)
    if actual <= config.AREA_EPSILON:
        raise DegenerateFace(
            f"Face with vertices {vertices.tolist()} has zero true measure; "
            "the recharge weight is undefined."
        )
    return projected / actual


def face_recharge_weight(cell: HasFaces, face: int) -> float:
    """
    Calculate the recharge weight of one face of an element.

    Args:
        cell: The element where the recharge is applied.
        face: Local face index.

    Returns:
        The recharge weight of the face, see :func:`recharge_weight`.
    """
    return recharge_weight(cell.face_vertices(face))


def scale_recharge(rate: float, cell: HasFaces, face: int) -> float:
    """Return the recharge `rate` expressed per unit of true face area."""
    return rate * face_recharge_weight(cell, face)
