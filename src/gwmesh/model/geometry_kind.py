"""
Geometry kind: the single place where a spatial dimension is turned into the
2D/3D branch used by the rest of the package.
"""
from __future__ import annotations

from enum import StrEnum

from gwmesh.errors import InvalidDimension


class GeometryKind(StrEnum):
    """Structured reference element family, selected by spatial dimension."""
    QUAD = "quad"
    HEX = "hex"

    @property
    def dim(self) -> int:
        """Spatial dimension of the family."""
        return _KIND_TO_DIM[self]

    @property
    def vertices_per_cell(self) -> int:
        """Number of vertices of the reference cell (2**dim)."""
        return 2 ** self.dim

    @property
    def vertices_per_face(self) -> int:
        """Number of vertices of one cell face (2**(dim - 1))."""
        return 2 ** (self.dim - 1)

    @property
    def vertical_axis(self) -> int:
        """Index of the vertical coordinate (always the last one)."""
        return self.dim - 1

    @classmethod
    def from_dim(cls, dim: int, operation: str = "Structured geometry") -> GeometryKind:
        """
        Resolve the geometry kind for a spatial dimension.

        Args:
            dim: Spatial dimension.
            operation: Name of the requesting operation, used in the error message.

        Raises:
            InvalidDimension: If `dim` is not 2 or 3.
        """
        try:
            return _DIM_TO_KIND[dim]
        except (KeyError, TypeError):
            raise InvalidDimension(dim, operation) from None


_KIND_TO_DIM = {
    GeometryKind.QUAD: 2,
    GeometryKind.HEX: 3,
}

_DIM_TO_KIND = {dim: kind for kind, dim in _KIND_TO_DIM.items()}
