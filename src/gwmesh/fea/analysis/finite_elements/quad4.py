from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from gwmesh.fea.analysis.finite_elements.finite_element import FiniteElement
from gwmesh.model.geometry_kind import GeometryKind

if TYPE_CHECKING:
    import numpy.typing as npt


class Quad4(FiniteElement):
    """
    Represents a four-node bilinear quadrilateral finite element (Quad4).

    Reference vertices: 0 = (0, 0), 1 = (1, 0), 2 = (0, 1), 3 = (1, 1).
    """
    kind = GeometryKind.QUAD

    FACE_VERTICES = (
        (0, 2),  # x = 0
        (1, 3),  # x = 1
        (0, 1),  # y = 0 (bottom)
        (2, 3),  # y = 1 (top)
    )

    @staticmethod
    def shape_functions(unit_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """
        Calculate the shape functions for the Quad4 element.

        Args:
            unit_coords: Reference coordinates [ξ, η] in the range [0, 1].

        Returns:
            Shape function values at the given coordinates ``[N1, N2, N3, N4]``.
        """
        xi, eta = unit_coords
        return np.array([
            (1.0 - xi) * (1.0 - eta),
            xi * (1.0 - eta),
            (1.0 - xi) * eta,
            xi * eta,
        ], dtype=np.float64)

    @staticmethod
    def shape_gradients(unit_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """
        Calculate the shape function derivatives for the Quad4 element.

        Returns:
            (4, 2) array, row i = [∂N_i/∂ξ, ∂N_i/∂η].
        """
        xi, eta = unit_coords
        return np.array([
            [-(1.0 - eta), -(1.0 - xi)],
            [1.0 - eta, -xi],
            [-eta, 1.0 - xi],
            [eta, xi],
        ], dtype=np.float64)
