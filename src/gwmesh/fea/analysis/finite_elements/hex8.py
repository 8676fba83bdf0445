from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from gwmesh.fea.analysis.finite_elements.finite_element import FiniteElement
from gwmesh.model.geometry_kind import GeometryKind

if TYPE_CHECKING:
    import numpy.typing as npt


# Reference corner of each vertex, lexicographic (x fastest, z slowest)
CORNERS = np.array([
    [0.0, 0.0, 0.0],
    [1.0, 0.0, 0.0],
    [0.0, 1.0, 0.0],
    [1.0, 1.0, 0.0],
    [0.0, 0.0, 1.0],
    [1.0, 0.0, 1.0],
    [0.0, 1.0, 1.0],
    [1.0, 1.0, 1.0],
])


class Hex8(FiniteElement):
    """
    Represents an eight-node trilinear hexahedral finite element (Hex8).

    Vertices 0-3 form the bottom face (z = 0), 4-7 the top face (z = 1).
    """
    kind = GeometryKind.HEX

    FACE_VERTICES = (
        (0, 2, 4, 6),  # x = 0
        (1, 3, 5, 7),  # x = 1
        (0, 1, 4, 5),  # y = 0
        (2, 3, 6, 7),  # y = 1
        (0, 1, 2, 3),  # z = 0 (bottom)
        (4, 5, 6, 7),  # z = 1 (top)
    )

    @staticmethod
    def shape_functions(unit_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """
        Calculate the shape functions for the Hex8 element.

        N_i = ∏_d (ξ_d if corner_id = 1 else 1 - ξ_d)

        Args:
            unit_coords: Reference coordinates [ξ, η, ζ] in the range [0, 1].

        Returns:
            Shape function values ``[N1, ..., N8]``.
        """
        factors = np.where(CORNERS == 1.0, unit_coords, 1.0 - np.asarray(unit_coords))
        return np.prod(factors, axis=1)

    @staticmethod
    def shape_gradients(unit_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """
        Calculate the shape function derivatives for the Hex8 element.

        Returns:
            (8, 3) array, row i = [∂N_i/∂ξ, ∂N_i/∂η, ∂N_i/∂ζ].
        """
        unit_coords = np.asarray(unit_coords, dtype=np.float64)
        factors = np.where(CORNERS == 1.0, unit_coords, 1.0 - unit_coords)
        signs = np.where(CORNERS == 1.0, 1.0, -1.0)

        gradients = np.empty((8, 3), dtype=np.float64)
        for d in range(3):
            others = np.delete(factors, d, axis=1)
            gradients[:, d] = signs[:, d] * np.prod(others, axis=1)
        return gradients
