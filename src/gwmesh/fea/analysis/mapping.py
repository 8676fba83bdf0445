"""
Reference-to-physical mappings.

A mapping turns reference-cell coordinates of an element into physical
coordinates and, approximately and locally, back. Any object with the two
methods of :class:`Mapping` can be handed to the point-location resolver.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

import numpy as np

from gwmesh import config
from gwmesh.errors import TransformationFailed

if TYPE_CHECKING:
    import numpy.typing as npt
    from gwmesh.fea.analysis.finite_elements.finite_element import FiniteElement

logger = logging.getLogger(__name__)


class Mapping(Protocol):
    """Forward mapping with an (approximate) inverse."""

    def transform_unit_to_real(
        self, cell: FiniteElement, unit_point: npt.NDArray[np.float64]
    ) -> npt.NDArray[np.float64]: ...

    def transform_real_to_unit(
        self, cell: FiniteElement, point: npt.NDArray[np.float64]
    ) -> npt.NDArray[np.float64]:
        """Raises TransformationFailed when the point cannot be pulled back."""
        ...


class MappingQ1:
    """
    Bilinear (2D) / trilinear (3D) mapping given by the element vertices.

    The inverse is computed with a Newton iteration started at the cell centre.
    """

    def __init__(
        self,
        tolerance: float = config.NEWTON_TOLERANCE,
        max_iterations: int = config.NEWTON_MAX_ITERATIONS,
        unit_cell_tolerance: float = config.UNIT_CELL_TOLERANCE,
    ) -> None:
        """
        Args:
            tolerance: Convergence tolerance on the Newton step (reference units).
            max_iterations: Newton iteration cap.
            unit_cell_tolerance: How far outside the unit cell a converged point
                may lie and still be accepted.
        """
        self.tolerance = tolerance
        self.max_iterations = max_iterations
        self.unit_cell_tolerance = unit_cell_tolerance

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(tolerance={self.tolerance}, "
            f"max_iterations={self.max_iterations}, unit_cell_tolerance={self.unit_cell_tolerance})"
        )

    def transform_unit_to_real(
        self, cell: FiniteElement, unit_point: npt.NDArray[np.float64]
    ) -> npt.NDArray[np.float64]:
        """Map reference coordinates of `cell` to physical coordinates."""
        return cell.map_to_real(unit_point)

    def transform_real_to_unit(
        self, cell: FiniteElement, point: npt.NDArray[np.float64]
    ) -> npt.NDArray[np.float64]:
        """
        Pull a physical point back to the reference cell of `cell`.

        Solves x(ξ) = p with Newton's method: ξ ← ξ + J(ξ)⁻¹ (p - x(ξ)).

        Args:
            cell: The element believed to contain `point`.
            point: Physical coordinates.

        Raises:
            TransformationFailed: If the Jacobian becomes singular, the iteration
                does not converge, or the result lies outside the unit cell.

        Returns:
            Reference coordinates of `point`.
        """
        point = np.asarray(point, dtype=np.float64)
        if point.shape != (cell.dim,):
            raise ValueError(f"Expected a {cell.dim}D point, got shape {point.shape}.")

        unit = np.full(cell.dim, 0.5, dtype=np.float64)
        for iteration in range(self.max_iterations):
            residual = point - cell.map_to_real(unit)
            jacobian = cell.jacobian_matrix(unit)
            det_j = np.linalg.det(jacobian)
            if not np.isfinite(det_j) or abs(det_j) < config.JACOBIAN_EPSILON:
                raise TransformationFailed(
                    f"Singular Jacobian (det={det_j:.3e}) at iteration {iteration} "
                    f"for element {cell.id}, point={point}."
                )
            step = np.linalg.solve(jacobian, residual)
            unit = unit + step
            if not np.all(np.isfinite(unit)):
                raise TransformationFailed(
                    f"Newton iteration diverged for element {cell.id}, point={point}."
                )
            if np.linalg.norm(step) < self.tolerance:
                break
        else:
            raise TransformationFailed(
                f"Inverse mapping did not converge after {self.max_iterations} iterations "
                f"for element {cell.id}, point={point}, "
                f"residual={np.linalg.norm(point - cell.map_to_real(unit)):.3e}."
            )

        if not cell.contains_unit_point(unit, self.unit_cell_tolerance):
            raise TransformationFailed(
                f"Point {point} maps to {unit}, outside the reference cell of element {cell.id}."
            )
        return unit
