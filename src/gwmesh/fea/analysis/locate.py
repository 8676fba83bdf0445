"""
Robust Point Location
=====================
Pulls a physical point back to the reference cell of an element, retrying with
small random nudges when the mapping's inversion fails.

Points lying on or next to an element boundary can make the iterative inversion
straddle the boundary and either fail to converge or land just outside the
reference cell. Shifting the point by a tiny random offset, drawn again on every
attempt and independently per axis, breaks the tie without moving the result
beyond numerical noise.

The number of attempts is bounded (1 + `max_retries`). Running out of attempts
is an expected outcome for points outside the mesh, so it is returned as a
failed :class:`MappingResult` rather than raised.

Randomness comes from an explicit ``numpy.random.Generator``. Generators are not
thread-safe: concurrent callers must pass one generator per worker, e.g. from
``numpy.random.default_rng(seed).spawn(n_workers)``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

import numpy as np

from gwmesh import config
from gwmesh.errors import MappingNotFound, TransformationFailed
from gwmesh.model.geometry_primitives import as_point

if TYPE_CHECKING:
    import numpy.typing as npt
    from gwmesh.fea.analysis.finite_elements.finite_element import FiniteElement
    from gwmesh.fea.analysis.mapping import Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MappingResult:
    """
    Outcome of a point-location attempt.

    Attributes:
        point: The physical point that was requested.
        unit_point: Reference coordinates, or None when no attempt succeeded.
        query_points: Every physical point handed to the mapping, in order.
    """
    point: npt.NDArray[np.float64]
    unit_point: Optional[npt.NDArray[np.float64]]
    query_points: list[npt.NDArray[np.float64]] = field(default_factory=list)

    @property
    def found(self) -> bool:
        """Whether the point was mapped."""
        return self.unit_point is not None

    @property
    def attempts(self) -> int:
        """Total number of inversions tried (original point included)."""
        return len(self.query_points)

    @property
    def retries(self) -> int:
        """Number of perturbed attempts."""
        return max(self.attempts - 1, 0)

    def unwrap(self) -> npt.NDArray[np.float64]:
        """
        Return the reference coordinates.

        Raises:
            MappingNotFound: If the point was not mapped.
        """
        if self.unit_point is None:
            raise MappingNotFound(self.point, self.attempts)
        return self.unit_point


def try_mapping(
    point: list[float] | npt.NDArray[np.float64],
    cell: FiniteElement,
    mapping: Mapping,
    rng: Optional[np.random.Generator] = None,
    *,
    max_retries: int = config.MAX_MAPPING_RETRIES,
    perturbation: float = config.PERTURBATION_AMPLITUDE,
) -> MappingResult:
    """
    Find the reference coordinates of `point` in `cell`.

    Args:
        point: Physical point.
        cell: The element believed to contain `point`.
        mapping: Mapping whose ``transform_real_to_unit`` raises
            ``TransformationFailed`` on failure.
        rng: Random source for the perturbations. A new default generator is
            created for this call when None.
        max_retries: Perturbed attempts after the first one.
        perturbation: Half-width of the uniform offset added to each coordinate,
            in physical units.

    Returns:
        A MappingResult; check ``found`` or call ``unwrap()``.
    """
    point = as_point(point)
    if rng is None:
        rng = np.random.default_rng()

    query_points: list[npt.NDArray[np.float64]] = []
    trial = point
    for attempt in range(max_retries + 1):
        if attempt > 0:
            trial = point + rng.uniform(-perturbation, perturbation, size=point.shape)
        query_points.append(trial)
        try:
            unit_point = mapping.transform_real_to_unit(cell, trial)
        except TransformationFailed as e:
            logger.debug(f"Attempt {attempt + 1} for point {point} in element {cell.id} failed: {e}")
            continue
        if attempt > 0:
            logger.debug(f"Point {point} mapped into element {cell.id} after {attempt} perturbed retries.")
        return MappingResult(point=point, unit_point=unit_point, query_points=query_points)

    logger.debug(f"Transformation failed for point {point} in element {cell.id} after {len(query_points)} attempts.")
    return MappingResult(point=point, unit_point=None, query_points=query_points)
