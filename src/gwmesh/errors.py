"""
Error Taxonomy
==============
Exceptions raised by the geometry, adjacency and point-location layers.

Every exception derives from ``GwMeshError``, which is a ``ValueError`` so
callers that already guard bad input with ``except ValueError`` keep working.

- InvalidDimension / InvalidIndex / DegenerateFace: caller programming errors,
  raised immediately and never retried.
- TransformationFailed: a mapping could not invert a physical point. Only the
  point-location resolver catches it.
- MappingNotFound: the resolver ran out of attempts. The resolver itself
  returns a failed result; this is raised only when a caller unwraps it.
"""
from __future__ import annotations


class GwMeshError(ValueError):
    """Base class for all package errors."""


class InvalidDimension(GwMeshError):
    """Raised when an operation is requested for an unsupported dimension."""

    def __init__(self, dim: int, operation: str) -> None:
        self.dim = dim
        self.operation = operation
        super().__init__(f"{operation} is not defined for dim={dim}.")


class InvalidIndex(GwMeshError, IndexError):
    """Raised when a local node index lies outside [0, 2**dim - 1]."""

    def __init__(self, index: object, dim: int) -> None:
        self.index = index
        self.dim = dim
        super().__init__(
            f"Local node index {index!r} is out of range for dim={dim} "
            f"(expected an integer in [0, {2 ** dim - 1}])."
        )


class DegenerateFace(GwMeshError):
    """Raised when a face has zero true area (or length) and no weight can be formed."""


class TransformationFailed(GwMeshError):
    """Raised by a mapping when a physical point cannot be pulled back to the unit cell."""


class MappingNotFound(GwMeshError):
    """Raised when an exhausted point-location result is unwrapped."""

    def __init__(self, point: object, attempts: int) -> None:
        self.point = point
        self.attempts = attempts
        super().__init__(
            f"No reference coordinates found for point {point} after {attempts} attempts."
        )
