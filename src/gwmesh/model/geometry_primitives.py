"""
Geometric Primitives
Triangle areas used for face weighting.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numba as nb

from gwmesh.errors import InvalidDimension

if TYPE_CHECKING:
    import numpy.typing as npt


@nb.jit(cache=True, fastmath=True)
def _minor(
    u1: float, v1: float,
    u2: float, v2: float,
    u3: float, v3: float
) -> float:
    """Twice the signed area of the triangle projected on the (u, v) plane."""
    return u1 * (v2 - v3) + u2 * (v3 - v1) + u3 * (v1 - v2)


@nb.jit(cache=True, fastmath=True)
def _projected_area(
    ax: float, ay: float,
    bx: float, by: float,
    cx: float, cy: float
) -> float:
    """Shoelace area of the triangle ABC in the XY plane."""
    return abs(0.5 * _minor(ax, ay, bx, by, cx, cy))


@nb.jit(cache=True, fastmath=True)
def _spatial_area(
    x1: float, y1: float, z1: float,
    x2: float, y2: float, z2: float,
    x3: float, y3: float, z3: float
) -> float:
    """
    Area of a triangle in 3D from the three 2×2 minors of its coordinate differences.

    The minors are the XY, XZ and YZ components of (B - A) × (C - A). The XY minor
    is the same expression as the projected area, so a horizontal triangle gives
    identical true and projected areas.
    """
    xy = _minor(x1, y1, x2, y2, x3, y3)
    xz = _minor(x1, z1, x2, z2, x3, z3)
    yz = _minor(y1, z1, y2, z2, y3, z3)
    return 0.5 * np.sqrt(xy * xy + xz * xz + yz * yz)


def as_point(coords: list[float] | npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Return `coords` as a 1-D float64 array."""
    point = np.asarray(coords, dtype=np.float64)
    if point.ndim != 1:
        raise ValueError(f"A point must be one-dimensional, got shape {point.shape}.")
    return point


def triangle_area(
    a: list[float] | npt.NDArray[np.float64],
    b: list[float] | npt.NDArray[np.float64],
    c: list[float] | npt.NDArray[np.float64],
    project: bool = False,
) -> float:
    """
    Calculate the area of the triangle defined by three vertices.

    Args:
        a: 1st vertex of the triangle.
        b: 2nd vertex of the triangle.
        c: 3rd vertex of the triangle.
        project: If True, the area of the triangle projected onto the XY plane
            is returned; only the first two coordinates are used.

    Raises:
        InvalidDimension: If `project` is False and the vertices are not 3D, or
            the vertices have fewer than two coordinates.
        ValueError: If the vertices do not share one dimension.

    Returns:
        Non-negative area of the triangle.
    """
    a, b, c = as_point(a), as_point(b), as_point(c)
    dim = a.size
    if b.size != dim or c.size != dim:
        raise ValueError(
            f"Triangle vertices must share one dimension, got {a.size}, {b.size} and {c.size}."
        )

    if project:
        if dim < 2:
            raise InvalidDimension(dim, "Projected triangle area")
        return float(_projected_area(a[0], a[1], b[0], b[1], c[0], c[1]))

    if dim != 3:
        raise InvalidDimension(dim, "Non-projected triangle area")
    # http://mathworld.wolfram.com/TriangleArea.html
    return float(_spatial_area(a[0], a[1], a[2], b[0], b[1], b[2], c[0], c[1], c[2]))
