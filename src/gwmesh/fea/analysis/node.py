from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


class Node:
    """
    Represents a mesh vertex.
    """
    def __init__(
        self,
        index: int,
        coords: list[float] | npt.NDArray[np.float64],
    ) -> None:
        """
        Initialize the node with coordinates.

        Args:
            index: Zero-based node index.
            coords: Coordinates of the node in the global system [X, Y] or [X, Y, Z].
        """
        self.coords = np.array(coords, dtype=np.float64)
        self.uid = index

    def __repr__(self) -> str:
        """String representation of the node."""
        return f"{self.__class__.__name__}(id={self.uid}, coords={self.coords})"

    @property
    def dim(self) -> int:
        """Number of coordinates of the node."""
        return self.coords.size

    @property
    def x(self) -> float:
        """X-coordinate of the node."""
        return self.coords[0]

    @property
    def y(self) -> float:
        """Y-coordinate of the node."""
        return self.coords[1]

    @property
    def z(self) -> float:
        """Z-coordinate of the node (3D only)."""
        return self.coords[2]
