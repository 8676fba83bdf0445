from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

import numpy as np

from gwmesh import config
from gwmesh.model.geometry_kind import GeometryKind

if TYPE_CHECKING:
    import numpy.typing as npt
    from gwmesh.fea.analysis.node import Node


class FiniteElement(ABC):
    """
    Abstract base class for Q1 elements on the unit reference cell [0, 1]**dim.

    Vertices are ordered lexicographically: vertex ``i`` maps to the reference
    corner whose coordinate ``d`` equals bit ``d`` of ``i``.
    """

    kind: ClassVar[GeometryKind]

    # FACE_VERTICES[f] lists the local vertices of face f, lexicographic within
    # the face. Face 2*d is the x_d = 0 side, face 2*d + 1 the x_d = 1 side.
    FACE_VERTICES: ClassVar[tuple[tuple[int, ...], ...]]

    def __init__(
        self,
        index: int,
        nodes: list[Node],
        tag: str = "",
        owner: int = 0,
    ) -> None:
        """
        Initialize the finite element.

        Args:
            index: Element index.
            nodes: List of nodes, in lexicographic order.
            tag: Element tag (physical group name).
            owner: Rank of the process owning this element.

        Raises:
            ValueError: If the node count or node dimension does not fit the element.
        """
        if len(nodes) != self.kind.vertices_per_cell:
            raise ValueError(
                f"{self.__class__.__name__} needs {self.kind.vertices_per_cell} nodes, got {len(nodes)}."
            )
        for node in nodes:
            if node.dim != self.kind.dim:
                raise ValueError(
                    f"{self.__class__.__name__} needs {self.kind.dim}D nodes, got {node!r}."
                )
        self.id = index
        self.tag = tag
        self.owner = owner
        self.nodes = nodes

    def __repr__(self) -> str:
        """String representation of the finite element."""
        return f"{self.__class__.__name__}(id={self.id}, tag='{self.tag}', nodes={[n.uid for n in self.nodes]})"

    @property
    def dim(self) -> int:
        """Spatial dimension of the element."""
        return self.kind.dim

    @property
    def number_of_nodes(self) -> int:
        """Number of nodes in the finite element."""
        return len(self.nodes)

    @property
    def number_of_faces(self) -> int:
        """Number of faces of the finite element."""
        return len(self.FACE_VERTICES)

    @property
    def coords(self) -> npt.NDArray[np.float64]:
        """(n_nodes, dim) array of vertex coordinates."""
        return np.array([node.coords for node in self.nodes], dtype=np.float64)

    @property
    def centroid(self) -> npt.NDArray[np.float64]:
        """Arithmetic mean of the vertices."""
        return self.coords.mean(axis=0)

    def is_locally_owned(self, rank: int) -> bool:
        """Whether the element belongs to process `rank`."""
        return self.owner == rank

    @staticmethod
    @abstractmethod
    def shape_functions(unit_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """Shape function values ``[N1, ..., Nn]`` at reference coordinates."""
        pass

    @staticmethod
    @abstractmethod
    def shape_gradients(unit_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """(n_nodes, dim) array of shape function derivatives w.r.t. the reference coordinates."""
        pass

    def map_to_real(self, unit_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """
        Forward mapping: reference coordinates to physical coordinates.

        x = ∑ N_i(ξ) x_i
        """
        return self.shape_functions(np.asarray(unit_coords, dtype=np.float64)) @ self.coords

    def jacobian_matrix(self, unit_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """
        Jacobian of the forward mapping, J[i, j] = ∂x_i/∂ξ_j.

        Args:
            unit_coords: Reference coordinates where the Jacobian is evaluated.

        Returns:
            (dim, dim) Jacobian matrix.
        """
        return self.coords.T @ self.shape_gradients(np.asarray(unit_coords, dtype=np.float64))

    def face_vertices(self, face: int) -> npt.NDArray[np.float64]:
        """
        Ordered vertex coordinates of one face.

        Args:
            face: Local face index in [0, 2*dim - 1].

        Raises:
            ValueError: If `face` is out of range.

        Returns:
            (2**(dim-1), dim) array of vertex coordinates.
        """
        if not 0 <= face < self.number_of_faces:
            raise ValueError(
                f"Face index {face} is out of range for {self.__class__.__name__} "
                f"(expected 0..{self.number_of_faces - 1})."
            )
        return self.coords[list(self.FACE_VERTICES[face])]

    @staticmethod
    def contains_unit_point(
        unit_coords: npt.NDArray[np.float64],
        tolerance: float = config.UNIT_CELL_TOLERANCE,
    ) -> bool:
        """Whether reference coordinates lie in the unit cell, up to `tolerance`."""
        unit_coords = np.asarray(unit_coords, dtype=np.float64)
        return bool(np.all(unit_coords >= -tolerance) and np.all(unit_coords <= 1.0 + tolerance))
