from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt
    from gwmesh.fea.analysis.finite_elements.finite_element import FiniteElement
    from gwmesh.fea.pre.mesh import Mesh


class DofHandler:
    """
    Node-wise numbering of a vector-valued Q1 field (one component per axis).

    The dof of component ``d`` at node ``uid`` is ``uid * n_components + d``, so the
    last component of a node carries the largest dof of that node. Support points
    of a Q1 element are its vertices.
    """
    def __init__(self, mesh: Mesh) -> None:
        """Initialize the handler on `mesh`; the number of components equals the mesh dimension."""
        self.mesh = mesh
        self.n_components: int = mesh.dim

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(n_dofs={self.n_dofs}, n_components={self.n_components})"

    @property
    def n_dofs(self) -> int:
        """Total number of degrees of freedom."""
        if not self.mesh.nodes:
            return 0
        return (max(node.uid for node in self.mesh.nodes) + 1) * self.n_components

    @property
    def dofs_per_cell(self) -> int:
        """Degrees of freedom of one cell."""
        return self.mesh.kind.vertices_per_cell * self.n_components

    def cell_dofs(self, cell: FiniteElement) -> npt.NDArray[np.int64]:
        """
        Global dofs of a cell.

        Returns:
            (n_support_points, n_components) array; row i holds the dofs of support point i.
        """
        uids = np.array([node.uid for node in cell.nodes], dtype=np.int64)
        return uids[:, None] * self.n_components + np.arange(self.n_components, dtype=np.int64)

    def support_points(self, cell: FiniteElement) -> npt.NDArray[np.float64]:
        """(n_support_points, dim) physical coordinates of the cell's support points."""
        return cell.coords
