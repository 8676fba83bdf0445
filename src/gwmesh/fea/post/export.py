"""
Mesh point export.

Walks the locally owned cells of a mesh and records one entry per mesh point:
the point is keyed by the dof of its last (vertical) component, and gets a
running counter in the order it is first met.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import h5py
import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt
    from gwmesh.fea.analysis.dof_handler import DofHandler

logger = logging.getLogger(__name__)


@dataclass
class MeshPointTable:
    """
    Points collected from a mesh, keyed by last-component dof.

    Attributes:
        entries: dof -> (counter, point).
        rank: Process rank the table was collected for.
    """
    entries: dict[int, tuple[int, npt.NDArray[np.float64]]] = field(default_factory=dict)
    rank: int = 0

    def __len__(self) -> int:
        return len(self.entries)

    def add(self, dof: int, point: npt.NDArray[np.float64]) -> bool:
        """Record `point` under `dof` unless the dof is already present. Returns True if added."""
        if dof in self.entries:
            return False
        self.entries[dof] = (len(self.entries), np.array(point, dtype=np.float64))
        return True

    def as_arrays(self) -> tuple[npt.NDArray[np.int64], npt.NDArray[np.int64], npt.NDArray[np.float64]]:
        """Return (dofs, counters, points) sorted by counter."""
        ordered = sorted(self.entries.items(), key=lambda item: item[1][0])
        dofs = np.array([dof for dof, _ in ordered], dtype=np.int64)
        counters = np.array([counter for _, (counter, _) in ordered], dtype=np.int64)
        points = np.array([point for _, (_, point) in ordered], dtype=np.float64)
        return dofs, counters, points


def collect_mesh_points(dof_handler: DofHandler, rank: int = 0) -> MeshPointTable:
    """
    Collect the support points of all cells owned by `rank`.

    Args:
        dof_handler: Dof numbering of the mesh.
        rank: Only cells owned by this process are visited.

    Returns:
        The point table, deduplicated by the last-component dof.
    """
    table = MeshPointTable(rank=rank)
    for cell in dof_handler.mesh.cells:
        if not cell.is_locally_owned(rank):
            continue
        dofs = dof_handler.cell_dofs(cell)
        points = dof_handler.support_points(cell)
        for point_dofs, point in zip(dofs, points):
            table.add(int(point_dofs[-1]), point)

    logger.debug(f"Collected {len(table)} mesh points on rank {rank}.")
    return table


def write_mesh_points(filename: str, table: MeshPointTable) -> None:
    """
    Save a point table to an HDF5 file.

    Datasets ``dofs``, ``counters`` and ``points`` hold the table sorted by counter;
    the ``rank`` attribute records the owning process.
    """
    logger.info(f"Saving {len(table)} mesh points to: {filename}")
    dofs, counters, points = table.as_arrays()
    with h5py.File(filename, "w") as f:
        f.attrs["rank"] = table.rank
        f.create_dataset("dofs", data=dofs)
        f.create_dataset("counters", data=counters)
        f.create_dataset("points", data=points)


def read_mesh_points(filename: str) -> MeshPointTable:
    """Load a point table written by :func:`write_mesh_points`."""
    with h5py.File(filename, "r") as f:
        rank = int(f.attrs.get("rank", 0))
        dofs = f["dofs"][()]
        counters = f["counters"][()]
        points = f["points"][()]
    table = MeshPointTable(rank=rank)
    for dof, counter, point in zip(dofs, counters, points):
        table.entries[int(dof)] = (int(counter), np.asarray(point, dtype=np.float64))
    return table
