from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Optional

import numpy as np
import gmsh

from gwmesh.errors import InvalidDimension
from gwmesh.fea.analysis.node import Node
from gwmesh.fea.analysis.finite_elements.finite_element import FiniteElement
from gwmesh.fea.analysis.finite_elements.quad4 import Quad4
from gwmesh.fea.analysis.finite_elements.hex8 import Hex8
from gwmesh.fea.analysis.locate import MappingResult, try_mapping
from gwmesh.model.adjacency import AdjacencyMode, connected_indices
from gwmesh.model.geometry_kind import GeometryKind

if TYPE_CHECKING:
    import numpy.typing as npt
    from gwmesh.fea.analysis.mapping import Mapping

logger = logging.getLogger(__name__)

CELL_TYPE_MAP = {
    3: (Quad4, 4),  # 4-node quadrangle
    5: (Hex8, 8),  # 8-node hexahedron
}

# gmsh numbers quadrangle/hexahedron vertices counter-clockwise per layer;
# these permutations reorder them lexicographically.
GMSH_TO_LEXICOGRAPHIC = {
    3: [0, 1, 3, 2],
    5: [0, 1, 3, 2, 4, 5, 7, 6],
}


class Mesh:
    def __init__(
        self,
        nodes: list[Node],
        cells: list[FiniteElement],
        filename: str | None = None,
    ) -> None:
        """
        Initialize the Mesh class.

        Args:
            nodes: Mesh nodes; sorted by uid.
            cells: Quad4 or Hex8 elements, all of one dimension.
            filename: Source file, if the mesh was read from disk.

        Raises:
            ValueError: If the cells mix dimensions.
        """
        nodes.sort(key=lambda node: node.uid)
        self.nodes = nodes
        self.cells = cells
        self.filename = filename

        kinds = {cell.kind for cell in cells}
        if len(kinds) > 1:
            raise ValueError(f"Mixed element families are not supported: {sorted(kinds)}.")

        self._node_lookup: dict[int, Node] = {node.uid: node for node in nodes}
        self._cells_of_node: dict[int, list[tuple[FiniteElement, int]]] = defaultdict(list)
        for cell in cells:
            for local_index, node in enumerate(cell.nodes):
                self._cells_of_node[node.uid].append((cell, local_index))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(n_nodes={len(self.nodes)}, n_cells={len(self.cells)})"

    @classmethod
    def from_file(cls, filename: str) -> Mesh:
        """
        Read a quadrangle or hexahedron mesh from a gmsh file.

        Element tags are the physical group name of the owning entity (empty when
        the entity has none). For partitioned meshes, the owner of each cell is the
        zero-based partition of its entity.

        Raises:
            ValueError: If the file holds no supported cells or mixes quadrangles
                and hexahedra.
        """
        gmsh.initialize()
        try:
            gmsh.open(filename)

            node_tags, flat_coords, _ = gmsh.model.mesh.get_nodes()
            coords = flat_coords.reshape(-1, 3)

            # Cells live on the highest-dimensional entities; quadrangles on the
            # boundary surfaces of a hexahedral mesh are ignored.
            present_types: dict[int, set[int]] = defaultdict(set)
            for dim, entity_tag in gmsh.model.get_entities():
                element_types, _, _ = gmsh.model.mesh.get_elements(dim, entity_tag)
                present_types[dim].update(int(t) for t in element_types if int(t) in CELL_TYPE_MAP)

            cell_dims = [dim for dim, types in present_types.items() if types]
            if not cell_dims:
                raise ValueError(f"No quadrangle or hexahedron elements found in '{filename}'.")
            top_types = present_types[max(cell_dims)]
            if len(top_types) > 1:
                raise ValueError(f"'{filename}' mixes element families: gmsh types {sorted(top_types)}.")
            cell_type = top_types.pop()
            cell_class, nodes_per_cell = CELL_TYPE_MAP[cell_type]
            dim = cell_class.kind.dim

            nodes: list[Node] = []
            nodes_lookup: dict[int, Node] = {}
            for tag, xyz in zip(node_tags, coords[:, :dim]):
                zero_based_index = int(tag) - 1  # GMSH uses 1-based indexing
                node = Node(index=zero_based_index, coords=xyz)
                nodes.append(node)
                nodes_lookup[zero_based_index] = node

            partitioned = gmsh.model.get_number_of_partitions() > 0
            permutation = GMSH_TO_LEXICOGRAPHIC[cell_type]

            cells: list[FiniteElement] = []
            for dim_e, entity_tag in gmsh.model.get_entities(dim):
                element_types, element_tags_list, node_tags_list = gmsh.model.mesh.get_elements(dim_e, entity_tag)
                if element_types.size == 0:
                    continue

                phys_tags = gmsh.model.get_physical_groups_for_entity(dim_e, entity_tag)
                name = gmsh.model.get_physical_name(dim_e, phys_tags[0]) if len(phys_tags) else ""

                owner = 0
                if partitioned:
                    partitions = gmsh.model.get_partitions(dim_e, entity_tag)
                    if len(partitions):
                        owner = int(partitions[0]) - 1

                for element_type, element_tags, flat_node_tags in zip(element_types, element_tags_list, node_tags_list):
                    if int(element_type) != cell_type:
                        continue
                    connectivity = flat_node_tags.reshape(-1, nodes_per_cell) - 1
                    for node_ids, element_tag in zip(connectivity, element_tags):
                        cell_nodes = [nodes_lookup[int(node_ids[i])] for i in permutation]
                        cells.append(
                            cell_class(index=int(element_tag) - 1, nodes=cell_nodes, tag=name, owner=owner)
                        )
        finally:
            gmsh.finalize()

        logger.info(f"Read {len(nodes)} nodes and {len(cells)} {cell_class.__name__} cells from '{filename}'.")
        return cls(nodes=nodes, cells=cells, filename=filename)

    @property
    def kind(self) -> GeometryKind:
        """Element family of the mesh."""
        if not self.cells:
            raise InvalidDimension(0, "Geometry kind of an empty mesh")
        return self.cells[0].kind

    @property
    def dim(self) -> int:
        """Spatial dimension of the mesh."""
        return self.kind.dim

    def node(self, uid: int) -> Node:
        """Return the node with the given uid."""
        return self._node_lookup[uid]

    def cells_of_node(self, uid: int) -> list[tuple[FiniteElement, int]]:
        """Return ``(cell, local_index)`` pairs of every cell using node `uid`."""
        return list(self._cells_of_node.get(uid, []))

    def vertical_neighbours(self, uid: int) -> tuple[list[int], list[int]]:
        """
        Nodes directly below and above node `uid`, found through the cells sharing it.

        A node at local index i of a cell is on the cell's top face when the
        vertical bit of i is set, so its vertical partner in that cell lies below.

        Returns:
            (below, above) sorted lists of node uids. Both are empty for nodes not
            used by any cell.
        """
        below: set[int] = set()
        above: set[int] = set()
        for cell, local_index in self._cells_of_node.get(uid, []):
            (partner,) = connected_indices(cell.dim, local_index, AdjacencyMode.PRIMARY_AXIS)
            on_top = bool(local_index >> cell.kind.vertical_axis & 1)
            (below if on_top else above).add(cell.nodes[partner].uid)
        return sorted(below), sorted(above)

    def edge_neighbours(self, uid: int) -> list[int]:
        """Nodes sharing a cell edge with node `uid`."""
        neighbours: set[int] = set()
        for cell, local_index in self._cells_of_node.get(uid, []):
            for j in connected_indices(cell.dim, local_index, AdjacencyMode.FULL):
                neighbours.add(cell.nodes[j].uid)
        return sorted(neighbours)

    def find_cell(
        self,
        point: list[float] | npt.NDArray[np.float64],
        mapping: Mapping,
        rng: Optional[np.random.Generator] = None,
    ) -> tuple[Optional[FiniteElement], Optional[MappingResult]]:
        """
        Locate the cell containing `point` and its reference coordinates.

        Cells whose bounding box (slightly enlarged) misses the point are skipped;
        the remaining ones are tried with the robust resolver.

        Returns:
            (cell, result) for the first cell that maps the point, or (None, None).
        """
        point = np.asarray(point, dtype=np.float64)
        if rng is None:
            rng = np.random.default_rng()

        for cell in self.cells:
            coords = cell.coords
            lower, upper = coords.min(axis=0), coords.max(axis=0)
            pad = 1e-9 * max(float(np.max(upper - lower)), 1.0)
            if np.any(point < lower - pad) or np.any(point > upper + pad):
                continue
            result = try_mapping(point, cell, mapping, rng)
            if result.found:
                return cell, result

        logger.debug(f"Point {point} is not inside any cell of the mesh.")
        return None, None
