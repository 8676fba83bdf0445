from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt

if TYPE_CHECKING:
    import numpy.typing as npt
    from matplotlib.axes import Axes

# Hexahedron outline, lexicographic vertex ordering
BOTTOM_RING = [0, 1, 3, 2, 0]
TOP_RING = [4, 5, 7, 6, 4]
VERTICAL_EDGES = [(0, 4), (1, 5), (2, 6), (3, 7)]

CELL_BASE_COLOR = (0.5, 0.5, 0.5)


@dataclass
class StreamlineCell:
    """
    A hexahedral cell visited by a streamline.

    Attributes:
        nodes: (8, 3) vertex coordinates in lexicographic order; empty if unknown.
        kind: Cell category used for colouring (1 and 2 are highlighted).
    """
    nodes: npt.NDArray[np.float64] = field(default_factory=lambda: np.empty((0, 3)))
    kind: int = 0


@dataclass
class Streamline:
    """A traced particle path and the cells it crossed."""
    points: npt.NDArray[np.float64]
    cells: list[StreamlineCell] = field(default_factory=list)


def cell_color(kind: int) -> tuple[float, float, float]:
    """Grey for ordinary cells, red-tinted for kind 1, green-tinted for kind 2."""
    color = list(CELL_BASE_COLOR)
    if kind == 1:
        color[0] = 1.0
    elif kind == 2:
        color[1] = 1.0
    return tuple(color)


def plot_cell(ax: Axes, nodes: npt.NDArray[np.float64], kind: int) -> None:
    """Draw the twelve edges of a hexahedral cell."""
    color = cell_color(kind)
    for ring in (BOTTOM_RING, TOP_RING):
        ax.plot(nodes[ring, 0], nodes[ring, 1], nodes[ring, 2], color=color)
    for a, b in VERTICAL_EDGES:
        ax.plot(nodes[[a, b], 0], nodes[[a, b], 1], nodes[[a, b], 2], color=color)


def plot_streamlines(
    streamlines: Sequence[Streamline],
    ids: Sequence[int],
    show_cells: bool = False,
    ax: Optional[Axes] = None,
) -> Axes:
    """
    Plot selected streamlines in 3D.

    Args:
        streamlines: All traced streamlines.
        ids: Indices of the streamlines to draw.
        show_cells: Also draw the outline of every cell each streamline visited.
        ax: 3D axes to draw into; a new figure is created when None.

    Returns:
        The axes the streamlines were drawn into.
    """
    if ax is None:
        fig = plt.figure()
        ax = fig.add_subplot(projection="3d")

    for sid in ids:
        streamline = streamlines[sid]
        xyz = np.asarray(streamline.points, dtype=np.float64).reshape(-1, 3)
        ax.plot(xyz[:, 0], xyz[:, 1], xyz[:, 2], '.-')

        if show_cells:
            for cell in streamline.cells:
                if len(cell.nodes):
                    plot_cell(ax, np.asarray(cell.nodes, dtype=np.float64), cell.kind)

    ax.set_xlabel("X Coordinate")
    ax.set_ylabel("Y Coordinate")
    ax.set_zlabel("Z Coordinate")
    return ax
