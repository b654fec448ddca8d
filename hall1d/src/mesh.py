"""
1D grid and thruster geometry.

The grid stores n_edges = n_cells - 1 edges. The first and last cells are
boundary cells sitting exactly on the first and last edge; every interior
cell lies between two consecutive edges:

    cell:   0     1     2    ...   n-2    n-1
    edge:   0  |  0  1  |  1  ... n-3 | n-2
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Geometry1D:
    """Annular Hall thruster channel."""
    channel_length: float       # [m]
    inner_radius: float         # [m]
    outer_radius: float         # [m]
    domain_length: float        # [m]

    @property
    def channel_area(self) -> float:
        """Channel cross-sectional area [m²]."""
        return np.pi * (self.outer_radius**2 - self.inner_radius**2)


SPT_100 = Geometry1D(
    channel_length=0.025,
    inner_radius=0.0345,
    outer_radius=0.05,
    domain_length=0.05,
)


class Grid1D:
    """
    Structured 1D grid of cell centers and edges.

    Attributes:
        cell_centers: Cell center positions (n_cells)
        edges: Edge positions (n_cells - 1)
        dz_cell: Width of each cell between its bounding edges (n_cells)
        dz_edge: Distance between neighbouring cell centers (n_cells - 1)
    """

    def __init__(self, edges: np.ndarray, cell_centers: Optional[np.ndarray] = None):
        edges = np.array(edges, dtype=float)
        if cell_centers is None:
            cell_centers = np.concatenate((
                edges[:1], 0.5 * (edges[:-1] + edges[1:]), edges[-1:]
            ))
        cell_centers = np.array(cell_centers, dtype=float)

        if len(edges) != len(cell_centers) - 1:
            raise ValueError(
                f"Grid needs n_cells - 1 edges, got {len(edges)} edges "
                f"for {len(cell_centers)} cells"
            )
        if np.any(np.diff(edges) <= 0):
            raise ValueError("Grid edges must be strictly increasing")

        self.edges = edges
        self.cell_centers = cell_centers
        self.n_cells = len(cell_centers)
        self.n_edges = len(edges)

        # Interior cells span [edge[i-1], edge[i]]; boundary cells have zero width
        self.dz_cell = np.zeros(self.n_cells)
        self.dz_cell[1:-1] = edges[1:] - edges[:-1]
        self.dz_edge = cell_centers[1:] - cell_centers[:-1]

        for arr in (self.edges, self.cell_centers, self.dz_cell, self.dz_edge):
            arr.flags.writeable = False

    @classmethod
    def uniform(cls, z_min: float, z_max: float, n_cells: int) -> 'Grid1D':
        """
        Uniform grid with n_cells interior cells (n_cells + 2 cells in total).

        Args:
            z_min, z_max: Domain bounds [m]
            n_cells: Number of interior cells
        """
        return cls(np.linspace(z_min, z_max, n_cells + 1))

    @classmethod
    def from_geometry(cls, geometry: Geometry1D, n_cells: int) -> 'Grid1D':
        """Uniform grid spanning the thruster domain."""
        return cls.uniform(0.0, geometry.domain_length, n_cells)

    def __len__(self):
        return self.n_cells


def gaussian_magnetic_field(z: np.ndarray, B_max: float, channel_length: float,
                            width_in: float = 0.011, width_out: float = 0.018) -> np.ndarray:
    """
    Radial magnetic field peaking at the channel exit.

    Args:
        z: Axial positions [m]
        B_max: Peak field [T]
        channel_length: Channel length, location of the peak [m]
        width_in, width_out: Gaussian widths inside/outside the channel [m]
    """
    z = np.asarray(z, dtype=float)
    width = np.where(z < channel_length, width_in, width_out)
    return B_max * np.exp(-0.5 * ((z - channel_length) / width)**2)
