"""
Electrostatic potential and gradients.

The potential lives on cell edges. A PotentialSolver turns the electron
closures of the current step into edge potentials; compute_gradients then
derives the cell potential, its gradient and the electron pressure gradient.
"""

import numpy as np
from abc import ABC, abstractmethod
from scipy.linalg import solve_banded

from .gas import CONSTANTS, PhysicalConstants
from .mesh import Grid1D
from .state import Cache


# --- Finite differences on non-uniform 3-point stencils ---

def forward_difference(f0, f1, f2, x0, x1, x2):
    """Derivative at x0 from samples at x0 < x1 < x2."""
    h1 = x1 - x0
    h2 = x2 - x1
    return (-(2 * h1 + h2) / (h1 * (h1 + h2)) * f0
            + (h1 + h2) / (h1 * h2) * f1
            - h1 / (h2 * (h1 + h2)) * f2)


def backward_difference(f0, f1, f2, x0, x1, x2):
    """Derivative at x2 from samples at x0 < x1 < x2."""
    h1 = x1 - x0
    h2 = x2 - x1
    return (h2 / (h1 * (h1 + h2)) * f0
            - (h1 + h2) / (h1 * h2) * f1
            + (h1 + 2 * h2) / (h2 * (h1 + h2)) * f2)


def central_difference(f0, f1, f2, x0, x1, x2):
    """Derivative at x1 from samples at x0 < x1 < x2."""
    h1 = x1 - x0
    h2 = x2 - x1
    return (-h2 / (h1 * (h1 + h2)) * f0
            + (h2 - h1) / (h1 * h2) * f1
            + h1 / (h2 * (h1 + h2)) * f2)


def lerp(x, x0, x1, y0, y1):
    """Linear interpolation between (x0, y0) and (x1, y1)."""
    t = (x - x0) / (x1 - x0)
    return y0 + t * (y1 - y0)


def compute_gradients(grid: Grid1D, cache: Cache):
    """
    Cell potential, potential gradient and electron pressure gradient.

    phi_cell: boundary cells take the nearest edge value, interior cells
    interpolate linearly between their two bounding edges.
    grad_phi: first difference of the bounding edges in interior cells,
    3-point one-sided stencils over the outermost edges at boundary cells.
    grad_pe: 3-point centered stencil in interior cells, 3-point one-sided
    stencils at boundary cells.
    """
    z_cell, z_edge = grid.cell_centers, grid.edges
    phi, pe = cache.phi, cache.pe

    # Interpolate potential to cells
    cache.phi_cell[0] = phi[0]
    cache.phi_cell[-1] = phi[-1]
    cache.phi_cell[1:-1] = lerp(z_cell[1:-1], z_edge[:-1], z_edge[1:], phi[:-1], phi[1:])

    # Potential gradient
    cache.grad_phi[0] = forward_difference(phi[0], phi[1], phi[2],
                                           z_edge[0], z_edge[1], z_edge[2])
    cache.grad_phi[1:-1] = (phi[1:] - phi[:-1]) / (z_edge[1:] - z_edge[:-1])
    cache.grad_phi[-1] = backward_difference(phi[-3], phi[-2], phi[-1],
                                             z_edge[-3], z_edge[-2], z_edge[-1])

    # Pressure gradient
    cache.grad_pe[0] = forward_difference(pe[0], pe[1], pe[2],
                                          z_cell[0], z_cell[1], z_cell[2])
    cache.grad_pe[1:-1] = central_difference(pe[:-2], pe[1:-1], pe[2:],
                                             z_cell[:-2], z_cell[1:-1], z_cell[2:])
    cache.grad_pe[-1] = backward_difference(pe[-3], pe[-2], pe[-1],
                                            z_cell[-3], z_cell[-2], z_cell[-1])


# --- Potential solvers ---

class PotentialSolver(ABC):
    """Computes the potential on edges from the electron closures."""

    @abstractmethod
    def solve(self, grid: Grid1D, cache: Cache, V_L: float, V_R: float,
              constants: PhysicalConstants = CONSTANTS) -> np.ndarray:
        """
        Args:
            grid: Computational grid
            cache: Current mobility, densities, currents and pressure gradient
            V_L, V_R: Anode (left) and cathode (right) potentials [V]
            constants: Physical constants

        Returns:
            Potential on edges (n_edges), also stored in cache.phi
        """
        pass


class OhmicPotentialSolver(PotentialSolver):
    """
    Integrate Ohm's law edge to edge from the anode.

        grad_phi = ue / mu + grad_pe / ne

    The field in interior cell i is applied across its width between
    edges i-1 and i.
    """

    def solve(self, grid, cache, V_L, V_R, constants=CONSTANTS):
        E_cell = cache.ue / cache.mu + cache.grad_pe / cache.ne
        dz = grid.edges[1:] - grid.edges[:-1]

        phi = cache.phi
        phi[0] = V_L
        phi[1:] = V_L + np.cumsum(dz * E_cell[1:-1])
        return phi


class TridiagonalPotentialSolver(PotentialSolver):
    """
    Solve current continuity d/dz (je + ji) = 0 for the edge potentials.

    With je = -e ne mu grad_phi + e mu grad_pe, each interior edge k gives

        sigma_{k+1} (phi_{k+1} - phi_k) / dz_{k+1} - sigma_k (phi_k - phi_{k-1}) / dz_k
            = g_{k+1} - g_k

    where sigma = e ne mu and g = e mu grad_pe + ji are evaluated in the
    interior cells between edges. Both end potentials are fixed.
    """

    def solve(self, grid, cache, V_L, V_R, constants=CONSTANTS):
        e = constants.e
        n_edges = grid.n_edges
        dz = grid.edges[1:] - grid.edges[:-1]     # interior cell widths

        sigma = (e * cache.ne * cache.mu)[1:-1]
        g = (e * cache.mu * cache.grad_pe + cache.ji)[1:-1]
        a = sigma / dz                            # coupling across each interior cell

        ab = np.zeros((3, n_edges))               # banded storage (upper, diag, lower)
        b = np.zeros(n_edges)

        # Dirichlet rows
        ab[1, 0] = 1.0
        ab[1, -1] = 1.0
        b[0] = V_L
        b[-1] = V_R

        k = np.arange(1, n_edges - 1)
        ab[1, k] = -(a[k - 1] + a[k])
        ab[0, k + 1] = a[k]
        ab[2, k - 1] = a[k - 1]
        b[k] = g[k] - g[k - 1]

        cache.phi[:] = solve_banded((1, 1), ab, b)
        return cache.phi


POTENTIAL_SOLVERS = {
    'ohmic': OhmicPotentialSolver,
    'tridiagonal': TridiagonalPotentialSolver,
}


def get_potential_solver(name: str) -> PotentialSolver:
    if name not in POTENTIAL_SOLVERS:
        raise ValueError(f"Unknown potential solver: {name}. Options: {', '.join(POTENTIAL_SOLVERS)}")
    return POTENTIAL_SOLVERS[name]()
