"""
Boundary conditions for the 1D multi-fluid solver.

The first and last cells of the state array are boundary cells. A boundary
condition overwrites exactly one of them in place, given the side
('left' or 'right').
"""

import numpy as np
from abc import ABC, abstractmethod

from .gas import CONSTANTS, PhysicalConstants
from .state import StateIndex


def boundary_columns(side: str):
    """Return (boundary cell, adjacent interior cell) column indices."""
    if side == 'left':
        return 0, 1
    elif side == 'right':
        return -1, -2
    raise ValueError(f"side must be either 'left' or 'right', got {side!r}")


def bohm_velocity(Tev: float, m_ion: float, constants: PhysicalConstants = CONSTANTS) -> float:
    """Minimum ion speed at a sheath edge [m/s]."""
    return np.sqrt(2 / 3 * constants.e * Tev / m_ion)


class BoundaryCondition(ABC):
    """Abstract base class for fluid boundary conditions."""

    @abstractmethod
    def apply(self, U: np.ndarray, side: str, index: StateIndex,
              Tev: float = 0.0, m_ion: float = 1.0,
              constants: PhysicalConstants = CONSTANTS) -> np.ndarray:
        """
        Apply boundary condition to the boundary cell.

        Args:
            U: State array (n_vars, n_cells), modified in place
            side: 'left' or 'right'
            index: State array layout
            Tev: Electron temperature at the boundary [eV]
            m_ion: Ion mass [kg]
            constants: Physical constants

        Returns:
            U with the boundary cell set
        """
        pass


class Dirichlet(BoundaryCondition):
    """Fixed state. The state vector fills the leading rows of the boundary cell."""

    def __init__(self, state):
        self.state = np.asarray(state, dtype=float)

    def apply(self, U, side, index, Tev=0.0, m_ion=1.0, constants=CONSTANTS):
        b, _ = boundary_columns(side)
        U[:len(self.state), b] = self.state
        return U


class Neumann(BoundaryCondition):
    """Zero gradient: copy the fluid rows of the adjacent interior cell."""

    def apply(self, U, side, index, Tev=0.0, m_ion=1.0, constants=CONSTANTS):
        b, i = boundary_columns(side)
        U[:index.n_eps, b] = U[:index.n_eps, i]
        return U


class Reflective(BoundaryCondition):
    """Closed wall: mirror the interior cell and reverse its momentum."""

    def apply(self, U, side, index, Tev=0.0, m_ion=1.0, constants=CONSTANTS):
        b, i = boundary_columns(side)
        U[:index.n_eps, b] = U[:index.n_eps, i]
        for k in range(len(index.fluids)):
            row = index.momentum_row(k)
            if row is not None:
                U[row, b] = -U[row, i]
        return U


def _apply_bohm_left(U, index, u_bohm):
    """Ions leave through the left boundary at least at the Bohm speed."""
    for rho_row, mom_row in index.ion_rows:
        boundary_flux = U[mom_row, 1]
        boundary_velocity = min(-u_bohm, boundary_flux / U[rho_row, 1])
        U[rho_row, 0] = boundary_flux / boundary_velocity
        U[mom_row, 0] = boundary_flux


def _apply_bohm_right(U, index, u_bohm):
    """Ions leave through the right boundary at least at the Bohm speed."""
    for rho_row, mom_row in index.ion_rows:
        boundary_flux = U[mom_row, -2]
        boundary_velocity = max(boundary_flux / U[rho_row, -2], u_bohm)
        boundary_density = boundary_flux / boundary_velocity
        U[rho_row, -1] = boundary_density
        U[mom_row, -1] = boundary_density * boundary_velocity


class DirichletIonBohm(BoundaryCondition):
    """
    Fixed neutral state with the ion Bohm condition.

    At the anode (left) the ions reaching the wall recombine and re-enter
    as neutrals moving at neutral_velocity, so the neutral density grows by
    the recombined ion mass flux.
    """

    def __init__(self, state, neutral_velocity: float = 150.0):
        self.state = np.asarray(state, dtype=float)
        self.neutral_velocity = neutral_velocity

    def apply(self, U, side, index, Tev=0.0, m_ion=1.0, constants=CONSTANTS):
        b, _ = boundary_columns(side)
        u_bohm = bohm_velocity(Tev, m_ion, constants)
        U[:len(self.state), b] = self.state

        if side == 'left':
            recombined = sum(U[mom_row, 1] for _, mom_row in index.ion_rows)
            if index.neutrals:
                U[index.density_row(index.neutrals[0]), 0] -= recombined / self.neutral_velocity
            _apply_bohm_left(U, index, u_bohm)
        else:
            _apply_bohm_right(U, index, u_bohm)
        return U


class NeumannIonBohm(BoundaryCondition):
    """Zero gradient for neutrals and ion density with the ion Bohm condition."""

    def apply(self, U, side, index, Tev=0.0, m_ion=1.0, constants=CONSTANTS):
        b, i = boundary_columns(side)
        u_bohm = bohm_velocity(Tev, m_ion, constants)
        U[:index.n_eps, b] = U[:index.n_eps, i]

        if side == 'left':
            _apply_bohm_left(U, index, u_bohm)
        else:
            # make sure ui[end] >= u_bohm
            for rho_row, mom_row in index.ion_rows:
                U[mom_row, -1] = max(U[mom_row, -2], u_bohm * U[rho_row, -1])
        return U


class EnergyBoundaryCondition(ABC):
    """Abstract base class for electron energy boundary conditions."""

    @abstractmethod
    def apply(self, U: np.ndarray, side: str, index: StateIndex) -> np.ndarray:
        """Set the electron energy density row of the boundary cell."""
        pass


class DirichletEnergy(EnergyBoundaryCondition):
    """Fixed electron energy density [eV/m³]."""

    def __init__(self, state: float):
        self.state = state

    def apply(self, U, side, index):
        b, _ = boundary_columns(side)
        U[index.n_eps, b] = self.state
        return U


class DirichletEnergyUpdateDensity(EnergyBoundaryCondition):
    """
    Fixed energy per electron [eV].

    The energy density follows the boundary electron density, so the
    electron temperature stays fixed while the plasma density changes.
    """

    def __init__(self, int_energy: float):
        self.int_energy = int_energy

    def apply(self, U, side, index):
        b, _ = boundary_columns(side)
        ne = 0.0
        for i in index.ions:
            fluid = index.fluids[i]
            ne += fluid.Z * U[index.density_row(i), b] / fluid.m
        U[index.n_eps, b] = self.int_energy * ne
        return U


class NeumannEnergy(EnergyBoundaryCondition):
    """Zero gradient electron energy density."""

    def apply(self, U, side, index):
        b, i = boundary_columns(side)
        U[index.n_eps, b] = U[index.n_eps, i]
        return U
