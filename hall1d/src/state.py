"""
State array layout, per-step cache and solver parameters.

The state array U has shape (n_vars, n_cells). Rows are laid out fluid by
fluid in the order the fluids are given (1, 2 or 3 rows depending on the
conservation law), followed by a single electron energy density row:

    [rho_0, (rho_0 u_0), (rho_0 E_0), rho_1, ..., n_eps]

n_eps = ne * (3/2) Te is stored in [eV/m³].
"""

import copy
import numpy as np
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .gas import CONSTANTS, PhysicalConstants
from .mesh import Grid1D
from .thermodynamics import Fluid, conserved_from_primitives

if TYPE_CHECKING:
    from .solver import SimulationConfig


class StateIndex:
    """Maps fluids and the electron energy to rows of the state array."""

    def __init__(self, fluids: List[Fluid]):
        self.fluids = list(fluids)
        self.ranges = []
        row = 0
        for fluid in self.fluids:
            self.ranges.append(slice(row, row + fluid.nvars))
            row += fluid.nvars

        self.n_eps = row
        self.n_vars = row + 1

        self.ions = [i for i, f in enumerate(self.fluids) if f.is_ion]
        self.neutrals = [i for i, f in enumerate(self.fluids) if not f.is_ion]

    def density_row(self, i: int) -> int:
        return self.ranges[i].start

    def momentum_row(self, i: int) -> Optional[int]:
        """Momentum row of fluid i, or None for ContinuityOnly fluids."""
        if not self.fluids[i].has_momentum:
            return None
        return self.ranges[i].start + 1

    @property
    def ion_rows(self) -> List[tuple]:
        """(density row, momentum row) of every ion fluid carrying momentum."""
        return [(self.density_row(i), self.momentum_row(i))
                for i in self.ions if self.fluids[i].has_momentum]

    def species_rows(self) -> Dict[str, int]:
        """Density row keyed by species symbol."""
        return {f.species.symbol: self.density_row(i) for i, f in enumerate(self.fluids)}

    def fluid_index(self, species) -> int:
        for i, f in enumerate(self.fluids):
            if f.species == species:
                return i
        raise ValueError(f"Species {species} is not one of the simulated fluids")

    def allocate(self, n_cells: int) -> np.ndarray:
        return np.zeros((self.n_vars, n_cells))

    def set_fluid(self, U: np.ndarray, i: int, rho, u=None, p=None) -> np.ndarray:
        """Fill the rows of fluid i from primitive variables."""
        fluid = self.fluids[i]
        rho = np.broadcast_to(np.asarray(rho, dtype=float), U.shape[1:])
        U[self.ranges[i]] = conserved_from_primitives(fluid, rho, u, p)
        return U


@dataclass
class Cache:
    """
    Derived per-cell quantities, recomputed from U every step.

    All arrays have one entry per cell except phi, which lives on edges.
    Temperatures and energies are in eV, pe in eV/m³.
    """
    ne: np.ndarray            # Electron number density [1/m³]
    Tev: np.ndarray           # Electron temperature [eV]
    pe: np.ndarray            # Electron pressure [eV/m³]
    B: np.ndarray             # Radial magnetic field [T]
    mu: np.ndarray            # Cross-field electron mobility [m²/(V·s)]
    nu_en: np.ndarray         # Electron-neutral collision frequency [1/s]
    nu_ei: np.ndarray         # Electron-ion collision frequency [1/s]
    nu_w: np.ndarray          # Wall collision frequency [1/s]
    nu_an: np.ndarray         # Anomalous collision frequency [1/s]
    nu_iz: np.ndarray         # Ionization collision frequency [1/s]
    nu_c: np.ndarray          # Classical collision frequency [1/s]
    nu_e: np.ndarray          # Total electron momentum transfer frequency [1/s]
    Z_eff: np.ndarray         # Effective ion charge state
    ji: np.ndarray            # Ion current density [A/m²]
    ue: np.ndarray            # Axial electron velocity [m/s]
    K: np.ndarray             # Electron kinetic energy [eV]
    grad_phi: np.ndarray      # Potential gradient [V/m]
    grad_pe: np.ndarray       # Electron pressure gradient [eV/m⁴]
    phi_cell: np.ndarray      # Potential interpolated to cells [V]
    phi: np.ndarray           # Potential on edges [V]
    Id: float = 0.0           # Discharge current [A]
    max_timestep: float = np.inf

    @classmethod
    def allocate(cls, n_cells: int, B: Optional[np.ndarray] = None) -> 'Cache':
        arrays = {}
        for f in fields(cls):
            if f.name in ('Id', 'max_timestep'):
                continue
            arrays[f.name] = np.zeros(n_cells - 1 if f.name == 'phi' else n_cells)
        cache = cls(**arrays)
        if B is not None:
            cache.B[:] = B
        return cache

    def copy(self) -> 'Cache':
        return copy.deepcopy(self)


@dataclass
class Params:
    """Everything the per-step update needs besides the state array."""
    grid: Grid1D
    index: StateIndex
    config: 'SimulationConfig'
    cache: Cache
    channel_area: float
    channel_length: float
    bc_left: Any
    bc_right: Any
    energy_bc_left: Any
    energy_bc_right: Any
    reactions: list = field(default_factory=list)
    flux_scheme: Any = None
    limiter: Any = None
    source_terms: Any = None
    potential_solver: Any = None
    anom_model: Any = None
    constants: PhysicalConstants = CONSTANTS
    dt: float = 1e-8
    iteration: int = 0

    @property
    def fluids(self) -> List[Fluid]:
        return self.index.fluids

    @property
    def ion_mass(self) -> float:
        """Mass of the simulated propellant atom [kg]."""
        return self.fluids[self.index.ions[0]].m if self.index.ions else self.fluids[0].m
