"""
Simulation driver for the 1D Hall thruster discharge.
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Optional

from .boundary import BoundaryCondition, EnergyBoundaryCondition, NeumannEnergy
from .electrons import AnomalousTransportModel, NoAnom
from .flux import FLUX_SCHEMES, get_flux_scheme
from .gas import CONSTANTS, PhysicalConstants
from .ionization import IonizationModel
from .mesh import SPT_100, Geometry1D, Grid1D
from .potential import POTENTIAL_SOLVERS, get_potential_solver
from .reconstruction import LIMITERS, get_limiter
from .sources import CompositeSourceTerm, SourceTerm
from .state import Cache, Params, StateIndex
from .thermodynamics import Fluid
from .timestepping import TIME_SCHEMES
from .update import StepResult, update_step

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """Configuration for the 1D Hall thruster solver."""
    dt: float = 1e-8                        # Fixed (or initial) time step [s]
    adaptive: bool = False                  # Propose cfl * max stable step after each step
    cfl: float = 0.8
    max_iter: int = 100000
    print_interval: int = 1000
    time_scheme: str = 'rk2'                # Options: 'rk4', 'rk2', 'euler'
    flux: str = 'hlle'                      # Options: 'hlle', 'rusanov', 'upwind'
    limiter: Optional[str] = None           # None for first order, else a MUSCL limiter name
    potential_solver: str = 'ohmic'         # Options: 'ohmic', 'tridiagonal'
    landmark: bool = False                  # LANDMARK electron pressure and collision conventions
    min_number_density: float = 1e6         # [1/m³]
    min_electron_temperature: float = 1.0   # [eV]
    discharge_voltage: float = 300.0        # Anode potential [V]
    cathode_potential: float = 0.0          # [V]
    wall_collision_freq: float = 1e7        # Inside the channel [1/s]
    wall_loss_coeff_in: float = 1.0
    wall_loss_coeff_out: float = 1.0

    def __post_init__(self):
        if self.time_scheme not in TIME_SCHEMES:
            raise ValueError(f"Unknown time scheme: {self.time_scheme}. "
                             "Options: 'rk4', 'rk2', 'euler'")
        if self.flux not in FLUX_SCHEMES:
            raise ValueError(f"Unknown flux scheme: {self.flux}. "
                             f"Options: {', '.join(FLUX_SCHEMES)}")
        if self.limiter is not None and self.limiter not in LIMITERS:
            raise ValueError(f"Unknown limiter: {self.limiter}. "
                             f"Options: {', '.join(LIMITERS)}")
        if self.potential_solver not in POTENTIAL_SOLVERS:
            raise ValueError(f"Unknown potential solver: {self.potential_solver}. "
                             f"Options: {', '.join(POTENTIAL_SOLVERS)}")
        if self.dt <= 0:
            raise ValueError(f"Time step must be positive, got {self.dt}")


class Solver1D:
    """
    1D multi-fluid Hall thruster discharge solver.

    Features:
    - Neutral and ion fluids with continuity, isothermal or full Euler equations
    - HLLE, Rusanov or upwind fluxes with optional MUSCL reconstruction
    - Ionization and ion acceleration source terms
    - Electron closures, discharge current and potential solved every step
    - Implicit electron energy update
    - Explicit time integration: RK4, RK2 (SSP) or forward Euler
    """

    def __init__(self, grid: Grid1D, fluids: List[Fluid],
                 config: SimulationConfig = None,
                 geometry: Geometry1D = SPT_100,
                 magnetic_field: Optional[np.ndarray] = None,
                 ionization_model: Optional[IonizationModel] = None,
                 anom_model: Optional[AnomalousTransportModel] = None,
                 constants: PhysicalConstants = CONSTANTS):
        """
        Initialize the solver.

        Args:
            grid: Computational grid
            fluids: Fluids in state-array order
            config: Solver configuration
            geometry: Thruster channel geometry
            magnetic_field: Radial magnetic field at cell centers [T], zero if None
            ionization_model: Builds the ionization reactions, none if None
            anom_model: Anomalous collision frequency model
            constants: Physical constants
        """
        self.grid = grid
        self.config = config if config is not None else SimulationConfig()
        self.index = StateIndex(fluids)

        # Reactions are validated and loaded once, before any stepping
        reactions = []
        if ionization_model is not None:
            reactions = ionization_model.load_reactions([f.species for f in fluids])

        limiter = get_limiter(self.config.limiter) if self.config.limiter is not None else None

        self.params = Params(
            grid=grid,
            index=self.index,
            config=self.config,
            cache=Cache.allocate(grid.n_cells, magnetic_field),
            channel_area=geometry.channel_area,
            channel_length=geometry.channel_length,
            bc_left=None,
            bc_right=None,
            energy_bc_left=NeumannEnergy(),
            energy_bc_right=NeumannEnergy(),
            reactions=reactions,
            flux_scheme=get_flux_scheme(self.config.flux),
            limiter=limiter,
            source_terms=CompositeSourceTerm(),
            potential_solver=get_potential_solver(self.config.potential_solver),
            anom_model=anom_model if anom_model is not None else NoAnom(),
            constants=constants,
            dt=self.config.dt,
        )

        self.time_step_func = TIME_SCHEMES[self.config.time_scheme]

        # Solution storage
        self.U = None
        self.time = 0.0
        self.iteration = 0
        self.dt = self.config.dt

    def set_boundary_conditions(self, bc_left: BoundaryCondition, bc_right: BoundaryCondition,
                                energy_bc_left: EnergyBoundaryCondition = None,
                                energy_bc_right: EnergyBoundaryCondition = None):
        """Set fluid and (optionally) electron energy boundary conditions."""
        self.params.bc_left = bc_left
        self.params.bc_right = bc_right
        if energy_bc_left is not None:
            self.params.energy_bc_left = energy_bc_left
        if energy_bc_right is not None:
            self.params.energy_bc_right = energy_bc_right

    def add_source_term(self, source: SourceTerm):
        """Add a source term to the solver."""
        self.params.source_terms.add(source)

    def set_initial_condition(self, U: np.ndarray):
        """
        Set the initial state array and compute the derived quantities for it.

        The electron energy row is kept as given; it is first advanced by the
        first call to step().
        """
        if U.shape != (self.index.n_vars, self.grid.n_cells):
            raise ValueError(f"Initial state must have shape {(self.index.n_vars, self.grid.n_cells)}, "
                             f"got {U.shape}")
        if self.params.bc_left is None or self.params.bc_right is None:
            raise ValueError("Boundary conditions must be set before the initial condition")

        self.U = np.array(U, dtype=float)
        self.time = 0.0
        self.iteration = 0
        self.dt = self.config.dt

        result = update_step(self.U, self.params, self.time, self.dt, advance_energy=False)
        if result.terminated:
            raise ValueError(f"Initial condition is not finite ({result.reason.value})")

    def step(self) -> StepResult:
        """
        Perform one time step.

        The new state is committed only if it is finite. On NaN/Inf the
        returned result carries the termination reason and the solver state
        is left at the previous step.
        """
        dt = self.dt
        U_new = self.time_step_func(self.U, dt, self.params)

        result = update_step(U_new, self.params, self.time + dt, dt)
        if result.terminated:
            return result

        self.U = result.U
        self.time += dt
        self.iteration += 1
        self.dt = result.dt
        return result

    def solve(self, end_time: float) -> Dict:
        """
        Run the solver up to end_time, the iteration limit, or divergence.

        Args:
            end_time: Final simulation time [s]

        Returns:
            Dictionary with run info
        """
        if self.U is None:
            raise ValueError("Initial condition must be set before solving")

        logger.info("Starting 1D Hall thruster solver: %d cells, fluids: %s",
                    self.grid.n_cells, ', '.join(str(f) for f in self.index.fluids))
        logger.info("Time scheme: %s, flux: %s, dt: %.3e s, adaptive: %s",
                    self.config.time_scheme, self.config.flux, self.config.dt, self.config.adaptive)

        reason = None
        for _ in range(self.config.max_iter):
            if self.time >= end_time * (1 - 1e-12):
                break
            self.dt = min(self.dt, end_time - self.time)

            result = self.step()
            if result.terminated:
                reason = result.reason
                logger.warning("Terminated at t = %.4e s after %d iterations: %s",
                               self.time, self.iteration, reason.value)
                break

            if self.iteration % self.config.print_interval == 0:
                logger.info("Iter %6d, t = %.4e, dt = %.4e, Id = %.4f A, max Te = %.3f eV",
                            self.iteration, self.time, self.dt,
                            self.params.cache.Id, np.max(self.params.cache.Tev))

        return {
            'terminated': reason is not None,
            'reason': reason,
            'iterations': self.iteration,
            'time': self.time,
        }

    def snapshot(self):
        """Copies of the state array and the cache at the current time."""
        return self.U.copy(), self.params.cache.copy()
