"""
1D Hall Thruster Discharge Solver Package
=========================================

A finite-volume multi-fluid solver for the discharge channel of a Hall
effect thruster.

Features:
- Neutral and ion fluids (continuity, isothermal Euler or Euler equations)
- HLLE / Rusanov / upwind fluxes, optional MUSCL reconstruction
- Ionization and ion acceleration source terms
- Electron closures: collision frequencies, mobility, anomalous transport
- Discharge current, potential and gradient solve every step
- Implicit electron energy update
- NaN/Inf detection with a typed termination reason

State representation (one row per conserved variable, one column per cell):
    rho_j, rho_j u_j, rho_j E_j  - fluid j rows (as many as its conservation law)
    n_eps                         - electron energy density ne * 3/2 Te [eV/m³]

Example:
    fluids = [Fluid(Species(Xenon, 0), ContinuityOnly(u=300.0, T=500.0)),
              Fluid(Species(Xenon, 1), IsothermalEuler(T=500.0))]
    solver = Solver1D(Grid1D.from_geometry(SPT_100, 100), fluids)
    solver.set_boundary_conditions(Dirichlet(left_state), Neumann())
    solver.set_initial_condition(U0)
    info = solver.solve(end_time=1e-5)
"""

from .gas import PhysicalConstants, CONSTANTS, Gas, Species, Xenon, Krypton
from .mesh import Grid1D, Geometry1D, SPT_100, gaussian_magnetic_field
from .thermodynamics import (
    ConservationLawType, ContinuityOnly, IsothermalEuler, EulerEquations, Fluid,
)
from .state import StateIndex, Cache, Params
from .boundary import (
    BoundaryCondition, Dirichlet, Neumann, Reflective, DirichletIonBohm, NeumannIonBohm,
    EnergyBoundaryCondition, DirichletEnergy, NeumannEnergy, DirichletEnergyUpdateDensity,
)
from .ionization import (
    IonizationReaction, Biexponential, RateTable, IonizationModel,
    IonizationFit, IonizationLUT, LandmarkIonizationLUT,
)
from .flux import FluxScheme, HLLEFlux, RusanovFlux, UpwindFlux
from .sources import SourceTerm, IonizationSource, IonAccelerationSource, CompositeSourceTerm
from .electrons import AnomalousTransportModel, NoAnom, Bohm, TwoZoneBohm
from .potential import PotentialSolver, OhmicPotentialSolver, TridiagonalPotentialSolver
from .update import TerminationReason, StepResult, update_step, update_values
from .solver import Solver1D, SimulationConfig

__all__ = [
    # Gases and species
    'PhysicalConstants',
    'CONSTANTS',
    'Gas',
    'Species',
    'Xenon',
    'Krypton',

    # Grid
    'Grid1D',
    'Geometry1D',
    'SPT_100',
    'gaussian_magnetic_field',

    # Fluids
    'ConservationLawType',
    'ContinuityOnly',
    'IsothermalEuler',
    'EulerEquations',
    'Fluid',

    # State
    'StateIndex',
    'Cache',
    'Params',

    # Boundary conditions
    'BoundaryCondition',
    'Dirichlet',
    'Neumann',
    'Reflective',
    'DirichletIonBohm',
    'NeumannIonBohm',
    'EnergyBoundaryCondition',
    'DirichletEnergy',
    'NeumannEnergy',
    'DirichletEnergyUpdateDensity',

    # Ionization
    'IonizationReaction',
    'Biexponential',
    'RateTable',
    'IonizationModel',
    'IonizationFit',
    'IonizationLUT',
    'LandmarkIonizationLUT',

    # Flux schemes
    'FluxScheme',
    'HLLEFlux',
    'RusanovFlux',
    'UpwindFlux',

    # Source terms
    'SourceTerm',
    'IonizationSource',
    'IonAccelerationSource',
    'CompositeSourceTerm',

    # Electrons
    'AnomalousTransportModel',
    'NoAnom',
    'Bohm',
    'TwoZoneBohm',

    # Potential
    'PotentialSolver',
    'OhmicPotentialSolver',
    'TridiagonalPotentialSolver',

    # Update
    'TerminationReason',
    'StepResult',
    'update_step',
    'update_values',

    # Solver
    'Solver1D',
    'SimulationConfig',
]

__version__ = '1.0.0'
