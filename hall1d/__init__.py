"""
hall1d - 1D Hall Thruster Discharge Solver
==========================================

Re-exports all public components from hall1d.src
"""

from hall1d.src import (
    # Gases and species
    Gas,
    Species,
    Xenon,
    Krypton,
    # Grid
    Grid1D,
    Geometry1D,
    SPT_100,
    # Fluids
    ContinuityOnly,
    IsothermalEuler,
    EulerEquations,
    Fluid,
    # Boundary conditions
    Dirichlet,
    Neumann,
    DirichletIonBohm,
    NeumannIonBohm,
    DirichletEnergy,
    NeumannEnergy,
    DirichletEnergyUpdateDensity,
    # Ionization
    IonizationFit,
    IonizationLUT,
    LandmarkIonizationLUT,
    # Flux schemes
    HLLEFlux,
    RusanovFlux,
    UpwindFlux,
    # Source terms
    IonizationSource,
    IonAccelerationSource,
    # Update
    TerminationReason,
    update_step,
    # Solver
    Solver1D,
    SimulationConfig,
)

__all__ = [
    'Gas',
    'Species',
    'Xenon',
    'Krypton',
    'Grid1D',
    'Geometry1D',
    'SPT_100',
    'ContinuityOnly',
    'IsothermalEuler',
    'EulerEquations',
    'Fluid',
    'Dirichlet',
    'Neumann',
    'DirichletIonBohm',
    'NeumannIonBohm',
    'DirichletEnergy',
    'NeumannEnergy',
    'DirichletEnergyUpdateDensity',
    'IonizationFit',
    'IonizationLUT',
    'LandmarkIonizationLUT',
    'HLLEFlux',
    'RusanovFlux',
    'UpwindFlux',
    'IonizationSource',
    'IonAccelerationSource',
    'TerminationReason',
    'update_step',
    'Solver1D',
    'SimulationConfig',
]
